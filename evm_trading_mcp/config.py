import os
from pathlib import Path
from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from .errors import ConfigError

# .env next to the package root, same place the server is launched from
DOTENV_PATH = Path(__file__).parent.parent / ".env"


class Settings(BaseModel):
    rpc_url: str = Field(..., min_length=1)
    private_key: str = Field(..., min_length=1)
    rpc_timeout: float = Field(30.0, gt=0)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    native_symbol: str = "ETH"

    @classmethod
    def from_env(cls, dotenv_path: Optional[Path] = DOTENV_PATH) -> "Settings":
        """Build settings from the environment, loading a .env file first if present."""
        if dotenv_path is not None:
            load_dotenv(dotenv_path=dotenv_path)

        rpc_url = os.getenv("ETHEREUM_RPC_URL")
        if not rpc_url:
            raise ConfigError("ETHEREUM_RPC_URL must be set")
        private_key = os.getenv("PRIVATE_KEY")
        if not private_key:
            raise ConfigError("PRIVATE_KEY must be set")

        try:
            return cls(
                rpc_url=rpc_url,
                private_key=private_key,
                rpc_timeout=os.getenv("RPC_TIMEOUT", "30"),
                log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
                native_symbol=os.getenv("NATIVE_SYMBOL", "ETH").upper(),
            )
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e
