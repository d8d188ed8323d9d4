"""
Data models: JSON-RPC 2.0 envelopes and the structured results tools return.
"""

from typing import Any, Dict, Optional

from mcp.types import ErrorData
from pydantic import BaseModel, ConfigDict, Field

JSONRPC_VERSION = "2.0"


# --- JSON-RPC envelopes ---

class JsonRpcRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    jsonrpc: str
    method: str
    params: Optional[Any] = None
    id: Optional[Any] = None


class JsonRpcResponse(BaseModel):
    """Exactly one of result/error is set; both keys are always serialized."""

    jsonrpc: str = JSONRPC_VERSION
    result: Optional[Any] = None
    error: Optional[ErrorData] = None
    id: Optional[Any] = None

    @classmethod
    def success(cls, request_id: Any, result: Any) -> "JsonRpcResponse":
        return cls(result=result, id=request_id)

    @classmethod
    def failure(cls, request_id: Any, code: int, message: str, data: Any = None) -> "JsonRpcResponse":
        return cls(error=ErrorData(code=code, message=message, data=data), id=request_id)

    def to_wire(self) -> Dict[str, Any]:
        error = None
        if self.error is not None:
            error = {"code": self.error.code, "message": self.error.message, "data": self.error.data}
        return {"jsonrpc": self.jsonrpc, "result": self.result, "error": error, "id": self.id}


# --- Tool results ---

class BalanceResult(BaseModel):
    balance: str = Field(..., description="Human-readable balance")
    raw_balance: str = Field(..., description="Balance in base units")
    symbol: str
    decimals: int


class PriceQuote(BaseModel):
    symbol: str
    price_usd: str = Field(..., description="Price in the quote asset (USD)")
    price_eth: str = Field(..., description="Price in the native asset")
    source: str
    pool_fee: Optional[int] = None
    pool_address: Optional[str] = None


class TransactionPayload(BaseModel):
    to: str
    data: str = Field(..., description="0x-prefixed calldata")
    value: str = "0"
    description: str


class SwapResult(BaseModel):
    estimated_output: str
    minimum_output: str
    gas_estimate_simulation: str
    transaction: TransactionPayload
    router_call_simulation: Dict[str, Any]
    simulation_note: str
    quoter_decode_error: Optional[str] = None
