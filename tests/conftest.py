import sys
from pathlib import Path

# Ensure the package can be imported without installation
ROOT_DIR = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT_DIR))
