"""Root conftest.py: makes the src layout importable without installation.

This file is loaded by pytest before tests/conftest.py. When the package is
installed (``pip install -e .``) the path entry is redundant but harmless.
"""

import sys
from pathlib import Path

_SRC_PATH = str(Path(__file__).parent / "src")
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)
