"""Test package for throne_ocr."""

import sys
from pathlib import Path


# Make the flat layout (throne_ocr/ and main.py at the repository root)
# importable when running ``pytest`` without installing the project.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))
