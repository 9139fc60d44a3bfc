from __future__ import annotations

import sys
from pathlib import Path

# Running pytest from a checkout without `pip install -e .` (or with
# --import-mode=importlib) leaves the repo root off sys.path, so
# `import clean_onnx` would fail.
_REPO_ROOT = str(Path(__file__).resolve().parents[1])
if _REPO_ROOT not in sys.path:
    sys.path.insert(0, _REPO_ROOT)
