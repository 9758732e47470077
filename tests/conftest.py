# tests/conftest.py

from __future__ import annotations

import sys
from pathlib import Path

# Ensure src/ is on sys.path for test imports like `import spec`, `import validation`,
# and the project root for `tests.fakes`.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = PROJECT_ROOT / "src"

for path in (SRC_ROOT, PROJECT_ROOT):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))
