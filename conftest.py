"""
Root pytest configuration.

Puts src on the Python path before test collection so the top-level
packages import without an installed distribution.
"""

import sys
from pathlib import Path

src_path = str((Path(__file__).parent / "src").absolute())

if src_path not in sys.path:
    sys.path.insert(0, src_path)
