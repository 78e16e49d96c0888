"""Pytest configuration for the travel guide project."""
from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that import travel_guide works under pytest.
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
