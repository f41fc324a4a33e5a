"""Pytest configuration for the maze core tests."""
import sys
from pathlib import Path

# Repository root holds the maze_* modules.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
