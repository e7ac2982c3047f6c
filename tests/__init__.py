"""Pytest configuration file to set up the Python path for testing."""

import sys
from pathlib import Path

# project root holds configs.py and the 'src' package
root_dir = Path(__file__).parent.parent
sys.path.insert(0, str(root_dir))
