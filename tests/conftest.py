"""Pytest configuration for the port generator test suite."""

import sys
from pathlib import Path

# Translator packages are imported flat, the way main.py sees them.
ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT / "tools" / "port_generator"))
sys.path.insert(0, str(Path(__file__).parent))
