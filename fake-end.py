#!/usr/bin/env python3
"""
FakeEnd - mock backend APIs using YAML files

This is a convenience wrapper that calls the packaged CLI.
The actual implementation is in src/fakeend/cli.py

Usage:
    python fake-end.py run --dir mock_server --port 4000

For more information, see README.md
"""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent / "src"))

from fakeend.cli import main

if __name__ == '__main__':
    main()
