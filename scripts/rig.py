#!/usr/bin/env python3
"""
CLI: run rig actions on a composition JSON file without installing the package.
Usage:
  python scripts/rig.py new comp.json
  python scripts/rig.py create comp.json circular
  python scripts/rig.py apply comp.json --kind circular
See motionrig/cli.py for all commands.
"""
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from motionrig.cli import main

if __name__ == "__main__":
    sys.exit(main())
