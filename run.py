#!/usr/bin/env python
"""
Run the agent graph viewer from a source checkout without installing it.

Usage:
    python run.py [--demo] [--group-id ID]

Unhandled errors are written to crash_log.txt by the app's exception hook.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent / "src"))

from agentgraph_app.__main__ import main

if __name__ == "__main__":
    main()
