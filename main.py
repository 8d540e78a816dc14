#!/usr/bin/env python3
"""
Launch the yard map viewer.

    python main.py --config map_config.json
"""
import sys

from yardmap.application.app import main

if __name__ == "__main__":
    sys.exit(main())
