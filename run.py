#!/usr/bin/env python3
"""
Launcher script for ette.
Run this script to use the command line tools without installing.
"""

import sys
import os

# Add the current directory to Python path so we can import ette
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from ette.main import main

if __name__ == "__main__":
    sys.exit(main())
