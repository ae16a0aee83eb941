#!/usr/bin/env python3
"""Satellite launcher entry point"""

import sys

if __name__ == "__main__":
    from satellite.cli import main

    sys.dont_write_bytecode = True
    sys.exit(main())
