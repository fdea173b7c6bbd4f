#!/usr/bin/env python3
"""Convenience runner for the territory tracker analyser.

Usage:
    python run.py track.csv [--json]
"""
import sys

from territory_tracker.main import main

if __name__ == "__main__":
    sys.exit(main())
