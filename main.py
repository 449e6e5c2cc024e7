#!/usr/bin/env python3
"""
poclidex - interactive terminal Pokedex

Thin wrapper around the console entry point so the viewer can be started
from a checkout without installing it.

To run: python main.py [pokemon]
"""
import sys

from poclidex.cli import run

if __name__ == "__main__":
    sys.exit(run())
