#!/usr/bin/env python3
"""
Script wrapper for the latencystats replay tool.
Equivalent to the ``latencystats`` console script.
"""

from latencystats.cli import main

if __name__ == "__main__":
    main()
