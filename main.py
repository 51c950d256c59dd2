#!/usr/bin/env python3
"""
Entry point for running WordQuarry from a source checkout.

Equivalent to the installed ``wordquarry`` console script.
"""

from __future__ import annotations

from wordquarry.cli import main

if __name__ == "__main__":
    main()
