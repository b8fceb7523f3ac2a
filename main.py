#!/usr/bin/env python3
"""Habito — entry point.

Run with:
    python main.py
    python -m habito
"""

from habito.__main__ import main


if __name__ == "__main__":
    main()
