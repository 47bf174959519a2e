#!/usr/bin/env python3
"""SmokeTimer entry point.

Run with:
    python main.py
    python -m smoketimer
"""

from smoketimer.__main__ import main


if __name__ == "__main__":
    main()
