#!/usr/bin/env python3
"""Entry point for the MeraBuchpan application.

Usage:
    API_KEY=... python main.py

Or with uv:
    uv run main.py

The API key can also live in a ``.env`` file. Without it the application
refuses to start.
"""

from merabuchpan.app import run

if __name__ == "__main__":
    run()
