#!/usr/bin/env python3
"""
RECLAIM — entry point.

Launches the recovery wizard TUI by default.
Pass any CLI flag to run the prompt-based recovery instead.

Usage:
    python reclaim.py                    # Launch TUI
    python reclaim.py --forgot           # CLI, find the wallet by phrase
    python reclaim.py --known 0xABC...   # CLI, recover a known wallet
"""

from reclaim.__main__ import main

if __name__ == "__main__":
    main()
