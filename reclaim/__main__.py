"""
Entry point for `python -m reclaim`.

Launches the TUI wizard by default, or CLI mode when any flags are given.
"""

from __future__ import annotations

import sys


def main():
    # Any command-line argument (beyond the program name) implies CLI mode.
    if len(sys.argv) > 1:
        from .cli import run_cli
        run_cli()
    else:
        from .core.config import effective_config
        from .core.log import setup_logging
        from .ui.app import run_gui

        config = effective_config()
        # Textual owns the terminal; only a log file may receive records
        setup_logging(config["log_level"], config["log_file"] or None, console=False)
        run_gui()


if __name__ == "__main__":
    main()
