"""Clipboard paste with system-utility fallbacks."""

from __future__ import annotations

import subprocess

import pyperclip


def clipboard_paste() -> str | None:
    """Read text from the system clipboard, or *None* on failure."""
    try:
        text = pyperclip.paste()
        if text:
            return text
    except pyperclip.PyperclipException:
        pass

    for cmd in (
        ["xclip", "-selection", "clipboard", "-o"],
        ["xsel", "--clipboard", "--output"],
        ["wl-paste", "--no-newline"],
        ["pbpaste"],
    ):
        try:
            result = subprocess.run(
                cmd, capture_output=True, text=True, timeout=3,
            )
            if result.returncode == 0 and result.stdout:
                return result.stdout
        except (FileNotFoundError, OSError, subprocess.TimeoutExpired):
            continue

    return None
