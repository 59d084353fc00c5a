"""Shared utilities for ccreport: debug logging."""

import os
import sys

_DEBUG = bool(os.environ.get("CCREPORT_DEBUG", ""))


def debug(label: str, msg: str) -> None:
    """Print a debug message to stderr when CCREPORT_DEBUG is set."""
    if _DEBUG:
        print(f"[ccreport] {label}: {msg}", file=sys.stderr)
