"""Levelled log lines written to standard error."""

from __future__ import annotations

import sys
from datetime import datetime


def write(level: str, message: str) -> None:
    """Write ``message`` tagged with ``level`` to standard error, with a timestamp."""
    stamp = datetime.now().strftime("%Y/%m/%d %H:%M:%S")
    line = f"{stamp} [{level}] {message}"
    if not line.endswith("\n"):
        line += "\n"
    sys.stderr.write(line)
    sys.stderr.flush()