"""Tools for looking at the local filesystem."""

from __future__ import annotations

import os
from datetime import datetime
from typing import Optional

from .protocol import ToolResult, text_result


def _path_argument(arguments: Optional[dict]) -> str:
    path = (arguments or {}).get("path")
    return path if isinstance(path, str) else ""


def get_current_working_directory(arguments: Optional[dict] = None) -> ToolResult:
    """Report the process's current working directory."""
    try:
        return text_result(os.getcwd())
    except OSError as err:
        return text_result(f"Error getting current directory: {err}")


def _describe(entry: os.DirEntry) -> Optional[str]:
    try:
        info = entry.stat(follow_symlinks=False)
        is_dir = entry.is_dir(follow_symlinks=False)
    except OSError:
        return None
    kind = "DIR" if is_dir else "FILE"
    modified = datetime.fromtimestamp(info.st_mtime).strftime("%Y-%m-%d %H:%M:%S")
    return f"{kind:<5} {info.st_size:>10} {modified} {entry.name}\n"


def list_directory(arguments: Optional[dict] = None) -> ToolResult:
    """List a directory (the working directory by default), sorted by name."""
    path = _path_argument(arguments)
    if not path:
        try:
            path = os.getcwd()
        except OSError as err:
            return text_result(f"Error getting current directory: {err}")

    try:
        with os.scandir(path) as scan:
            entries = sorted(scan, key=lambda entry: entry.name)
    except OSError as err:
        return text_result(f"Error reading directory {path}: {err}")

    lines = [f"Contents of {path}:\n"]
    lines.extend(line for line in map(_describe, entries) if line is not None)
    return text_result("".join(lines))


def read_file(arguments: Optional[dict] = None) -> ToolResult:
    """Return the contents of the file named by the ``path`` argument."""
    path = _path_argument(arguments)
    if not path:
        return text_result("Error: path parameter is required", is_error=True)
    try:
        with open(path, "rb") as handle:
            data = handle.read()
    except OSError as err:
        return text_result(f"Error reading file {path}: {err}")
    return text_result(data.decode("utf-8", errors="replace"))