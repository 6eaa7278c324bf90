"""Tools that remember key/value information in a JSON file."""

from __future__ import annotations

import json
from typing import Any, Optional

from .protocol import ToolResult, text_result

STORAGE_FILE = "memory_store.json"


def _decode(raw: bytes) -> dict[str, str]:
    try:
        loaded: Any = json.loads(raw)
    except ValueError:
        return {}
    if not isinstance(loaded, dict):
        return {}
    return {key: value for key, value in loaded.items() if isinstance(value, str)}


def _encode(data: dict[str, str]) -> str:
    return json.dumps(data, indent=2, sort_keys=True, ensure_ascii=False)


def _load() -> dict[str, str]:
    try:
        with open(STORAGE_FILE, "rb") as handle:
            return _decode(handle.read())
    except OSError:
        return {}


def save_info(arguments: Optional[dict] = None) -> ToolResult:
    """Store ``value`` under ``key``; non-string values are stored as JSON."""
    arguments = arguments or {}
    key = arguments.get("key")
    if not isinstance(key, str) or not key:
        return text_result("Error: 'key' parameter is required", is_error=True)
    value = arguments.get("value")
    if not isinstance(value, str):
        try:
            value = json.dumps(value, separators=(",", ":"), ensure_ascii=False)
        except (TypeError, ValueError):
            value = ""

    data = _load()
    data[key] = value
    try:
        with open(STORAGE_FILE, "w", encoding="utf-8") as handle:
            handle.write(_encode(data))
    except OSError as err:
        return text_result(f"Error saving data: {err}", is_error=True)
    return text_result(f"Information saved under key: {key}")


def get_saved_info(arguments: Optional[dict] = None) -> ToolResult:
    """Return the value for ``key``, or everything stored when no key is given."""
    try:
        with open(STORAGE_FILE, "rb") as handle:
            data = _decode(handle.read())
    except OSError as err:
        return text_result(f"Error reading storage: {err}", is_error=True)

    key = (arguments or {}).get("key")
    if isinstance(key, str) and key:
        if key in data:
            return text_result(data[key])
        return text_result(f"No information found for key: {key}", is_error=True)
    return text_result(f"Stored information:\n{_encode(data)}")