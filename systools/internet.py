"""Tools that look up the current location and weather using curl."""

from __future__ import annotations

import json
import shutil
import subprocess
from typing import Any, Optional

from .protocol import ToolResult, text_result

LOCATION_URL = "http://ipinfo.io/json"
WEATHER_URL = "http://wttr.in/{location}?format=3"

_LOCATION_FIELDS = (
    ("ip", "IP"),
    ("city", "City"),
    ("region", "Region"),
    ("country", "Country"),
    ("loc", "Coordinates"),
    ("org", "Organization"),
    ("postal", "Postal Code"),
    ("timezone", "Timezone"),
)


def _describe_failure(err: Exception) -> str:
    if isinstance(err, subprocess.CalledProcessError):
        return f"exit status {err.returncode}"
    return str(err)


def _curl(url: str) -> tuple[list[str], bytes]:
    """Fetch ``url`` silently with curl; raises on failure."""
    command = ["curl", "-s", url]
    completed = subprocess.run(command, capture_output=True, check=True)
    return command, completed.stdout


def format_location(data: dict[str, Any]) -> str:
    """Render the string fields of an ipinfo-style record, one per line."""
    lines = [
        f"{label}: {data[key]}"
        for key, label in _LOCATION_FIELDS
        if isinstance(data.get(key), str)
    ]
    return "\n".join(lines).strip()


def get_current_location(arguments: Optional[dict] = None) -> ToolResult:
    """Look up the location of this machine's public IP address."""
    if shutil.which("curl") is None:
        return text_result(
            "curl is not installed. Please install curl to fetch location information."
        )

    command = ["curl", "-s", LOCATION_URL]
    try:
        command, output = _curl(LOCATION_URL)
    except (subprocess.CalledProcessError, OSError) as err:
        return text_result(
            f"Location service unavailable: {_describe_failure(err)}. "
            f"Command: {' '.join(command)}"
        )

    raw = output.decode("utf-8", errors="replace")
    try:
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError("response is not a JSON object")
    except ValueError as err:
        return text_result(f"Error parsing location data: {err}. Raw response: {raw}")

    formatted = format_location(data)
    if not formatted:
        return text_result(f"No location details found in response: {raw}")
    return text_result(formatted)


def _city_from_location() -> str:
    result = get_current_location()
    for line in result.text().split("\n"):
        if line.startswith("City:"):
            return line[len("City:"):].strip()
    return ""


def get_weather(arguments: Optional[dict] = None) -> ToolResult:
    """Report the weather for ``location``, or for the current location."""
    location = (arguments or {}).get("location")
    if not isinstance(location, str) or not location:
        location = _city_from_location() or "current"

    if shutil.which("curl") is None:
        return text_result(
            "curl is not installed. Please install curl to fetch weather information."
        )

    url = WEATHER_URL.format(location=location)
    command = ["curl", "-s", url]
    try:
        command, output = _curl(url)
    except (subprocess.CalledProcessError, OSError) as err:
        return text_result(
            f"Weather service unavailable or error fetching weather for '{location}': "
            f"{_describe_failure(err)}. Command: {' '.join(command)}"
        )
    return text_result(output.decode("utf-8", errors="replace").strip())