"""An alarm tool that prints a reminder at a given time of day."""

from __future__ import annotations

import re
import threading
from datetime import datetime, timedelta
from typing import Optional

from .protocol import ToolResult, text_result

_TIME_PATTERN = re.compile(r"(\d{1,2}):(\d{2})")


def next_alarm_time(time_str: str, now: Optional[datetime] = None) -> datetime:
    """The next moment at ``time_str`` (HH:MM, 24-hour) at or after ``now``.

    Raises ValueError when the time cannot be parsed.
    """
    match = _TIME_PATTERN.fullmatch(time_str)
    if match is None:
        raise ValueError(f'cannot parse "{time_str}" as "15:04"')
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23:
        raise ValueError(f'parsing time "{time_str}": hour out of range')
    if minute > 59:
        raise ValueError(f'parsing time "{time_str}": minute out of range')

    now = now if now is not None else datetime.now()
    alarm = now.replace(hour=hour, minute=minute, second=0, microsecond=0)
    if alarm < now:
        alarm += timedelta(days=1)
    return alarm


def _ring(at: datetime, message: str) -> None:
    print(f"\n🔔 ALARM: {at:%H:%M:%S} - {message}", flush=True)


def set_alarm(arguments: Optional[dict] = None) -> ToolResult:
    """Schedule a reminder for the next occurrence of the given time."""
    arguments = arguments or {}
    time_str = arguments.get("time")
    if not isinstance(time_str, str) or not time_str:
        return text_result("Error: time parameter is required in HH:MM format", is_error=True)

    message = arguments.get("message")
    if not isinstance(message, str) or not message:
        message = "Alarm!"

    now = datetime.now()
    try:
        alarm = next_alarm_time(time_str, now)
    except ValueError as err:
        return text_result(
            f"Invalid time format. Use HH:MM (24-hour format): {err}", is_error=True
        )

    delay = max((alarm - now).total_seconds(), 0.0)
    timer = threading.Timer(delay, _ring, args=(alarm, message))
    timer.daemon = True
    timer.start()

    return text_result(f"Alarm set for {alarm:%Y-%m-%d %H:%M:%S} with message: {message}")