"""Tools that change the system volume and speak text aloud."""

from __future__ import annotations

import shutil
import subprocess
import sys
from typing import Optional

from .protocol import ToolResult, text_result

_SENDKEYS = "(New-Object -ComObject WScript.Shell).SendKeys([char]{code})"

_VOLUME_COMMANDS: dict[str, dict[str, list[str]]] = {
    "darwin": {
        "up": ["osascript", "-e", "set volume output volume (output volume of (get volume settings) + 10)"],
        "down": ["osascript", "-e", "set volume output volume (output volume of (get volume settings) - 10)"],
        "mute": ["osascript", "-e", "set volume with output muted"],
        "unmute": ["osascript", "-e", "set volume without output muted"],
    },
    "linux": {
        "up": ["amixer", "sset", "Master", "5%+"],
        "down": ["amixer", "sset", "Master", "5%-"],
        "mute": ["amixer", "sset", "Master", "mute"],
        "unmute": ["amixer", "sset", "Master", "unmute"],
    },
    "windows": {
        "up": ["powershell", "-Command", _SENDKEYS.format(code=175)],
        "down": ["powershell", "-Command", _SENDKEYS.format(code=174)],
        "mute": ["powershell", "-Command", _SENDKEYS.format(code=173)],
        # The mute key toggles, so it also unmutes.
        "unmute": ["powershell", "-Command", _SENDKEYS.format(code=173)],
    },
}

_VERBS = {
    "up": ("increasing", "increased"),
    "down": ("decreasing", "decreased"),
    "mute": ("muting", "muted"),
    "unmute": ("unmuting", "unmuted"),
}


def _platform_name(platform: Optional[str]) -> str:
    platform = platform if platform is not None else sys.platform
    if platform.startswith("linux"):
        return "linux"
    if platform in ("win32", "cygwin", "windows"):
        return "windows"
    return platform


def volume_command(action: str, platform: Optional[str] = None) -> Optional[list[str]]:
    """The command performing ``action`` (up, down, mute, unmute), or None if unsupported."""
    if action not in _VERBS:
        raise ValueError(f"unknown volume action: {action!r}")
    commands = _VOLUME_COMMANDS.get(_platform_name(platform))
    return list(commands[action]) if commands is not None else None


def speak_command(message: str, platform: Optional[str] = None) -> Optional[list[str]]:
    """The text-to-speech command for ``message``, or None if unsupported."""
    name = _platform_name(platform)
    if name == "darwin":
        return ["say", message]
    if name == "linux":
        return ["espeak", message]
    if name == "windows":
        script = (
            "Add-Type -AssemblyName System.Speech; "
            f"(New-Object System.Speech.Synthesis.SpeechSynthesizer).Speak('{message}')"
        )
        return ["powershell", "-Command", script]
    return None


def _run(command: list[str]) -> Optional[str]:
    """Run ``command``; return a description of the failure, or None on success."""
    try:
        subprocess.run(
            command, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL, check=True
        )
    except subprocess.CalledProcessError as err:
        return f"exit status {err.returncode}"
    except OSError as err:
        return str(err)
    return None


def _change_volume(action: str) -> ToolResult:
    platform = _platform_name(None)
    if platform == "linux" and shutil.which("amixer") is None:
        return text_result("amixer is not installed. Please install alsa-utils.")
    command = volume_command(action, platform)
    if command is None:
        return text_result("Volume control not supported on this platform")
    doing, done = _VERBS[action]
    failure = _run(command)
    if failure is not None:
        return text_result(
            f"Error {doing} volume: {failure}. Command: {' '.join(command)}"
        )
    return text_result(f"Volume {done}")


def volume_up(arguments: Optional[dict] = None) -> ToolResult:
    """Raise the system volume."""
    return _change_volume("up")


def volume_down(arguments: Optional[dict] = None) -> ToolResult:
    """Lower the system volume."""
    return _change_volume("down")


def volume_mute(arguments: Optional[dict] = None) -> ToolResult:
    """Mute the system volume."""
    return _change_volume("mute")


def volume_unmute(arguments: Optional[dict] = None) -> ToolResult:
    """Unmute the system volume."""
    return _change_volume("unmute")


def speak(arguments: Optional[dict] = None) -> ToolResult:
    """Say the ``message`` argument aloud."""
    message = (arguments or {}).get("message")
    if not isinstance(message, str) or not message:
        return text_result("Error: message parameter is required", is_error=True)

    platform = _platform_name(None)
    if platform == "linux" and shutil.which("espeak") is None:
        return text_result("espeak is not installed. Please install espeak.")
    command = speak_command(message, platform)
    if command is None:
        return text_result("Text-to-speech not supported on this platform")
    failure = _run(command)
    if failure is not None:
        return text_result(
            f"Error speaking text: {failure}. Command: {' '.join(command)}"
        )
    return text_result(f"Spoke: {message}")