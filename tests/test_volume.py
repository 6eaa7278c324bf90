import shutil
import subprocess
import sys

import pytest

from systools.volume import (
    speak,
    speak_command,
    volume_command,
    volume_down,
    volume_mute,
    volume_unmute,
    volume_up,
)


@pytest.fixture
def linux_with_tools(monkeypatch):
    monkeypatch.setattr(sys, "platform", "linux")
    monkeypatch.setattr(shutil, "which", lambda name: f"/usr/bin/{name}")
    calls = []

    def fake_run(cmd, **kwargs):
        calls.append(list(cmd))
        return subprocess.CompletedProcess(cmd, 0)

    monkeypatch.setattr(subprocess, "run", fake_run)
    return calls


def test_linux_volume_commands():
    assert volume_command("up", "linux") == ["amixer", "sset", "Master", "5%+"]
    assert volume_command("down", "linux") == ["amixer", "sset", "Master", "5%-"]
    assert volume_command("mute", "linux") == ["amixer", "sset", "Master", "mute"]
    assert volume_command("unmute", "linux") == ["amixer", "sset", "Master", "unmute"]


def test_darwin_and_windows_commands():
    assert volume_command("mute", "darwin") == ["osascript", "-e", "set volume with output muted"]
    assert volume_command("up", "win32")[-1] == (
        "(New-Object -ComObject WScript.Shell).SendKeys([char]175)"
    )
    assert volume_command("mute", "win32") == volume_command("unmute", "win32")


def test_unsupported_platform_and_action():
    assert volume_command("up", "sunos5") is None
    assert speak_command("hello", "sunos5") is None
    with pytest.raises(ValueError):
        volume_command("louder", "linux")


def test_speak_commands():
    assert speak_command("hello", "darwin") == ["say", "hello"]
    assert speak_command("hello", "linux2") == ["espeak", "hello"]
    assert speak_command("hi there", "win32")[-1].endswith("Speak('hi there')")


@pytest.mark.parametrize(
    "tool, expected_text, expected_arg",
    [
        (volume_up, "Volume increased", "5%+"),
        (volume_down, "Volume decreased", "5%-"),
        (volume_mute, "Volume muted", "mute"),
        (volume_unmute, "Volume unmuted", "unmute"),
    ],
)
def test_volume_tools_run_amixer(linux_with_tools, tool, expected_text, expected_arg):
    result = tool({})
    assert result.text() == expected_text
    assert linux_with_tools == [["amixer", "sset", "Master", expected_arg]]


def test_missing_amixer(monkeypatch):
    monkeypatch.setattr(sys, "platform", "linux")
    monkeypatch.setattr(shutil, "which", lambda name: None)
    assert volume_up({}).text() == "amixer is not installed. Please install alsa-utils."


def test_unsupported_platform_tool(monkeypatch):
    monkeypatch.setattr(sys, "platform", "sunos5")
    assert volume_down({}).text() == "Volume control not supported on this platform"
    assert speak({"message": "hi"}).text() == "Text-to-speech not supported on this platform"


def test_volume_command_failure(monkeypatch, linux_with_tools):
    def failing_run(cmd, **kwargs):
        raise subprocess.CalledProcessError(1, cmd)

    monkeypatch.setattr(subprocess, "run", failing_run)
    text = volume_up({}).text()
    assert text == "Error increasing volume: exit status 1. Command: amixer sset Master 5%+"


def test_speak_requires_message():
    result = speak({})
    assert result.is_error
    assert result.text() == "Error: message parameter is required"


def test_speak_runs_espeak(linux_with_tools):
    result = speak({"message": "hello"})
    assert result.text() == "Spoke: hello"
    assert linux_with_tools == [["espeak", "hello"]]


def test_speak_missing_espeak(monkeypatch):
    monkeypatch.setattr(sys, "platform", "linux")
    monkeypatch.setattr(shutil, "which", lambda name: None)
    assert speak({"message": "hello"}).text() == "espeak is not installed. Please install espeak."