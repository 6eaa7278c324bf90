"""The systems MCP server: its identity, logging hooks and tool set."""

from __future__ import annotations

from typing import Any

from . import logs
from .filesystem import get_current_working_directory, list_directory, read_file
from .internet import get_current_location, get_weather
from .memory import get_saved_info, save_info
from .protocol import Hooks, McpServer, Tool, ToolHandler
from .reminder import set_alarm
from .volume import speak, volume_down, volume_mute, volume_unmute, volume_up

SERVER_NAME = "systools-mcp-server"
SERVER_VERSION = "0.1.0"

_TOOLS: tuple[tuple[Tool, ToolHandler], ...] = (
    (Tool("volumeUp", "Increase system volume by 10"), volume_up),
    (Tool("volumeDown", "Decrease system volume by 10"), volume_down),
    (Tool("volumeMute", "Mute system volume"), volume_mute),
    (Tool("volumeUnmute", "Unmute system volume"), volume_unmute),
    (
        Tool(
            "speak",
            "Speak text using text-to-speech",
            {"message": "Text to speak"},
        ),
        speak,
    ),
    (
        Tool(
            "saveInfo",
            "Save information to remember",
            {
                "key": "Key to store information under",
                "value": "Information to store",
            },
        ),
        save_info,
    ),
    (
        Tool(
            "getSavedInfo",
            "Get saved information",
            {"key": "Key to retrieve information"},
        ),
        get_saved_info,
    ),
    (
        Tool(
            "setAlarm",
            "Set an alarm to remind for tasks",
            {
                "time": "Time in HH:MM format (24-hour)",
                "message": "Alarm message (optional)",
            },
        ),
        set_alarm,
    ),
    (
        Tool("getCurrentWorkingDirectory", "Get current working directory"),
        get_current_working_directory,
    ),
    (
        Tool(
            "listDirectory",
            "List directory contents",
            {"path": "Directory path to list (optional, defaults to current directory)"},
        ),
        list_directory,
    ),
    (
        Tool("readFile", "Read file contents", {"path": "File path to read"}),
        read_file,
    ),
    (
        Tool(
            "getWeather",
            "Get weather information for a location",
            {"location": "Location to get weather for (optional, defaults to current location)"},
        ),
        get_weather,
    ),
    (
        Tool("getCurrentLocation", "Get current location information"),
        get_current_location,
    ),
)


class SystemsServer:
    """An MCP server offering volume, speech, memory, alarm, file and internet tools."""

    def __init__(self, log_dir: str = "") -> None:
        self.log_dir = log_dir
        self.hooks = Hooks()
        self.mcp = McpServer(
            SERVER_NAME,
            SERVER_VERSION,
            hooks=self.hooks,
            tool_list_changed=True,
            logging=True,
        )

    def register_hooks(self) -> None:
        """Log every stage of request handling at DEBUG level."""

        def before_any(request_id: Any, method: str, message: Any) -> None:
            logs.write("DEBUG", f"beforeAny: {method}, {request_id}, {message}")

        def on_success(request_id: Any, method: str, message: Any, result: Any) -> None:
            logs.write("DEBUG", f"onSuccess: {method}, {request_id}, {message}, {result}")

        def on_error(request_id: Any, method: str, message: Any, err: Exception) -> None:
            logs.write("DEBUG", f"onError: {method}, {request_id}, {message}, {err}")

        def before_initialize(request_id: Any, message: Any) -> None:
            logs.write("DEBUG", f"beforeInitialize: {request_id}, {message}")

        def after_initialize(request_id: Any, message: Any, result: Any) -> None:
            logs.write("DEBUG", f"afterInitialize: {request_id}, {message}, {result}")

        def after_call_tool(request_id: Any, message: Any, result: Any) -> None:
            logs.write("DEBUG", f"afterCallTool: {request_id}, {message}, {result}")

        def before_call_tool(request_id: Any, message: Any) -> None:
            logs.write("DEBUG", f"beforeCallTool: {request_id}, {message}")

        self.hooks.add_before_any(before_any)
        self.hooks.add_on_success(on_success)
        self.hooks.add_on_error(on_error)
        self.hooks.add_before_initialize(before_initialize)
        self.hooks.add_after_initialize(after_initialize)
        self.hooks.add_after_call_tool(after_call_tool)
        self.hooks.add_before_call_tool(before_call_tool)

    def register_tools(self) -> None:
        """Make every tool available to clients."""
        for tool, handler in _TOOLS:
            self.mcp.add_tool(tool, handler)