"""A small Model Context Protocol server speaking JSON-RPC 2.0."""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass, field
from typing import IO, Any, Callable, Optional

JSONRPC_VERSION = "2.0"
LATEST_PROTOCOL_VERSION = "2025-03-26"
SUPPORTED_PROTOCOL_VERSIONS = ("2025-03-26", "2024-11-05")

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

HOOK_EVENTS = (
    "before_any",
    "on_success",
    "on_error",
    "before_initialize",
    "after_initialize",
    "before_call_tool",
    "after_call_tool",
)


@dataclass
class TextContent:
    """A piece of text content in a tool result."""

    text: str
    type: str = "text"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "text": self.text}


@dataclass
class ToolResult:
    """The outcome of a tool call."""

    content: list[TextContent] = field(default_factory=list)
    is_error: bool = False

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"content": [item.to_dict() for item in self.content]}
        if self.is_error:
            data["isError"] = True
        return data

    def text(self) -> str:
        """All text content joined together."""
        return "".join(item.text for item in self.content)


def text_result(text: str, is_error: bool = False) -> ToolResult:
    """A result holding a single text item."""
    return ToolResult([TextContent(text)], is_error)


@dataclass
class Tool:
    """A tool description; ``parameters`` maps string argument names to descriptions."""

    name: str
    description: str = ""
    parameters: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": {
                "type": "object",
                "properties": {
                    param: {"type": "string", "description": text}
                    for param, text in self.parameters.items()
                },
            },
        }


ToolHandler = Callable[[dict], ToolResult]


class Hooks:
    """Callbacks run around request handling."""

    def __init__(self) -> None:
        self._hooks: dict[str, list[Callable[..., Any]]] = {event: [] for event in HOOK_EVENTS}

    def add_before_any(self, hook: Callable[..., Any]) -> None:
        self._hooks["before_any"].append(hook)

    def add_on_success(self, hook: Callable[..., Any]) -> None:
        self._hooks["on_success"].append(hook)

    def add_on_error(self, hook: Callable[..., Any]) -> None:
        self._hooks["on_error"].append(hook)

    def add_before_initialize(self, hook: Callable[..., Any]) -> None:
        self._hooks["before_initialize"].append(hook)

    def add_after_initialize(self, hook: Callable[..., Any]) -> None:
        self._hooks["after_initialize"].append(hook)

    def add_before_call_tool(self, hook: Callable[..., Any]) -> None:
        self._hooks["before_call_tool"].append(hook)

    def add_after_call_tool(self, hook: Callable[..., Any]) -> None:
        self._hooks["after_call_tool"].append(hook)

    def fire(self, event: str, *args: Any) -> None:
        """Call every hook registered for ``event`` with ``args``."""
        try:
            hooks = self._hooks[event]
        except KeyError:
            raise ValueError(f"unknown hook event: {event!r}") from None
        for hook in hooks:
            hook(*args)


class McpError(Exception):
    """A JSON-RPC error to be sent back to the client."""

    def __init__(self, code: int, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message


def _error_response(request_id: Any, code: int, message: str) -> dict[str, Any]:
    return {
        "jsonrpc": JSONRPC_VERSION,
        "id": request_id,
        "error": {"code": code, "message": message},
    }


class McpServer:
    """Dispatches MCP requests to registered tools."""

    def __init__(
        self,
        name: str,
        version: str,
        *,
        hooks: Optional[Hooks] = None,
        tool_list_changed: bool = False,
        logging: bool = False,
    ) -> None:
        self.name = name
        self.version = version
        self.hooks = hooks if hooks is not None else Hooks()
        self._tool_list_changed = tool_list_changed
        self._logging = logging
        self._tools: dict[str, tuple[Tool, ToolHandler]] = {}

    @property
    def tools(self) -> list[Tool]:
        return [tool for tool, _ in sorted(self._tools.values(), key=lambda pair: pair[0].name)]

    def capabilities(self) -> dict[str, Any]:
        caps: dict[str, Any] = {"tools": {"listChanged": self._tool_list_changed}}
        if self._logging:
            caps["logging"] = {}
        return caps

    def add_tool(self, tool: Tool, handler: ToolHandler) -> None:
        self._tools[tool.name] = (tool, handler)

    def handle_message(self, message: Any) -> Optional[dict[str, Any]]:
        """Handle one decoded JSON-RPC message; notifications yield ``None``."""
        if not isinstance(message, dict):
            return _error_response(None, INVALID_REQUEST, "Invalid Request")
        request_id = message.get("id")
        method = message.get("method")
        if message.get("jsonrpc") != JSONRPC_VERSION or not isinstance(method, str):
            return _error_response(request_id, INVALID_REQUEST, "Invalid Request")
        if "id" not in message:
            return None

        self.hooks.fire("before_any", request_id, method, message)
        try:
            params = message.get("params")
            if params is None:
                params = {}
            if not isinstance(params, dict):
                raise McpError(INVALID_PARAMS, "params must be an object")
            result = self._dispatch(request_id, method, params, message)
        except McpError as err:
            self.hooks.fire("on_error", request_id, method, message, err)
            return _error_response(request_id, err.code, err.message)
        self.hooks.fire("on_success", request_id, method, message, result)
        return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "result": result}

    def _dispatch(self, request_id: Any, method: str, params: dict, message: dict) -> dict:
        if method == "initialize":
            return self._initialize(request_id, params, message)
        if method == "ping":
            return {}
        if method == "tools/list":
            return {"tools": [tool.to_dict() for tool in self.tools]}
        if method == "tools/call":
            return self._call_tool(request_id, params, message)
        raise McpError(METHOD_NOT_FOUND, f"Method {method} not found")

    def _initialize(self, request_id: Any, params: dict, message: dict) -> dict:
        self.hooks.fire("before_initialize", request_id, message)
        requested = params.get("protocolVersion")
        version = requested if requested in SUPPORTED_PROTOCOL_VERSIONS else LATEST_PROTOCOL_VERSION
        result = {
            "protocolVersion": version,
            "capabilities": self.capabilities(),
            "serverInfo": {"name": self.name, "version": self.version},
        }
        self.hooks.fire("after_initialize", request_id, message, result)
        return result

    def _call_tool(self, request_id: Any, params: dict, message: dict) -> dict:
        name = params.get("name")
        entry = self._tools.get(name) if isinstance(name, str) else None
        if entry is None:
            raise McpError(INVALID_PARAMS, f"tool '{name}' not found")
        arguments = params.get("arguments")
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, dict):
            raise McpError(INVALID_PARAMS, "arguments must be an object")
        _, handler = entry
        self.hooks.fire("before_call_tool", request_id, message)
        try:
            result = handler(arguments)
        except Exception as exc:  # a failing tool becomes a JSON-RPC error
            raise McpError(INTERNAL_ERROR, str(exc)) from exc
        self.hooks.fire("after_call_tool", request_id, message, result)
        return result.to_dict()

    def serve_stdio(self, stdin: Optional[IO[str]] = None, stdout: Optional[IO[str]] = None) -> None:
        """Read line-delimited JSON-RPC messages until end of input."""
        stdin = stdin if stdin is not None else sys.stdin
        stdout = stdout if stdout is not None else sys.stdout
        for line in stdin:
            line = line.strip()
            if not line:
                continue
            try:
                message = json.loads(line)
            except json.JSONDecodeError:
                response: Optional[dict] = _error_response(None, PARSE_ERROR, "Parse error")
            else:
                response = self.handle_message(message)
            if response is not None:
                stdout.write(json.dumps(response) + "\n")
                stdout.flush()