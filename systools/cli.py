"""Command line entry point that starts the systems MCP server."""

from __future__ import annotations

import argparse
import json
import os
import queue
import sys
import threading
import uuid
from datetime import datetime
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Optional
from urllib.parse import parse_qs, urlsplit

from . import logs
from .app import SystemsServer
from .protocol import JSONRPC_VERSION, PARSE_ERROR, McpServer

PROG = "systools"
RULE = "========================================"


def _announce(text: str) -> None:
    sys.stderr.write(f"{datetime.now():%Y/%m/%d %H:%M:%S} {text}\n")
    sys.stderr.flush()


def parse_log_dir(directory: str) -> str:
    """The log directory, falling back to the working directory when empty."""
    if directory:
        return directory
    try:
        return os.getcwd()
    except OSError as err:
        logs.write("ERROR", f"Error getting current directory: {err}")
        return "."


def _add_options(parser: argparse.ArgumentParser, suppress: bool) -> None:
    def default(value: str) -> Any:
        return argparse.SUPPRESS if suppress else value

    parser.add_argument(
        "--transport", default=default("stdio"), help="Transport type (stdio or sse)"
    )
    parser.add_argument(
        "--log_dir",
        default=default(""),
        help="Log directory (default is current directory if not specified)",
    )
    parser.add_argument(
        "--host",
        default=default("localhost"),
        help="Host to bind the server to (only for sse transport)",
    )
    parser.add_argument(
        "--port",
        default=default("8080"),
        help="Port to bind the server to (only for sse transport)",
    )


def build_parser() -> argparse.ArgumentParser:
    """The argument parser; the global options are accepted after ``serve`` too."""
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="An MCP server exposing system tools: volume, speech, memory, "
        "alarms, files, location and weather.",
    )
    _add_options(parser, suppress=False)
    commands = parser.add_subparsers(dest="command")
    serve_parser = commands.add_parser(
        "serve",
        help="Start the MCP server",
        description="Start the MCP server. It listens for incoming requests and "
        "processes them accordingly.",
    )
    _add_options(serve_parser, suppress=True)
    return parser


class _SseHttpServer(ThreadingHTTPServer):
    """HTTP server carrying MCP over server-sent events."""

    daemon_threads = True

    def __init__(self, address: tuple[str, int], mcp: McpServer, base_url: str) -> None:
        self.mcp = mcp
        self.base_url = base_url
        self.closing = threading.Event()
        self._sessions: dict[str, queue.Queue] = {}
        self._lock = threading.Lock()
        super().__init__(address, _SseHandler)

    def open_session(self) -> tuple[str, queue.Queue]:
        session_id = str(uuid.uuid4())
        events: queue.Queue = queue.Queue()
        with self._lock:
            self._sessions[session_id] = events
        return session_id, events

    def close_session(self, session_id: str) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)

    def session(self, session_id: str) -> Optional[queue.Queue]:
        with self._lock:
            return self._sessions.get(session_id)

    def server_close(self) -> None:
        self.closing.set()
        with self._lock:
            for events in self._sessions.values():
                events.put(None)
        super().server_close()


class _SseHandler(BaseHTTPRequestHandler):
    server: _SseHttpServer

    def log_message(self, format: str, *args: Any) -> None:
        pass

    def _reply(self, status: int, text: str, content_type: str = "text/plain") -> None:
        body = text.encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def _event(self, name: str, data: str) -> None:
        self.wfile.write(f"event: {name}\ndata: {data}\n\n".encode("utf-8"))
        self.wfile.flush()

    def do_GET(self) -> None:
        if urlsplit(self.path).path != "/sse":
            self._reply(404, "Not Found")
            return
        session_id, events = self.server.open_session()
        try:
            self.send_response(200)
            self.send_header("Content-Type", "text/event-stream")
            self.send_header("Cache-Control", "no-cache")
            self.send_header("Connection", "keep-alive")
            self.end_headers()
            self._event("endpoint", f"{self.server.base_url}/message?sessionId={session_id}")
            while not self.server.closing.is_set():
                try:
                    item = events.get(timeout=0.5)
                except queue.Empty:
                    continue
                if item is None:
                    break
                self._event("message", json.dumps(item))
        except OSError:
            pass
        finally:
            self.server.close_session(session_id)
            self.close_connection = True

    def do_POST(self) -> None:
        parts = urlsplit(self.path)
        if parts.path != "/message":
            self._reply(404, "Not Found")
            return
        session_id = parse_qs(parts.query).get("sessionId", [""])[0]
        if not session_id:
            self._reply(400, "Missing sessionId")
            return
        events = self.server.session(session_id)
        if events is None:
            self._reply(400, "Invalid session ID")
            return
        length = int(self.headers.get("Content-Length") or 0)
        body = self.rfile.read(length)
        try:
            message = json.loads(body)
        except ValueError:
            error = {
                "jsonrpc": JSONRPC_VERSION,
                "id": None,
                "error": {"code": PARSE_ERROR, "message": "Parse error"},
            }
            self._reply(400, json.dumps(error), "application/json")
            return
        response = self.server.mcp.handle_message(message)
        if response is not None:
            events.put(response)
        self._reply(202, "Accepted")


def _make_sse_server(server: McpServer, host: str, port: str) -> _SseHttpServer:
    base_url = f"http://{host}:{port}"
    return _SseHttpServer(("", int(port)), server, base_url)


def serve_sse(server: McpServer, host: str, port: str) -> None:
    """Serve ``server`` over HTTP with server-sent events until interrupted."""
    httpd = _make_sse_server(server, host, port)
    try:
        httpd.serve_forever()
    finally:
        httpd.server_close()


def serve(options: argparse.Namespace) -> None:
    """Start the server with the transport chosen in ``options``."""
    _announce("Starting the MCP server...")
    transport = options.transport
    log_dir = parse_log_dir(options.log_dir)
    _announce(f"Log Directory: {log_dir}")
    _announce(f"Transport: {transport}")

    app = SystemsServer(log_dir)
    app.register_hooks()
    app.register_tools()

    try:
        if transport == "sse":
            base_url = f"http://{options.host}:{options.port}"
            _announce(RULE)
            _announce("🚀 MCP Server running!")
            _announce(f"📍 URL: {base_url}")
            _announce("🔧 Transport: SSE")
            _announce(f"📂 Log Directory: {log_dir}")
            _announce(RULE)
            serve_sse(app.mcp, options.host, options.port)
        else:
            _announce(RULE)
            _announce("🚀 MCP Server running!")
            _announce("🔧 Transport: STDIO")
            _announce(f"📂 Log Directory: {log_dir}")
            _announce("ℹ️  Using standard input/output for communication")
            _announce(RULE)
            app.mcp.serve_stdio()
    except (OSError, ValueError) as err:
        _announce(f"Server error: {err}")
        raise SystemExit(1) from err


def main(argv: Optional[list[str]] = None) -> int:
    """Run the command line; returns the exit status."""
    parser = build_parser()
    options = parser.parse_args(argv)
    if options.command is None:
        parser.print_help()
        return 0
    serve(options)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())