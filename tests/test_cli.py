import http.client
import io
import json
import os
import socket
import threading
import urllib.error
import urllib.request

import pytest

from systools import cli
from systools.app import SystemsServer


def test_parse_log_dir_keeps_given_directory():
    assert cli.parse_log_dir("logs") == "logs"


def test_parse_log_dir_defaults_to_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert cli.parse_log_dir("") == os.getcwd()


def test_parse_log_dir_falls_back_when_cwd_fails(monkeypatch, capsys):
    def broken():
        raise OSError("gone")

    monkeypatch.setattr(os, "getcwd", broken)
    assert cli.parse_log_dir("") == "."
    assert "[ERROR] Error getting current directory: gone" in capsys.readouterr().err


def test_parser_defaults():
    options = cli.build_parser().parse_args(["serve"])
    assert options.command == "serve"
    assert options.transport == "stdio"
    assert options.log_dir == ""
    assert options.host == "localhost"
    assert options.port == "8080"


def test_options_before_and_after_subcommand():
    parser = cli.build_parser()
    before = parser.parse_args(["--host", "0.0.0.0", "--port", "9000", "serve"])
    assert (before.host, before.port) == ("0.0.0.0", "9000")
    after = parser.parse_args(["serve", "--transport", "sse", "--log_dir", "logs"])
    assert (after.transport, after.log_dir) == ("sse", "logs")


def test_main_without_command_prints_help(capsys):
    assert cli.main([]) == 0
    assert "serve" in capsys.readouterr().out


def test_main_rejects_unknown_option():
    with pytest.raises(SystemExit) as info:
        cli.main(["--bogus"])
    assert info.value.code == 2


def test_serve_stdio_answers_requests(monkeypatch, capsys):
    line = json.dumps({"jsonrpc": "2.0", "id": 1, "method": "ping"}) + "\n"
    monkeypatch.setattr("sys.stdin", io.StringIO(line))
    assert cli.main(["serve", "--log_dir", "logs"]) == 0
    captured = capsys.readouterr()
    assert json.loads(captured.out) == {"jsonrpc": "2.0", "id": 1, "result": {}}
    assert "Transport: stdio" in captured.err
    assert "Log Directory: logs" in captured.err
    assert "beforeAny: ping" in captured.err


def test_serve_sse_with_bad_port_exits():
    with pytest.raises(SystemExit) as info:
        cli.main(["--transport", "sse", "--port", "notaport", "serve"])
    assert info.value.code == 1


def _free_port():
    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


@pytest.fixture
def sse_server():
    app = SystemsServer()
    app.register_tools()
    port = _free_port()
    httpd = cli._make_sse_server(app.mcp, "127.0.0.1", str(port))
    thread = threading.Thread(target=httpd.serve_forever, daemon=True)
    thread.start()
    yield httpd, port
    httpd.shutdown()
    httpd.server_close()


def _read_event(stream):
    event = stream.readline().decode().strip()
    data = stream.readline().decode().strip()
    stream.readline()
    return event, data


def test_sse_round_trip(sse_server):
    httpd, port = sse_server
    conn = http.client.HTTPConnection("127.0.0.1", port, timeout=5)
    try:
        conn.request("GET", "/sse")
        response = conn.getresponse()
        assert response.status == 200
        assert response.getheader("Content-Type") == "text/event-stream"

        event, data = _read_event(response.fp)
        assert event == "event: endpoint"
        endpoint = data[len("data: "):]
        assert endpoint.startswith(f"{httpd.base_url}/message?sessionId=")

        body = json.dumps({"jsonrpc": "2.0", "id": 7, "method": "ping"}).encode()
        request = urllib.request.Request(
            endpoint, data=body, headers={"Content-Type": "application/json"}
        )
        with urllib.request.urlopen(request, timeout=5) as reply:
            assert reply.status == 202

        event, data = _read_event(response.fp)
        assert event == "event: message"
        assert json.loads(data[len("data: "):]) == {"jsonrpc": "2.0", "id": 7, "result": {}}
    finally:
        conn.close()


def test_sse_rejects_unknown_session(sse_server):
    _, port = sse_server
    request = urllib.request.Request(
        f"http://127.0.0.1:{port}/message?sessionId=missing", data=b"{}"
    )
    with pytest.raises(urllib.error.HTTPError) as info:
        urllib.request.urlopen(request, timeout=5)
    assert info.value.code == 400


def test_sse_unknown_path_is_not_found(sse_server):
    _, port = sse_server
    with pytest.raises(urllib.error.HTTPError) as info:
        urllib.request.urlopen(f"http://127.0.0.1:{port}/elsewhere", timeout=5)
    assert info.value.code == 404