# systools

A small Model Context Protocol (MCP) server that gives an assistant access to
everyday system tools on the machine it runs on. It speaks JSON-RPC 2.0 and
answers `initialize`, `ping`, `tools/list` and `tools/call`.

## Tools

| Tool | Arguments | What it does |
| --- | --- | --- |
| `volumeUp` | none | Raise the system volume |
| `volumeDown` | none | Lower the system volume |
| `volumeMute` | none | Mute the system volume |
| `volumeUnmute` | none | Unmute the system volume |
| `speak` | `message` | Speak text with the platform's text-to-speech |
| `saveInfo` | `key`, `value` | Remember a value under a key |
| `getSavedInfo` | `key` (optional) | Recall one value, or everything stored |
| `setAlarm` | `time` (HH:MM, 24-hour), `message` (optional) | Print a reminder at the next occurrence of that time |
| `getCurrentWorkingDirectory` | none | Show the server's working directory |
| `listDirectory` | `path` (optional) | List a directory, sorted by name, with sizes and modification times |
| `readFile` | `path` | Return the contents of a file (decoded as UTF-8) |
| `getWeather` | `location` (optional) | A one-line weather report; defaults to the city of the current location |
| `getCurrentLocation` | none | Location details for the current public IP |

Saved information lives in `memory_store.json` in the working directory, as
an indented JSON object with sorted keys; values that are not strings are
stored as their JSON text.

Volume and speech use `osascript`/`say` on macOS, `amixer`/`espeak` on Linux
and PowerShell on Windows; on other platforms these tools report that they
are not supported. Weather and location run `curl` against `wttr.in` and
`ipinfo.io`, so `curl` must be on the `PATH`.

Problems inside a tool (a missing file, an unreachable service, a bad time)
come back as the tool's text result rather than as protocol errors.

## Installing

```
pip install .
```

## Running

Serve over standard input and output (the default), one JSON message per
line, which is what most MCP clients expect:

```
systools serve
```

Serve over HTTP with server-sent events instead:

```
systools serve --transport sse --host localhost --port 8080
```

A client opens an event stream with `GET /sse`, receives an `endpoint` event
naming `/message?sessionId=...`, and posts its requests there; responses
arrive as `message` events on the stream.

Options, which may come before or after `serve`:

- `--transport` — `stdio` (default) or `sse`
- `--host` — host name used in the announced SSE URL (default `localhost`);
  the server listens on all interfaces
- `--port` — port to listen on for the SSE transport (default `8080`)
- `--log_dir` — log directory reported at start-up (defaults to the current
  directory)

Running `systools` with no command prints the help text.

Diagnostic messages, including a trace of every request, go to standard
error. Alarm reminders from `setAlarm` are printed to standard output.

## What it does not do

- `--log_dir` is only reported; no log files are written there.
- The server offers tools only: no resources and no prompts.

## Using it from Python

```python
from systools.app import SystemsServer

server = SystemsServer(".")
server.register_hooks()
server.register_tools()
server.mcp.serve_stdio()
```

Each tool is also a plain function taking a dictionary of arguments and
returning a `ToolResult`:

```python
from systools.filesystem import list_directory

print(list_directory({"path": "."}).text())
```