"""An MCP server exposing desktop system tools: volume, speech, memory, alarms, files, location and weather."""

__version__ = "0.1.0"