"""Spotify MCP server - control the Spotify desktop app via AppleScript."""

__version__ = "0.1.0"
