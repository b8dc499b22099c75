"""Error types for the Spotify MCP server.

Each error carries a stable ``code`` tag so callers and logs can tell
failure origins apart without parsing messages.
"""

from __future__ import annotations


class SpotifyMCPError(Exception):
    """Base error for all Spotify MCP failures."""

    code: str = "internal_error"
    message: str = "An internal error occurred"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.__class__.message
        super().__init__(self.message)


class MissingToolNameError(SpotifyMCPError):
    """Call request arrived without a tool name."""

    code = "missing_tool_name"
    message = "Tool name is required"


class UnknownToolError(SpotifyMCPError):
    """Tool name is not in the catalogue."""

    code = "unknown_tool"

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown tool: {name}")


class InvalidArgumentError(SpotifyMCPError):
    """Argument failed type, range or format validation."""

    code = "invalid_argument"

    def __init__(self, param: str, reason: str) -> None:
        self.param = param
        self.reason = reason
        super().__init__(f"Invalid {param}: {reason}")


class ExecutionFailedError(SpotifyMCPError):
    """osascript could not be started or exited non-zero."""

    code = "execution_failed"

    def __init__(self, message: str, stderr: str = "", returncode: int | None = None) -> None:
        self.stderr = stderr
        self.returncode = returncode
        super().__init__(message)


class ExecutionTimeoutError(SpotifyMCPError):
    """osascript did not finish within the configured timeout."""

    code = "timeout"

    def __init__(self, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(f"AppleScript timed out after {timeout:g} seconds")


class OutputTooLargeError(SpotifyMCPError):
    """osascript produced more output than the configured cap."""

    code = "output_too_large"

    def __init__(self, size: int, limit: int) -> None:
        self.size = size
        self.limit = limit
        super().__init__(f"AppleScript output too large: {size} bytes exceeds limit of {limit} bytes")
