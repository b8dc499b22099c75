"""Tool call dispatch: lookup, validation, script building and execution.

Every call ends in exactly one ToolResponse. Validation and execution
failures become error responses, so the caller always receives text it can
show to the model.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol

from .errors import (
    ExecutionTimeoutError,
    MissingToolNameError,
    SpotifyMCPError,
    UnknownToolError,
)
from .tools import TOOLS_BY_NAME, ToolSpec
from .validators import validate_arguments

logger = logging.getLogger("spotify_mcp")


class ScriptExecutor(Protocol):
    def run(self, script: str) -> str: ...


@dataclass(frozen=True)
class ToolResponse:
    """Uniform result of a tool call.

    error_code carries the error tag for logs and tests; it is not part of
    the wire format.
    """

    text: str
    is_error: bool = False
    error_code: str | None = None

    @classmethod
    def success(cls, text: str) -> ToolResponse:
        return cls(text=text)

    @classmethod
    def failure(cls, message: str, code: str | None = None) -> ToolResponse:
        return cls(text=f"Error: {message}", is_error=True, error_code=code)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"content": [{"type": "text", "text": self.text}]}
        if self.is_error:
            result["isError"] = True
        return result


class Dispatcher:
    """Maps a tool name and raw arguments to one osascript run."""

    def __init__(self, executor: ScriptExecutor, tools: Mapping[str, ToolSpec] = TOOLS_BY_NAME):
        self.executor = executor
        self.tools = tools

    def dispatch(self, name: str | None, arguments: Any = None) -> ToolResponse:
        """Run a tool call and wrap its outcome.

        Args:
            name: Tool name from the call request
            arguments: Raw argument mapping, or None when the caller sent none

        Returns:
            A success response with the script output, or an error response
            with "Error: <message>".

        Raises:
            MissingToolNameError: If name is empty. This is a protocol error
                and is not wrapped in a response.
        """
        if not name:
            raise MissingToolNameError()

        logger.info("tool_call tool=%s", name)
        try:
            spec = self.tools.get(name)
            if spec is None:
                raise UnknownToolError(name)
            validated = validate_arguments(spec, arguments)
            script = spec.build(**validated)
            output = self.executor.run(script)
        except ExecutionTimeoutError as e:
            logger.warning("tool_timeout tool=%s timeout=%gs", name, e.timeout)
            return ToolResponse.failure(e.message, e.code)
        except SpotifyMCPError as e:
            logger.warning("tool_error tool=%s code=%s message=%s", name, e.code, e.message)
            return ToolResponse.failure(e.message, e.code)
        except Exception as e:
            logger.exception("unexpected_error tool=%s", name)
            return ToolResponse.failure(str(e) or type(e).__name__, "internal_error")

        logger.info("tool_done tool=%s", name)
        return ToolResponse.success(output)
