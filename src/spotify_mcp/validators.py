"""Argument validation for tool calls.

Every validator either returns a normalized value or raises
InvalidArgumentError naming the offending parameter. Nothing here touches
the Spotify app; a value that passes is only known to be well-formed.
"""

from __future__ import annotations

import enum
import math
import re
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from .errors import InvalidArgumentError

if TYPE_CHECKING:
    from .tools import ParamSpec, ToolSpec


class ParamKind(enum.Enum):
    """Declared type of a tool parameter."""

    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    STRING = "string"
    SPOTIFY_URI = "spotify-uri"


SPOTIFY_URI_TYPES = ("track", "album", "artist", "playlist", "show", "episode", "user", "collection")

# spotify:<type>:<segment>(:<segment>)*, segments are base62 IDs or usernames
SPOTIFY_URI_PATTERN = r"^spotify:(" + "|".join(SPOTIFY_URI_TYPES) + r")(:[a-zA-Z0-9]+)+$"
_SPOTIFY_URI_RE = re.compile(SPOTIFY_URI_PATTERN)


def is_valid_spotify_uri(value: Any) -> bool:
    """Check whether value is a well-formed Spotify URI string."""
    if not isinstance(value, str):
        return False
    # fullmatch so a trailing newline can't slip past "$"
    return _SPOTIFY_URI_RE.fullmatch(value) is not None


def _describe_bounds(minimum: float | None, maximum: float | None) -> str:
    if minimum is not None and maximum is not None:
        return f"must be between {minimum:g} and {maximum:g}"
    if minimum is not None:
        return f"must be >= {minimum:g}"
    return f"must be <= {maximum:g}"


def _check_bounds(number: float, name: str, minimum: float | None, maximum: float | None) -> None:
    if (minimum is not None and number < minimum) or (maximum is not None and number > maximum):
        raise InvalidArgumentError(name, _describe_bounds(minimum, maximum))


def _coerce_number(value: Any, name: str) -> int | float:
    """Coerce ints, floats and numeric strings; reject bools and everything else."""
    if isinstance(value, bool):
        raise InvalidArgumentError(name, "must be a number, not a boolean")
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        text = value.strip()
        # Python literals allow "1_000"; JSON numbers and JS Number() do not
        if text and "_" not in text:
            try:
                return int(text)
            except ValueError:
                pass
            try:
                return float(text)
            except ValueError:
                pass
    raise InvalidArgumentError(name, "must be a number")


def validate_int(value: Any, name: str, minimum: int | None = None, maximum: int | None = None) -> int:
    """Validate an integer within [minimum, maximum].

    Integral floats such as 50.0 are accepted and returned as int.
    """
    number = _coerce_number(value, name)
    if isinstance(number, float):
        if not math.isfinite(number) or not number.is_integer():
            raise InvalidArgumentError(name, "must be an integer")
        number = int(number)
    _check_bounds(number, name, minimum, maximum)
    return number


def validate_number(
    value: Any, name: str, minimum: float | None = None, maximum: float | None = None
) -> int | float:
    """Validate a finite number within [minimum, maximum]."""
    number = _coerce_number(value, name)
    if isinstance(number, float) and not math.isfinite(number):
        raise InvalidArgumentError(name, "must be a finite number")
    _check_bounds(number, name, minimum, maximum)
    return number


def validate_bool(value: Any, name: str) -> bool:
    """Validate a real boolean. Strings like "true" are rejected."""
    if not isinstance(value, bool):
        raise InvalidArgumentError(name, "must be a boolean")
    return value


def validate_string(value: Any, name: str) -> str:
    if not isinstance(value, str):
        raise InvalidArgumentError(name, "must be a string")
    return value


def validate_spotify_uri(value: Any, name: str = "uri") -> str:
    """Validate a Spotify URI like spotify:track:4uLU6hMCjMI75M1A2tKUQC."""
    if not is_valid_spotify_uri(value):
        raise InvalidArgumentError(
            name,
            "not a valid Spotify URI (expected spotify:<type>:<id> with type one of "
            + ", ".join(SPOTIFY_URI_TYPES)
            + ")",
        )
    return value


def validate_param(param: ParamSpec, value: Any) -> Any:
    """Run the validator matching the parameter's kind."""
    if param.kind is ParamKind.INTEGER:
        return validate_int(value, param.name, param.minimum, param.maximum)
    if param.kind is ParamKind.NUMBER:
        return validate_number(value, param.name, param.minimum, param.maximum)
    if param.kind is ParamKind.BOOLEAN:
        return validate_bool(value, param.name)
    if param.kind is ParamKind.SPOTIFY_URI:
        return validate_spotify_uri(value, param.name)
    return validate_string(value, param.name)


def _is_absent(param: ParamSpec, value: Any) -> bool:
    if value is None:
        return True
    # An empty optional URI means "no context", as Spotify clients send it
    return not param.required and param.kind is ParamKind.SPOTIFY_URI and value == ""


def validate_arguments(spec: ToolSpec, arguments: Any) -> dict[str, Any]:
    """Validate a raw argument bag against a tool's parameters.

    Args:
        spec: Tool whose declared parameters drive validation
        arguments: Raw mapping from the caller, or None

    Returns:
        Dict of validated values keyed by parameter name. Optional
        parameters that were not supplied are omitted. Undeclared keys
        are ignored.

    Raises:
        InvalidArgumentError: On the first parameter that fails.
    """
    if arguments is None:
        arguments = {}
    if not isinstance(arguments, Mapping):
        raise InvalidArgumentError("arguments", "must be an object")

    validated: dict[str, Any] = {}
    for param in spec.params:
        value = arguments.get(param.name)
        if _is_absent(param, value):
            if param.required:
                raise InvalidArgumentError(param.name, "is required")
            continue
        validated[param.name] = validate_param(param, value)
    return validated
