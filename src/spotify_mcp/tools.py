"""Tool catalogue: the fixed set of Spotify tools and their parameter schemas.

Adding a tool means adding a ToolSpec entry here and a script builder in
applescript.py; the dispatcher needs no changes.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from mcp.types import Tool, ToolAnnotations

from . import applescript as asc
from .validators import SPOTIFY_URI_PATTERN, ParamKind

_JSON_TYPES = {
    ParamKind.INTEGER: "integer",
    ParamKind.NUMBER: "number",
    ParamKind.BOOLEAN: "boolean",
    ParamKind.STRING: "string",
    ParamKind.SPOTIFY_URI: "string",
}


@dataclass(frozen=True)
class ParamSpec:
    name: str
    kind: ParamKind
    description: str
    required: bool = True
    minimum: float | None = None
    maximum: float | None = None

    def to_schema(self) -> dict[str, Any]:
        """JSON schema fragment for this parameter."""
        schema: dict[str, Any] = {
            "type": _JSON_TYPES[self.kind],
            "description": self.description,
        }
        if self.kind is ParamKind.SPOTIFY_URI:
            schema["pattern"] = SPOTIFY_URI_PATTERN
        if self.minimum is not None:
            schema["minimum"] = self.minimum
        if self.maximum is not None:
            schema["maximum"] = self.maximum
        return schema


@dataclass(frozen=True)
class ToolSpec:
    """A tool: its schema, its script builder and its behavior hints.

    read_only and idempotent are advisory; the dispatcher does not enforce them.
    """

    name: str
    description: str
    build: Callable[..., str]
    params: tuple[ParamSpec, ...] = ()
    read_only: bool = False
    idempotent: bool = False

    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {p.name: p.to_schema() for p in self.params},
            "required": [p.name for p in self.params if p.required],
        }

    def to_mcp_tool(self) -> Tool:
        """Serialize for the MCP list_tools response."""
        return Tool(
            name=self.name,
            description=self.description,
            inputSchema=self.input_schema(),
            annotations=ToolAnnotations(
                readOnlyHint=self.read_only,
                idempotentHint=self.idempotent,
            ),
        )


def _query(name: str, description: str, build: Callable[[], str]) -> ToolSpec:
    return ToolSpec(name=name, description=description, build=build, read_only=True, idempotent=True)


TOOLS: tuple[ToolSpec, ...] = (
    ToolSpec("spotify_play", "Resume playback", asc.play, idempotent=True),
    ToolSpec("spotify_pause", "Pause playback", asc.pause, idempotent=True),
    ToolSpec("spotify_playpause", "Toggle play/pause", asc.playpause),
    ToolSpec("spotify_next_track", "Skip to the next track", asc.next_track),
    ToolSpec("spotify_previous_track", "Skip to the previous track", asc.previous_track),
    ToolSpec(
        "spotify_play_track",
        "Start playback of a track by URI",
        asc.play_track,
        params=(
            ParamSpec("uri", ParamKind.SPOTIFY_URI, "The Spotify URI of the track to play"),
            ParamSpec(
                "context",
                ParamKind.SPOTIFY_URI,
                "Optional context URI (playlist, album, etc)",
                required=False,
            ),
        ),
    ),
    _query(
        "spotify_get_current_track",
        "Get information about the current playing track",
        asc.get_current_track,
    ),
    _query(
        "spotify_get_player_state",
        "Get the current player state (playing, paused, stopped)",
        asc.get_player_state,
    ),
    ToolSpec(
        "spotify_set_volume",
        "Set the sound output volume (0-100)",
        asc.set_volume,
        params=(ParamSpec("volume", ParamKind.INTEGER, "Volume level (0-100)", minimum=0, maximum=100),),
        idempotent=True,
    ),
    _query("spotify_get_volume", "Get the current volume", asc.get_volume),
    ToolSpec(
        "spotify_set_position",
        "Set the player position within the current track",
        asc.set_position,
        params=(ParamSpec("position", ParamKind.NUMBER, "Position in seconds", minimum=0),),
        idempotent=True,
    ),
    _query("spotify_get_position", "Get the player position within the current track", asc.get_position),
    ToolSpec(
        "spotify_set_repeat",
        "Turn repeat on or off",
        asc.set_repeat,
        params=(ParamSpec("enabled", ParamKind.BOOLEAN, "Enable or disable repeat"),),
        idempotent=True,
    ),
    _query("spotify_get_repeat", "Get repeat status", asc.get_repeat),
    ToolSpec(
        "spotify_set_shuffle",
        "Turn shuffle on or off",
        asc.set_shuffle,
        params=(ParamSpec("enabled", ParamKind.BOOLEAN, "Enable or disable shuffle"),),
        idempotent=True,
    ),
    _query("spotify_get_shuffle", "Get shuffle status", asc.get_shuffle),
)

TOOLS_BY_NAME: MappingProxyType[str, ToolSpec] = MappingProxyType({t.name: t for t in TOOLS})


def list_mcp_tools() -> list[Tool]:
    """All tools in catalogue order, as MCP descriptors."""
    return [t.to_mcp_tool() for t in TOOLS]
