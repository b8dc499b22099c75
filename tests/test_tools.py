"""Tests for the tool catalogue."""

import inspect

import pytest

from spotify_mcp.tools import TOOLS, TOOLS_BY_NAME, ParamSpec, list_mcp_tools
from spotify_mcp.validators import SPOTIFY_URI_PATTERN, ParamKind

EXPECTED_NAMES = [
    "spotify_play",
    "spotify_pause",
    "spotify_playpause",
    "spotify_next_track",
    "spotify_previous_track",
    "spotify_play_track",
    "spotify_get_current_track",
    "spotify_get_player_state",
    "spotify_set_volume",
    "spotify_get_volume",
    "spotify_set_position",
    "spotify_get_position",
    "spotify_set_repeat",
    "spotify_get_repeat",
    "spotify_set_shuffle",
    "spotify_get_shuffle",
]


class TestCatalogue:
    """Tests for the static catalogue."""

    def test_names_and_order(self):
        """Should list all 16 tools in a stable order."""
        assert [t.name for t in TOOLS] == EXPECTED_NAMES

    def test_lookup_matches_catalogue(self):
        """Should index every tool by name."""
        assert list(TOOLS_BY_NAME) == EXPECTED_NAMES
        for tool in TOOLS:
            assert TOOLS_BY_NAME[tool.name] is tool

    def test_lookup_is_read_only(self):
        """Should not allow adding tools at runtime."""
        with pytest.raises(TypeError):
            TOOLS_BY_NAME["spotify_frobnicate"] = TOOLS[0]

    def test_specs_are_frozen(self):
        """Should not allow mutating a tool."""
        with pytest.raises(AttributeError):
            TOOLS[0].name = "other"

    @pytest.mark.parametrize("tool", TOOLS, ids=lambda t: t.name)
    def test_builder_signature_matches_params(self, tool):
        """Should declare exactly the parameters its script builder takes."""
        builder_params = set(inspect.signature(tool.build).parameters)
        assert builder_params == {p.name for p in tool.params}

    @pytest.mark.parametrize("tool", TOOLS, ids=lambda t: t.name)
    def test_required_params_match_builder_defaults(self, tool):
        """Should mark a parameter required exactly when the builder has no default."""
        signature = inspect.signature(tool.build)
        for param in tool.params:
            has_default = signature.parameters[param.name].default is not inspect.Parameter.empty
            assert param.required is not has_default

    def test_queries_are_read_only(self):
        """Should flag get_* tools as read-only and idempotent."""
        for tool in TOOLS:
            if "_get_" in tool.name:
                assert tool.read_only and tool.idempotent
            else:
                assert not tool.read_only

    @pytest.mark.parametrize("name,idempotent", [
        ("spotify_play", True),
        ("spotify_pause", True),
        ("spotify_playpause", False),
        ("spotify_next_track", False),
        ("spotify_play_track", False),
        ("spotify_set_volume", True),
        ("spotify_set_shuffle", True),
    ])
    def test_idempotent_hints(self, name, idempotent):
        """Should mark setters idempotent and toggles/skips not."""
        assert TOOLS_BY_NAME[name].idempotent is idempotent


class TestMcpSerialization:
    """Tests for conversion to MCP Tool descriptors."""

    def test_list_mcp_tools_order(self):
        """Should serialize every tool in catalogue order."""
        assert [t.name for t in list_mcp_tools()] == EXPECTED_NAMES

    def test_parameterless_schema(self):
        """Should emit an empty object schema."""
        tool = TOOLS_BY_NAME["spotify_play"].to_mcp_tool()
        assert tool.description == "Resume playback"
        assert tool.inputSchema == {"type": "object", "properties": {}, "required": []}

    def test_volume_schema(self):
        """Should emit integer type with bounds."""
        schema = TOOLS_BY_NAME["spotify_set_volume"].to_mcp_tool().inputSchema
        assert schema["properties"]["volume"] == {
            "type": "integer",
            "description": "Volume level (0-100)",
            "minimum": 0,
            "maximum": 100,
        }
        assert schema["required"] == ["volume"]

    def test_position_schema(self):
        """Should emit number type with only a minimum."""
        prop = TOOLS_BY_NAME["spotify_set_position"].to_mcp_tool().inputSchema["properties"]["position"]
        assert prop["type"] == "number"
        assert prop["minimum"] == 0
        assert "maximum" not in prop

    def test_play_track_schema(self):
        """Should emit string URIs with the grammar, context optional."""
        schema = TOOLS_BY_NAME["spotify_play_track"].to_mcp_tool().inputSchema
        assert schema["properties"]["uri"]["type"] == "string"
        assert schema["properties"]["uri"]["pattern"] == SPOTIFY_URI_PATTERN
        assert "context" in schema["properties"]
        assert schema["required"] == ["uri"]

    def test_boolean_schema(self):
        """Should emit boolean type for enabled."""
        schema = TOOLS_BY_NAME["spotify_set_repeat"].to_mcp_tool().inputSchema
        assert schema["properties"]["enabled"]["type"] == "boolean"
        assert schema["required"] == ["enabled"]

    def test_annotations(self):
        """Should carry read-only and idempotent hints."""
        get_volume = TOOLS_BY_NAME["spotify_get_volume"].to_mcp_tool()
        assert get_volume.annotations.readOnlyHint is True
        assert get_volume.annotations.idempotentHint is True
        next_track = TOOLS_BY_NAME["spotify_next_track"].to_mcp_tool()
        assert next_track.annotations.readOnlyHint is False
        assert next_track.annotations.idempotentHint is False

    def test_string_param_schema(self):
        """Should emit plain string type for STRING params."""
        param = ParamSpec("query", ParamKind.STRING, "Search text")
        assert param.to_schema() == {"type": "string", "description": "Search text"}
