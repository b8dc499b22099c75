"""Shared test fixtures."""

import os
import sys

import pytest

from spotify_mcp import server
from spotify_mcp.dispatcher import Dispatcher


class FakeExecutor:
    """Executor spy: records every script and returns a canned result."""

    def __init__(self, output: str = "", error: Exception | None = None):
        self.output = output
        self.error = error
        self.scripts: list[str] = []

    def run(self, script: str) -> str:
        self.scripts.append(script)
        if self.error is not None:
            raise self.error
        return self.output


@pytest.fixture
def fake_executor():
    """An executor that succeeds with empty output."""
    return FakeExecutor()


@pytest.fixture
def dispatcher(fake_executor):
    """Dispatcher wired to the fake executor."""
    return Dispatcher(fake_executor)


@pytest.fixture
def server_dispatcher(dispatcher, monkeypatch):
    """Install the fake-backed dispatcher as the server's dispatcher."""
    monkeypatch.setattr(server, "_dispatcher", dispatcher)
    return dispatcher


@pytest.fixture
def sample_track_uri():
    return "spotify:track:4uLU6hMCjMI75M1A2tKUQC"


@pytest.fixture
def sample_playlist_uri():
    return "spotify:playlist:37i9dQZF1DXcBWIGoYBM5M"


@pytest.fixture
def make_dispatcher():
    """Factory for a dispatcher plus its spy executor with a given outcome."""
    def _make(output: str = "", error: Exception | None = None):
        executor = FakeExecutor(output=output, error=error)
        return Dispatcher(executor), executor
    return _make


@pytest.fixture
def fake_osascript(tmp_path):
    """Factory for a stand-in osascript: an executable shell script with the given body.

    It is called as `<path> -e <script>`, so the script text arrives as $2.
    """
    if os.name != "posix":
        pytest.skip("stand-in osascript needs a POSIX shell")

    def _make(body: str, name: str = "osascript") -> str:
        path = tmp_path / name
        path.write_text(f"#!/bin/sh\n{body}\n")
        path.chmod(0o755)
        return str(path)
    return _make


@pytest.fixture
def python_osascript(fake_osascript):
    """A stand-in osascript that runs its script argument as Python code."""
    return fake_osascript(f'exec "{sys.executable}" -c "$2"')
