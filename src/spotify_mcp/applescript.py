"""AppleScript integration for the Spotify desktop app on macOS.

This module builds the AppleScript for each tool and runs it through
osascript. Only available on macOS with Spotify installed.

Security Notes:
    - Numeric and boolean arguments are validated to a closed type and
      rendered as literals; they never pass through string quoting.
    - Spotify URIs are checked against the URI grammar and then escaped
      via escape_applescript_string() (backslashes first, then quotes,
      then control characters) before being embedded in a string literal.
    - Scripts are executed via subprocess.Popen() with an argument vector,
      never a shell. The child is killed at the timeout, or as soon as its
      output passes the size cap.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import sys
import threading
from decimal import Decimal
from typing import Any

from .config import ExecutorConfig
from .errors import ExecutionFailedError, ExecutionTimeoutError, OutputTooLargeError
from .validators import validate_spotify_uri

logger = logging.getLogger("spotify_mcp")

APP_NAME = "Spotify"

# Returned by get_current_track() when nothing is loaded
NO_TRACK_PLAYING = "No track is currently playing"

_STRICT_ESCAPES = {
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


def is_available() -> bool:
    """Check if AppleScript is available (macOS with osascript)."""
    return sys.platform == 'darwin' and shutil.which('osascript') is not None


def escape_applescript_string(value: Any, strict: bool = True) -> str:
    """Escape a string for safe use inside an AppleScript string literal.

    Backslashes must be escaped first, then quotes, so that an input like
    'a\\"b' cannot close the literal. With strict (the default) newline,
    carriage return and tab are also written as escape sequences so the
    generated script stays on one line per statement.

    Non-string values yield an empty string.
    """
    if not isinstance(value, str):
        return ""
    escaped = value.replace('\\', '\\\\').replace('"', '\\"')
    if strict:
        for raw, replacement in _STRICT_ESCAPES.items():
            escaped = escaped.replace(raw, replacement)
    return escaped


def _format_number(value: int | float) -> str:
    """Render a validated number as an AppleScript numeric literal."""
    if isinstance(value, int):
        return str(value)
    if value.is_integer():
        return str(int(value))
    # repr is the shortest exact form; Decimal spells it out without an exponent
    return format(Decimal(repr(value)), 'f')


def _format_bool(value: bool) -> str:
    return 'true' if value else 'false'


def _tell(command: str) -> str:
    return f'tell application "{APP_NAME}" to {command}'


# =============================================================================
# Playback Control
# =============================================================================

def play() -> str:
    """Start or resume playback."""
    return _tell('play')


def pause() -> str:
    """Pause playback."""
    return _tell('pause')


def playpause() -> str:
    """Toggle play/pause."""
    return _tell('playpause')


def next_track() -> str:
    """Skip to next track."""
    return _tell('next track')


def previous_track() -> str:
    """Go to previous track."""
    return _tell('previous track')


def play_track(uri: str, context: str | None = None) -> str:
    """Play a track by URI, optionally within an album/playlist context.

    Both URIs are checked against the Spotify URI grammar here as well as
    in argument validation, and are escaped regardless.

    Raises:
        InvalidArgumentError: If uri or context is not a Spotify URI.
    """
    safe_uri = escape_applescript_string(validate_spotify_uri(uri, 'uri'))
    if context:
        safe_context = escape_applescript_string(validate_spotify_uri(context, 'context'))
        return _tell(f'play track "{safe_uri}" in context "{safe_context}"')
    return _tell(f'play track "{safe_uri}"')


# =============================================================================
# Player Queries
# =============================================================================

def get_current_track() -> str:
    """Get a newline-delimited summary of the current track."""
    return f'''
    tell application "{APP_NAME}"
        if player state is not stopped then
            set t to current track
            set output to "Name: " & (name of t)
            set output to output & "\\nArtist: " & (artist of t)
            set output to output & "\\nAlbum: " & (album of t)
            set output to output & "\\nDuration: " & (duration of t) & " ms"
            set output to output & "\\nPopularity: " & (popularity of t)
            set output to output & "\\nID: " & (id of t)
            set output to output & "\\nURL: " & (spotify url of t)
            return output
        else
            return "{NO_TRACK_PLAYING}"
        end if
    end tell
    '''


def get_player_state() -> str:
    """Get current player state (playing, paused, stopped)."""
    return _tell('return player state as string')


def get_volume() -> str:
    """Get current volume (0-100)."""
    return _tell('return sound volume')


def get_position() -> str:
    """Get player position in seconds."""
    return _tell('return player position')


def get_repeat() -> str:
    """Get repeat state."""
    return _tell('return repeating')


def get_shuffle() -> str:
    """Get shuffle state."""
    return _tell('return shuffling')


# =============================================================================
# Player Settings
# =============================================================================

def set_volume(volume: int) -> str:
    """Set volume (0-100)."""
    return _tell(f'set sound volume to {_format_number(volume)}')


def set_position(position: int | float) -> str:
    """Seek to position in seconds."""
    return _tell(f'set player position to {_format_number(position)}')


def set_repeat(enabled: bool) -> str:
    """Set repeat on/off."""
    return _tell(f'set repeating to {_format_bool(enabled)}')


def set_shuffle(enabled: bool) -> str:
    """Set shuffle on/off."""
    return _tell(f'set shuffling to {_format_bool(enabled)}')


# =============================================================================
# Execution
# =============================================================================

_READ_CHUNK = 64 * 1024

# How long to wait for pipe readers once the child is gone
_READER_JOIN_TIMEOUT = 1.0


class _PipeReader(threading.Thread):
    """Drains one child pipe in chunks, keeping at most `limit` bytes.

    When the limit is passed, on_overflow is called once and reading stops
    for a hard cap, or the excess is discarded when on_overflow is None.
    """

    def __init__(self, stream, limit: int, on_overflow=None):
        super().__init__(daemon=True)
        self.stream = stream
        self.limit = limit
        self.on_overflow = on_overflow
        self.chunks: list[bytes] = []
        self.size = 0
        self.overflowed = False

    def run(self):
        try:
            while True:
                chunk = self.stream.read1(_READ_CHUNK)
                if not chunk:
                    return
                self.size += len(chunk)
                if self.size > self.limit:
                    if not self.overflowed:
                        self.overflowed = True
                        if self.on_overflow is not None:
                            self.on_overflow()
                            return
                    continue
                self.chunks.append(chunk)
        except (OSError, ValueError):
            # pipe closed after the child was reaped
            return

    def data(self) -> bytes:
        return b''.join(self.chunks)


class OsascriptExecutor:
    """Runs one AppleScript per call through osascript.

    Each run is attempted exactly once. Failures surface as
    ExecutionFailedError, ExecutionTimeoutError or OutputTooLargeError.
    """

    def __init__(self, config: ExecutorConfig | None = None):
        self.config = config or ExecutorConfig()

    def run(self, script: str) -> str:
        """Execute AppleScript and return its trimmed stdout.

        stdout is read while the child runs; once it passes
        max_output_bytes the child is killed immediately.

        Args:
            script: AppleScript code to execute

        Returns:
            The script's return value as text.

        Raises:
            ExecutionTimeoutError: osascript ran past the timeout (it is killed).
            OutputTooLargeError: stdout exceeded max_output_bytes (it is killed).
            ExecutionFailedError: osascript could not start or exited non-zero.
        """
        config = self.config
        try:
            proc = subprocess.Popen(
                [config.osascript_path, '-e', script],
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except OSError as e:
            raise ExecutionFailedError(f"Failed to run {config.osascript_path}: {e}") from e

        # Popen's context manager closes the pipes and reaps the child on every path
        with proc:
            stdout_reader = _PipeReader(proc.stdout, config.max_output_bytes, on_overflow=proc.kill)
            stderr_reader = _PipeReader(proc.stderr, config.max_output_bytes)
            stdout_reader.start()
            stderr_reader.start()
            try:
                returncode = proc.wait(timeout=config.timeout_seconds)
            except subprocess.TimeoutExpired as e:
                proc.kill()
                proc.wait()
                if stdout_reader.overflowed:
                    raise OutputTooLargeError(stdout_reader.size, config.max_output_bytes) from e
                raise ExecutionTimeoutError(config.timeout_seconds) from e
            finally:
                stdout_reader.join(_READER_JOIN_TIMEOUT)
                stderr_reader.join(_READER_JOIN_TIMEOUT)

        if stdout_reader.overflowed:
            raise OutputTooLargeError(stdout_reader.size, config.max_output_bytes)

        stderr = stderr_reader.data().decode('utf-8', errors='replace').strip()

        if returncode != 0:
            message = stderr or f"osascript exited with status {returncode}"
            raise ExecutionFailedError(message, stderr=stderr, returncode=returncode)

        if stderr:
            logger.warning("osascript_stderr stderr=%s", stderr)
        return stdout_reader.data().decode('utf-8', errors='replace').strip()
