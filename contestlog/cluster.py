"""DX cluster client logic: spot parsing, line assembly and the login state machine."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Optional, Sequence, Union

DEFAULT_SERVER = "arc.jg1vgx.net"
DEFAULT_PORT = 7000
DEFAULT_COMMANDS = (
    "set dx ext skimmerquality",
    "set dx fil not skimdupe and not skimbusted and not skimqsy and cty=ja and SpotterCty=ja",
    "sh dx fil",
)
DEFAULT_LINE_LENGTH = 256
ALIVE_TIMEOUT_MS = 300000
REMARKS_LENGTH = 16

# Column of a spot line where the mode / skimmer comment starts.
COMMENT_COLUMN = 39

_ATOI = re.compile(r"\s*([+-]?\d+)")


def _atoi(text: str) -> int:
    match = _ATOI.match(text)
    return int(match.group(1)) if match else 0


def parse_server(spec: str) -> tuple[str, int]:
    """Split ``host[:port]`` into host and port; the port defaults to 7000."""
    tokens = [t for t in spec.split(":") if t]
    if not tokens:
        raise ValueError(f"no cluster host in {spec!r}")
    host = tokens[0]
    port = _atoi(tokens[1]) if len(tokens) > 1 else DEFAULT_PORT
    return host, port


def detect_mode(text: str) -> str:
    """Mode named in a spot comment; skimmer spots without one are taken as CW."""
    for mode in ("CW", "FT8", "FT4"):
        if mode in text:
            return mode
    return "CW"


def is_ft_line(line: str) -> bool:
    """True for FT8/FT4 spots, which are ignored."""
    return len(line) > COMMENT_COLUMN + 3 and line[COMMENT_COLUMN:COMMENT_COLUMN + 2] == "FT"


def is_cw_spot(line: str) -> bool:
    """True for a ``DX de`` line whose comment marks a CW spot."""
    if not line.startswith("DX de"):
        return False
    comment = line[COMMENT_COLUMN:]
    return comment.startswith("CW") or "WPM" in comment


@dataclass(frozen=True)
class Spot:
    """One DX spot: who spotted whom, where (kHz) and in which mode."""

    spotter: str
    frequency: float
    callsign: str
    mode: str
    remarks: str


class _Tokens:
    """Successive tokens of a string, split on changing delimiter sets."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def next(self, delims: str) -> Optional[str]:
        text, pos = self.text, self.pos
        while pos < len(text) and text[pos] in delims:
            pos += 1
        if pos >= len(text):
            self.pos = pos
            return None
        end = pos
        while end < len(text) and text[end] not in delims:
            end += 1
        self.pos = end + 1 if end < len(text) else end
        return text[pos:end]

    def rest(self) -> Optional[str]:
        if self.pos >= len(self.text):
            return None
        rest = self.text[self.pos:]
        self.pos = len(self.text)
        return rest


def parse_spot(line: str) -> Optional[Spot]:
    """Parse a ``DX de`` line; returns None when a field is missing or malformed."""
    tokens = _Tokens(line)
    head = tokens.next(":")
    if head is None:
        return None
    freq_text = tokens.next(" ")
    if freq_text is None:
        return None
    try:
        frequency = float(freq_text)
    except ValueError:
        return None
    callsign = tokens.next(" ")
    if callsign is None:
        return None
    rest = tokens.rest()
    if rest is None:
        return None
    spotter = head[len("DX de"):].strip() if head.startswith("DX de") else head.strip()
    return Spot(
        spotter=spotter,
        frequency=frequency,
        callsign=callsign,
        mode=detect_mode(rest),
        remarks=rest[:REMARKS_LENGTH].strip(),
    )


class SpotLineReader:
    """Assembles received bytes into lines ended by CR or LF.

    A line that grows to ``max_length`` characters without an end is dropped
    and counted in ``overflows``; empty lines are skipped.
    """

    def __init__(self, max_length: int = DEFAULT_LINE_LENGTH) -> None:
        if max_length <= 0:
            raise ValueError(f"line length must be positive: {max_length}")
        self.max_length = max_length
        self.overflows = 0
        self._buf: list[str] = []

    def feed(self, data: Union[bytes, str]) -> list[str]:
        """Add received data and return the lines it completed."""
        text = data.decode("latin-1") if isinstance(data, (bytes, bytearray)) else data
        lines: list[str] = []
        for char in text:
            if char in "\r\n":
                if self._buf:
                    lines.append("".join(self._buf))
                    self._buf.clear()
                continue
            self._buf.append(char)
            if len(self._buf) >= self.max_length:
                self.overflows += 1
                self._buf.clear()
        return lines


class ClusterState(IntEnum):
    IDLE = 0
    CONNECTED = 1
    SEND_COMMAND_1 = 2
    SEND_COMMAND_2 = 3
    SEND_COMMAND_3 = 4
    RECEIVING = 5
    SEND_USER_COMMAND = 6
    WAITING = 10
    DISCONNECTED = 11


def _noop(*_args: object) -> None:
    return None


class ClusterSession:
    """Connection and login sequence for a DX cluster, driven by ``tick``.

    Times are in milliseconds. ``connect``, ``disconnect`` and ``send`` are
    called to act on the network connection.
    """

    def __init__(
        self,
        callsign: str,
        commands: Sequence[str] = DEFAULT_COMMANDS,
        send: Optional[Callable[[str], None]] = None,
        connect: Optional[Callable[[], None]] = None,
        disconnect: Optional[Callable[[], None]] = None,
    ) -> None:
        if len(commands) != 3:
            raise ValueError("exactly three login commands are needed")
        self.callsign = callsign
        self.commands = tuple(commands)
        self.user_command = ""
        self.state = ClusterState.IDLE
        self.timeout = 0
        self.alive_until = 0
        self._send = send or _noop
        self._connect = connect or _noop
        self._disconnect = disconnect or _noop

    def on_connect(self, now: int) -> None:
        """The connection is up: wait a moment, then log in."""
        self.state = ClusterState.CONNECTED
        self.timeout = now + 2000
        self.alive_until = now + ALIVE_TIMEOUT_MS

    def on_disconnect(self, now: int) -> None:
        """The connection went down: start over."""
        self.state = ClusterState.IDLE
        self.timeout = now + 2000

    def on_data(self, now: int) -> bool:
        """Data arrived; returns True when it should be read as spots."""
        if self.state != ClusterState.RECEIVING:
            return False
        self.alive_until = now + ALIVE_TIMEOUT_MS
        return True

    def request_command(self) -> bool:
        """Ask to send ``user_command``; only possible while receiving."""
        if self.state != ClusterState.RECEIVING:
            return False
        self.state = ClusterState.SEND_USER_COMMAND
        return True

    def tick(self, now: int, online: bool, connected: bool) -> ClusterState:
        """Advance the state machine and return the new state."""
        state = self.state
        if state == ClusterState.IDLE:
            if not online:
                self.state = ClusterState.WAITING
                self.timeout = now + 1000
            elif not connected:
                self._connect()
                self.state = ClusterState.WAITING
                self.timeout = now + 10000
        elif state == ClusterState.WAITING:
            if self.timeout < now:
                self.state = ClusterState.IDLE
        elif state == ClusterState.CONNECTED:
            if self.timeout < now:
                self._send(self.callsign)
                self.state = ClusterState.SEND_COMMAND_1
                self.timeout = now + 500
        elif state in (
            ClusterState.SEND_COMMAND_1,
            ClusterState.SEND_COMMAND_2,
            ClusterState.SEND_COMMAND_3,
        ):
            if self.timeout < now:
                self._send(self.commands[state - ClusterState.SEND_COMMAND_1])
                self.state = ClusterState(state + 1)
                self.timeout = now + 500
        elif state == ClusterState.SEND_USER_COMMAND:
            if connected:
                self._send(self.user_command)
            self.state = ClusterState.RECEIVING
            self.alive_until = now + ALIVE_TIMEOUT_MS
        elif state == ClusterState.RECEIVING:
            if not connected or self.alive_until < now:
                self._disconnect()
                self.state = ClusterState.IDLE
        return self.state