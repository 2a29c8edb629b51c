"""Serial console input: command line assembly and terminal key emulation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

MAX_COMMAND_LENGTH = 128

_ESC = 0x1B
_CSI = 0x5B
_TILDE = 0x7E

_NUM_KEYS = "!@#$%^&*()"
_SYM_KEYS_UP = '_+{}|~:"~<>?'
_SYM_KEYS_LO = "-=[]\\ ;'`,./"

# Keys reached from ESC [ <c>; values are (next escape state, key, shift).
_CSI_PREFIXES = {0x31: 3, 0x32: 4, 0x34: 5, 0x35: 6, 0x36: 7}
_CSI_KEYS = {
    0x41: 0x52,  # up
    0x42: 0x51,  # down
    0x44: 0x50,  # left
    0x43: 0x4F,  # right
}
# Single-key sequences ESC [ n ~.
_TILDE_KEYS = {3: 0x4A, 5: 0x4D, 6: 0x4B, 7: 0x4E}

_PLAIN_KEYS = {
    0x0D: 0x28,  # enter
    0x08: 0x2A,  # backspace
    0x09: 0x2B,  # tab
    0x7F: 0x4C,  # delete
}


@dataclass(frozen=True)
class KeyEvent:
    """A key press as a keyboard would report it: usage code, modifiers and character."""

    key: int
    char: str = ""
    ctrl: bool = False
    shift: bool = False
    alt: bool = False


class KeyEmulator:
    """Turns terminal input, including ESC sequences, into keyboard key presses."""

    def __init__(self) -> None:
        self._esc = 0
        self._funcnum = 0

    def feed(self, char: Union[str, int]) -> Optional[KeyEvent]:
        """Take one input character; returns a key press, or None while a sequence is open."""
        if isinstance(char, str):
            if len(char) != 1:
                raise ValueError(f"expected a single character, got {char!r}")
            c = ord(char)
        else:
            c = char
        key = 0
        ctrl = shift = alt = False
        esc = self._esc

        if esc == 1:
            if c == _CSI:
                self._esc = 2
                return None
            if c == _ESC:
                key, c = 0x29, 0
            else:
                alt = True
        elif esc == 2:
            if c in _CSI_PREFIXES:
                self._esc = _CSI_PREFIXES[c]
                return None
            if c in _CSI_KEYS:
                key, c = _CSI_KEYS[c], 0
            elif c == 0x5A:
                key, c, shift = 0x2B, 0, True
        elif esc == 3:
            if c == _TILDE:
                key, c = _TILDE_KEYS[3], 0
            elif 0x30 <= c <= 0x34:
                self._funcnum = c
                self._esc = 8
                return None
        elif esc == 4:
            if 0x31 <= c <= 0x39:
                self._funcnum = c
                self._esc = 9
                return None
        elif esc in (5, 6, 7):
            if c == _TILDE:
                key, c = _TILDE_KEYS[esc], 0
        elif esc == 8:
            if c == _TILDE:
                num = self._funcnum
                if 0x31 <= num <= 0x35:
                    key, c = num + 0x3A - 0x31, 0
                if 0x37 <= num <= 0x39:
                    key, c = num + 0x3F - 0x31, 0
        elif esc == 9:
            if c == _TILDE:
                key, c = self._funcnum + 0x42 - 0x30, 0

        if key == 0:
            if c == 0x20:
                key = 0x2C
            elif c in _PLAIN_KEYS:
                key, c = _PLAIN_KEYS[c], 0
            elif c == _ESC:
                if self._esc == 0:
                    self._esc = 1
                    return None
            elif 0x01 <= c <= 0x1F:
                c = c - 0x01 + ord("A")
                ctrl = True
                if ord("A") <= c <= ord("Z"):
                    key = c - ord("A") + 0x04
            else:
                key, shifted = _printable_key(c)
                shift = shift or shifted

        self._esc = 0
        return KeyEvent(key=key, char=chr(c) if c else "", ctrl=ctrl, shift=shift, alt=alt)


def _printable_key(c: int) -> tuple[int, bool]:
    if ord("a") <= c <= ord("z"):
        return c - ord("a") + 0x04, False
    if ord("A") <= c <= ord("Z"):
        return c - ord("A") + 0x04, True
    if ord("0") <= c <= ord("9"):
        return c - ord("0") + 0x1E, False
    ch = chr(c)
    if ch in _NUM_KEYS:
        return 0x1E + _NUM_KEYS.index(ch), True
    if ch in _SYM_KEYS_UP:
        return 0x2D + _SYM_KEYS_UP.index(ch), True
    if ch in _SYM_KEYS_LO:
        return 0x2D + _SYM_KEYS_LO.index(ch), False
    return 0, False


class LineAssembler:
    """Collects console input into command lines ended by LF; CR is ignored.

    Characters beyond ``max_length`` in one line are dropped.
    """

    def __init__(self, max_length: int = MAX_COMMAND_LENGTH) -> None:
        if max_length <= 0:
            raise ValueError(f"line length must be positive: {max_length}")
        self.max_length = max_length
        self._buf: list[str] = []

    def feed(self, data: Union[bytes, str]) -> list[str]:
        """Add received input and return the command lines it completed."""
        text = data.decode("latin-1") if isinstance(data, (bytes, bytearray)) else data
        lines: list[str] = []
        for char in text:
            if char == "\n":
                lines.append("".join(self._buf))
                self._buf.clear()
            elif char == "\r":
                continue
            elif len(self._buf) < self.max_length:
                self._buf.append(char)
        return lines