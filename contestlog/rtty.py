"""RTTY (45.45 baud Baudot) keying and RTTY memory macro expansion."""

from __future__ import annotations

from typing import Optional

from .morse import CONTROL_START_TX, CONTROL_STOP_TX, MacroFields, power_code

BIT_MS = 22
FIGS_CODE = 27
LTRS_CODE = 31
MAX_MEMORY_LENGTH = 50

# Characters valid in either shift; sending them never changes the shift.
_EITHER_SHIFT = {
    "\x00": 0,
    "\n": 2,
    " ": 4,
    "\r": 8,
}

_LETTERS = {
    "E": 1, "A": 3, "S": 5, "I": 6, "U": 7, "D": 9, "R": 10, "J": 11,
    "N": 12, "F": 13, "C": 14, "K": 15, "T": 16, "Z": 17, "L": 18,
    "W": 19, "H": 20, "Y": 21, "P": 22, "Q": 23, "O": 24, "B": 25,
    "G": 26, "M": 28, "X": 29, "V": 30,
}

_FIGURES = {
    "3": 1, "-": 3, "8": 6, "7": 7, "$": 9, "4": 10, "'": 11, ",": 12,
    "!": 13, ":": 14, "(": 15, "5": 16, '"': 17, ")": 18, "2": 19,
    "6": 21, "0": 22, "1": 23, "9": 24, "?": 25, "&": 26, ".": 28,
    "/": 29, ";": 30,
}

_TRANSMISSION_CONTROLS = {
    "[": CONTROL_START_TX,
    "]": CONTROL_STOP_TX,
}


def baudot_code(char: str) -> Optional[tuple[int, Optional[bool]]]:
    """Baudot code of a character and the shift it needs.

    The shift is False for letters, True for figures and None for characters
    valid in either shift. Returns None for characters with no code.
    """
    if len(char) != 1:
        raise ValueError(f"expected a single character, got {char!r}")
    if char in _EITHER_SHIFT:
        return _EITHER_SHIFT[char], None
    if char in _LETTERS:
        return _LETTERS[char], False
    if char in _FIGURES:
        return _FIGURES[char], True
    return None


def _frame(code: int) -> list[int]:
    """One character frame: start bit, five data bits LSB first, stop bits."""
    bits = (code << 1) | 0b1000000
    out = [BIT_MS if (bits >> i) & 1 else -BIT_MS for i in range(7)]
    out.append(BIT_MS // 2)
    return out


class BaudotEncoder:
    """Turns characters into RTTY keying instructions, tracking the shift state.

    Positive values are mark milliseconds, negative values space
    milliseconds; ``[`` and ``]`` yield the start/stop transmission controls.
    """

    def __init__(self, figures: bool = False) -> None:
        self.figures = figures

    def encode(self, char: str) -> list[int]:
        """Keying instructions for one character; empty when it has no code."""
        if char in _TRANSMISSION_CONTROLS:
            return [_TRANSMISSION_CONTROLS[char]]
        found = baudot_code(char)
        if found is None:
            return []
        code, shift = found
        out: list[int] = []
        if shift is not None and shift != self.figures:
            self.figures = shift
            out.extend(_frame(FIGS_CODE if shift else LTRS_CODE))
        out.extend(_frame(code))
        return out


def expand_rtty_memory(text: str, fields: MacroFields) -> str:
    """Expand ``$I $C $W $J $P $V $S $R $N $L`` macros for an RTTY memory.

    Substitutions are expanded again; a substitution is skipped once the
    text already holds ``MAX_MEMORY_LENGTH`` characters.
    """
    out: list[str] = []
    _expand_into(out, text, fields)
    return "".join(out)


def _expand_into(out: list[str], text: str, fields: MacroFields) -> None:
    if sum(len(part) for part in out) >= MAX_MEMORY_LENGTH:
        return
    pending = False
    for c in text:
        if c == "$":
            pending = True
            continue
        if not pending:
            out.append(c)
            continue
        pending = False
        if c == "I":
            _expand_into(out, fields.my_callsign, fields)
        elif c == "C":
            _expand_into(out, fields.callsign, fields)
        elif c == "W":
            _expand_into(out, fields.sent_exch, fields)
        elif c == "J":
            _expand_into(out, fields.jcc, fields)
        elif c == "P":
            _expand_into(out, power_code(fields.power_codes, fields.bandid), fields)
        elif c == "V":
            _expand_into(out, fields.sent_rst, fields)
        elif c == "S":
            _expand_into(out, str(fields.seqnr), fields)
        elif c == "R":
            _expand_into(out, fields.remarks, fields)
        elif c == "N":
            _expand_into(out, fields.my_name, fields)
        elif c == "L":
            _expand_into(out, "\n", fields)