"""Morse encoding (English and Japanese wabun), element timing and CW macros."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

# Control instructions carried in the keying stream alongside element durations.
CONTROL_RX1 = 8000
CONTROL_RX2 = 8001
CONTROL_RX3 = 8002
CONTROL_END_OF_MESSAGE = 8003
CONTROL_START_TX = 8010
CONTROL_STOP_TX = 8011
CONTROL_PTT_ON = 8020
CONTROL_PTT_OFF = 8021

CW_MS_ELEMENT = 1200

_PATTERN_CONTROLS = {
    "!": CONTROL_RX1,
    "@": CONTROL_RX2,
    "#": CONTROL_RX3,
    "$": CONTROL_END_OF_MESSAGE,
}


class CodeType(IntEnum):
    ENGLISH = 0
    WABUN = 1


_ENGLISH = {
    " ": " ",
    "A": ".-", "B": "-...", "C": "-.-.", "D": "-..", "E": ".",
    "F": "..-.", "G": "--.", "H": "....", "I": "..", "J": ".---",
    "K": "-.-", "L": ".-..", "M": "--", "N": "-.", "O": "---",
    "P": ".--.", "Q": "--.-", "R": ".-.", "S": "...", "T": "-",
    "U": "..-", "V": "...-", "W": ".--", "X": "-..-", "Y": "-.--",
    "Z": "--..",
    "0": "-----", "1": ".----", "2": "..---", "3": "...--", "4": "....-",
    "5": ".....", "6": "-....", "7": "--...", "8": "---..", "9": "----.",
    "=": "-...-", "/": "-..-.", "*": "-...-", ".": ".", ",": "--..--",
    "'": ".----.", "(": "-.--.", ")": "-.--.-", "&": ".-...",
    "+": ".-.-.", "-": "-...-", "_": "-...-", '"': "-..-.",
    "<": ".-.-.", ">": "...-.-", "?": "..--..",
    "{": "-..---",
    "!": "! ", "@": "@ ", "#": "# ", "$": "$",
}

# Sentinel: send nothing and keep the pending consonant.
_KEEP = object()

# Vowel patterns keyed by the pending consonant; "" is the plain vowel.
# None means send nothing but drop the pending consonant.
_WABUN_VOWELS: dict[str, dict[str, object]] = {
    "A": {
        "K": ".-..", "G": ".-.. ..", "S": "-.-.-", "Z": "-.-.- ..",
        "T": "-.", "D": "-. ..", "N": ".-.", "H": "-...", "B": "-... ..",
        "P": "-... ..--.", "M": "-..-", "Y": ".--", "R": "...", "W": "-.-",
        "": "--.--",
    },
    "I": {
        "K": "-.-..", "G": "-.-.. ..", "S": "--.-.", "Z": "--.-. ..",
        "T": "..-.", "D": "..-. ..", "N": "-.-.", "H": "--..-",
        "B": "--..- ..", "P": "--..- ..--.", "M": "..-.-", "Y": _KEEP,
        "R": "--.", "W": _KEEP, "": ".-",
    },
    "U": {
        "K": "...-", "G": "...- ..", "S": "---.-", "Z": "---.- ..",
        "T": ".--.", "D": ".--. ..", "N": "....", "H": "--..",
        "B": "--.. ..", "P": "--.. ..--.", "M": "-", "Y": "-..--",
        "R": "-.--.", "W": None, "": "..-",
    },
    "E": {
        "K": "-.--", "G": "-.-- ..", "S": ".---.", "Z": ".---. ..",
        "T": ".-.--", "D": ".-.-- ..", "N": "--.-", "H": ".", "B": ". ..",
        "P": ". ..--.", "M": "-...-", "Y": None, "R": "---", "W": None,
        "": "-.---",
    },
    "O": {
        "K": "----", "G": "---- ..", "S": "---.", "Z": "---. ..",
        "T": "..-..", "D": "..-.. ..", "N": "..--", "H": "-..",
        "B": "-.. ..", "P": "-.. ..--.", "M": "-..-.", "Y": "--",
        "R": ".-.-", "W": ".---", "": ".-...",
    },
}

_WABUN_CONSONANTS = frozenset("KSTHMYRWGDZBP")


class MorseEncoder:
    """Turns characters into dit/dah patterns, tracking the wabun state.

    In wabun mode a syllable is typed as romaji: a consonant is held until
    the following vowel selects the kana. ``{`` enters wabun, ``)`` leaves
    it silently and ``}`` leaves it sending the closing sign.
    """

    def __init__(self, code_type: CodeType = CodeType.ENGLISH) -> None:
        self.code_type = CodeType(code_type)
        self.shift = ""

    def reset(self) -> None:
        """Return to English with no pending consonant."""
        self.code_type = CodeType.ENGLISH
        self.shift = ""

    def encode(self, char: str) -> Optional[str]:
        """Pattern to key for one character, or None when nothing is sent."""
        if len(char) != 1:
            raise ValueError(f"expected a single character, got {char!r}")
        if self.code_type is CodeType.WABUN:
            handled, pattern = self._encode_wabun(char)
            if handled:
                return pattern
        pattern = _ENGLISH.get(char)
        if char == "{":
            self.code_type = CodeType.WABUN
        return pattern

    def _encode_wabun(self, char: str) -> tuple[bool, Optional[str]]:
        table = _WABUN_VOWELS.get(char)
        if table is not None:
            pattern = table.get(self.shift, table[""])
            if pattern is _KEEP:
                return True, None
            self.shift = ""
            return True, pattern  # type: ignore[return-value]
        if char == " ":
            self.shift = ""
            return True, " "
        if char == "-":
            self.shift = ""
            return True, ".--.-"
        if char == "N":
            if self.shift == "N":
                self.shift = ""
                return True, ".-.-."
            self.shift = "N"
            return True, None
        if char in _WABUN_CONSONANTS:
            self.shift = char
            return True, None
        if char == ")":
            self.code_type = CodeType.ENGLISH
            self.shift = ""
            return True, None
        if char == "}":
            self.code_type = CodeType.ENGLISH
            self.shift = ""
            return True, "...-."
        return False, None


def _cdiv(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


@dataclass(frozen=True)
class KeyingTiming:
    """CW speed and shape: words per minute, dah length (tenths of a dit) and duty (tenths)."""

    wpm: int = 24
    dah_ratio: int = 30
    duty_ratio: int = 10

    def __post_init__(self) -> None:
        if self.wpm <= 0:
            raise ValueError(f"speed must be positive: {self.wpm}")

    @property
    def element_ms(self) -> int:
        return CW_MS_ELEMENT // self.wpm

    def durations(self, pattern: str) -> list[int]:
        """Keying instructions for a pattern.

        Positive values are key-down milliseconds, negative values key-up
        milliseconds. A pattern starting with a control character yields only
        its control code; otherwise a letter space closes the list.
        """
        elem = self.element_ms
        out: list[int] = []
        for c in pattern:
            control = _PATTERN_CONTROLS.get(c)
            if control is not None:
                out.append(control)
                return out
            if c == ".":
                out.append(_cdiv(elem * self.duty_ratio, 10))
            elif c == "-":
                out.append(_cdiv(elem * self.dah_ratio * self.duty_ratio, 100))
            else:
                out.append(-elem)
            if c != " ":
                out.append(-_cdiv(elem * (20 - self.duty_ratio), 10))
        out.append(-elem * 2)
        return out


def num_abbreviation(text: str, level: int) -> str:
    """Cut numbers: level 1 sends 9 as N, 2 adds 1→A 0→O, 3 adds 1→A 0→T."""
    if level == 3:
        table = {"0": "T", "1": "A", "9": "N"}
    elif level == 2:
        table = {"0": "O", "1": "A", "9": "N"}
    elif level == 1:
        table = {"9": "N"}
    else:
        return text
    return "".join(table.get(c, c) for c in text)


def power_code(codes: str, bandid: int) -> str:
    """Power letter for a band from a per-band code string; the last one covers higher bands."""
    if bandid == 0:
        return "M"
    if bandid < 0:
        raise ValueError(f"invalid band id: {bandid}")
    if not codes:
        raise ValueError("no power codes configured")
    if len(codes) >= bandid:
        return codes[bandid - 1]
    return codes[-1]


@dataclass
class MacroFields:
    """Values substituted into ``$`` macros of CW and RTTY messages."""

    my_callsign: str = ""
    callsign: str = ""
    sent_exch: str = ""
    jcc: str = ""
    sent_rst: str = ""
    my_name: str = ""
    remarks: str = ""
    seqnr: int = 0
    bandid: int = 0
    power_codes: str = ""
    multi_type: int = 0
    abbreviation_level: int = 0


def _token(text: str, index: int) -> str:
    parts = re.split(r"[/,;]", text)
    return parts[index] if index < len(parts) else ""


def expand_cw_macros(text: str, fields: MacroFields) -> str:
    """Expand ``$I $C $W $P $J $V $S $N`` macros; substitutions are expanded again."""
    out: list[str] = []
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
            out.append(expand_cw_macros(fields.my_callsign, fields))
        elif c == "C":
            out.append(expand_cw_macros(fields.callsign, fields))
        elif c == "W":
            token = _token(fields.sent_exch, 1 if fields.bandid >= 11 else 0)
            out.append(
                expand_cw_macros(
                    num_abbreviation(token, fields.abbreviation_level), fields
                )
            )
        elif c == "P":
            if fields.multi_type in (1, 3):
                out.append(
                    expand_cw_macros(
                        power_code(fields.power_codes, fields.bandid), fields
                    )
                )
        elif c == "J":
            out.append(expand_cw_macros(fields.jcc, fields))
        elif c == "V":
            out.append(expand_cw_macros(num_abbreviation(fields.sent_rst, 1), fields))
        elif c == "S":
            out.append(expand_cw_macros(str(fields.seqnr), fields))
        elif c == "N":
            out.append(expand_cw_macros(fields.my_name, fields))
    return "".join(out)