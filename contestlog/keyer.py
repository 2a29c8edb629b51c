"""Millisecond-driven CW/RTTY keyer: a text buffer feeding a queue of keying instructions."""

from __future__ import annotations

from collections import deque
from enum import Enum
from typing import Optional

from .dupechk import ModeType
from .morse import (
    CONTROL_END_OF_MESSAGE,
    CONTROL_PTT_OFF,
    CONTROL_PTT_ON,
    CONTROL_RX1,
    CONTROL_RX2,
    CONTROL_RX3,
    CONTROL_START_TX,
    CONTROL_STOP_TX,
    CodeType,
    KeyingTiming,
    MacroFields,
    MorseEncoder,
    expand_cw_macros,
)
from .rtty import BaudotEncoder

SEND_BUFFER_LENGTH = 120
BREAK_IN_MS = 200
_HIDDEN_CHARS = frozenset("!@#$%^")
_CW_SPECIALS = frozenset("!@#$")
_WABUN_CHARS = frozenset("AIUEONKSTHMYRWGDZBP -)}")


class KeyerEvent(Enum):
    """Things the keyer asks the transmitter side to do."""

    KEY_DOWN = "key_down"
    KEY_UP = "key_up"
    TONE_ON = "tone_on"
    TONE_OFF = "tone_off"
    TONE_MARK = "tone_mark"
    TONE_SPACE = "tone_space"
    SELECT_RX1 = "select_rx1"
    SELECT_RX2 = "select_rx2"
    SELECT_RX3 = "select_rx3"
    END_OF_MESSAGE = "end_of_message"
    START_TX = "start_tx"
    STOP_TX = "stop_tx"
    PTT_ON = "ptt_on"
    PTT_OFF = "ptt_off"


_CONTROL_EVENTS = {
    CONTROL_RX1: KeyerEvent.SELECT_RX1,
    CONTROL_RX2: KeyerEvent.SELECT_RX2,
    CONTROL_RX3: KeyerEvent.SELECT_RX3,
    CONTROL_END_OF_MESSAGE: KeyerEvent.END_OF_MESSAGE,
    CONTROL_START_TX: KeyerEvent.START_TX,
    CONTROL_STOP_TX: KeyerEvent.STOP_TX,
    CONTROL_PTT_ON: KeyerEvent.PTT_ON,
    CONTROL_PTT_OFF: KeyerEvent.PTT_OFF,
}


class Keyer:
    """Sends buffered text as CW or RTTY, advanced one millisecond per ``tick``.

    With tone keying the transmitter is keyed on (break-in) before the first
    element and released once nothing has been sent for ``BREAK_IN_MS``.
    """

    def __init__(
        self,
        timing: Optional[KeyingTiming] = None,
        mode: ModeType = ModeType.CW,
        tone_keying: bool = False,
    ) -> None:
        self.timing = timing if timing is not None else KeyingTiming()
        self.mode = ModeType(mode)
        self.tone_keying = tone_keying
        self.morse = MorseEncoder()
        self.baudot = BaudotEncoder()
        self._text: deque[str] = deque()
        self._queue: deque[int] = deque()
        self._count_ms = 0
        self._current = ""
        self._break_in = -1

    @property
    def capacity(self) -> int:
        return SEND_BUFFER_LENGTH - 1

    def append(self, char: str) -> bool:
        """Queue one printable character; returns False when it is not accepted."""
        if len(char) != 1 or not (" " <= char <= "~"):
            return False
        if "a" <= char <= "z":
            char = char.upper()
        if char == '"':
            char = "/"
        if len(self._text) >= self.capacity:
            return False
        self._text.append(char)
        return True

    def append_string(self, text: str, fields: Optional[MacroFields] = None) -> None:
        """Queue text after expanding its ``$`` macros."""
        for char in expand_cw_macros(text, fields if fields is not None else MacroFields()):
            self.append(char)

    def delete(self) -> None:
        """Remove the last character not yet sent."""
        if self._text:
            self._text.pop()

    def clear(self) -> None:
        """Drop every character not yet sent."""
        self._text.clear()

    def pending_text(self) -> str:
        """The character being sent followed by the unsent text, control characters hidden."""
        out = [self._current] if self._current else []
        for char in self._text:
            if len(out) >= SEND_BUFFER_LENGTH - 1:
                break
            if char not in _HIDDEN_CHARS:
                out.append(char)
        return "".join(out)

    def idle(self) -> bool:
        """True when nothing is being keyed and nothing is waiting."""
        return self._count_ms == 0 and not self._queue and not self._text

    def tick(self) -> list[KeyerEvent]:
        """Advance one millisecond and return the events it caused."""
        events: list[KeyerEvent] = []
        if self._count_ms > 0:
            self._count_ms -= 1
        if self._count_ms == 0 and self._queue:
            self._run_instruction(events)
        if not self._queue:
            self._current = ""
            if self._text:
                self._load_next()
            elif self.tone_keying:
                if self._break_in > 0:
                    self._break_in -= 1
                if self._break_in == 0:
                    events.append(KeyerEvent.KEY_UP)
                    events.append(KeyerEvent.STOP_TX)
                    self._break_in = -1
        return events

    def _run_instruction(self, events: list[KeyerEvent]) -> None:
        ms = self._queue[0]
        if self.tone_keying and self._break_in < 0 and 0 < ms < 8000:
            events.append(KeyerEvent.KEY_DOWN)
            events.append(KeyerEvent.START_TX)
            ms = -BREAK_IN_MS
            self._break_in = BREAK_IN_MS
        else:
            self._queue.popleft()

        control = _CONTROL_EVENTS.get(ms)
        if control is not None:
            events.append(control)
            return
        key_on = ms > 0
        if self.mode is ModeType.DG:
            if self.tone_keying:
                events.append(KeyerEvent.TONE_MARK if key_on else KeyerEvent.TONE_SPACE)
            else:
                events.append(KeyerEvent.KEY_DOWN if key_on else KeyerEvent.KEY_UP)
        elif self.mode is not ModeType.PH:
            if self.tone_keying:
                events.append(KeyerEvent.TONE_ON if key_on else KeyerEvent.TONE_OFF)
            else:
                events.append(KeyerEvent.KEY_DOWN if key_on else KeyerEvent.KEY_UP)
        self._count_ms = abs(ms)

    def _load_next(self) -> None:
        char = self._text.popleft()
        if self.mode is ModeType.DG:
            self._queue.extend(self.baudot.encode(char))
            return
        was_wabun = self.morse.code_type is CodeType.WABUN
        pattern = self.morse.encode(char)
        if pattern is not None:
            self._queue.extend(self.timing.durations(pattern))
        if was_wabun and char in _WABUN_CHARS:
            self._current = char
        elif pattern is None or char in _CW_SPECIALS:
            self._current = ""
        else:
            self._current = char