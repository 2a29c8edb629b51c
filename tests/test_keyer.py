import pytest

from contestlog.dupechk import ModeType
from contestlog.keyer import BREAK_IN_MS, Keyer, KeyerEvent
from contestlog.morse import KeyingTiming, MacroFields
from contestlog.rtty import BaudotEncoder


def run(keyer, limit=20000, extra=0):
    timeline = []
    t = 0
    while t < limit:
        t += 1
        for event in keyer.tick():
            timeline.append((t, event))
        if keyer.idle():
            break
    for _ in range(extra):
        t += 1
        for event in keyer.tick():
            timeline.append((t, event))
    return timeline


def test_append_uppercases_and_remaps_quote():
    keyer = Keyer()
    keyer.append("a")
    keyer.append('"')
    assert keyer.pending_text() == "A/"


def test_non_printable_rejected():
    keyer = Keyer()
    assert keyer.append("\x07") is False
    assert keyer.pending_text() == ""
    assert keyer.idle()


def test_delete_and_clear():
    keyer = Keyer()
    for c in "CQ":
        keyer.append(c)
    keyer.delete()
    assert keyer.pending_text() == "C"
    keyer.clear()
    keyer.delete()
    assert keyer.pending_text() == ""


def test_capacity_limit():
    keyer = Keyer()
    accepted = [keyer.append("E") for _ in range(keyer.capacity + 5)]
    assert sum(accepted) == keyer.capacity
    assert len(keyer.pending_text()) == keyer.capacity


def test_control_chars_hidden_in_pending_text():
    keyer = Keyer()
    for c in "A!B":
        keyer.append(c)
    assert keyer.pending_text() == "AB"


def test_append_string_expands_macros():
    keyer = Keyer()
    keyer.append_string("$C TU", MacroFields(callsign="JA1ABC"))
    assert keyer.pending_text() == "JA1ABC TU"


def test_cw_dit_timing():
    timing = KeyingTiming()
    keyer = Keyer(timing)
    keyer.append("E")
    timeline = run(keyer)
    events = [e for _, e in timeline]
    assert events == [KeyerEvent.KEY_DOWN, KeyerEvent.KEY_UP, KeyerEvent.KEY_UP]
    down = timeline[0][0]
    up = timeline[1][0]
    assert up - down == timing.durations(".")[0]
    assert keyer.idle()


def test_current_char_shown_while_sending():
    keyer = Keyer()
    keyer.append("T")
    keyer.append("E")
    keyer.tick()
    keyer.tick()
    assert keyer.pending_text() == "TE"
    run(keyer)
    assert keyer.pending_text() == ""


def test_key_down_count_matches_elements():
    keyer = Keyer()
    keyer.append("5")
    events = [e for _, e in run(keyer)]
    assert events.count(KeyerEvent.KEY_DOWN) == 5


def test_rx_control_event():
    keyer = Keyer()
    keyer.append("!")
    events = [e for _, e in run(keyer)]
    assert events == [KeyerEvent.SELECT_RX1]


def test_tone_keying_break_in():
    keyer = Keyer(tone_keying=True)
    keyer.append("E")
    timeline = run(keyer, extra=BREAK_IN_MS + 10)
    events = [e for _, e in timeline]
    assert events[:3] == [KeyerEvent.KEY_DOWN, KeyerEvent.START_TX, KeyerEvent.TONE_OFF]
    assert KeyerEvent.TONE_ON in events
    assert events[-2:] == [KeyerEvent.KEY_UP, KeyerEvent.STOP_TX]
    assert events.count(KeyerEvent.STOP_TX) == 1


def test_rtty_frame_follows_baudot():
    keyer = Keyer(mode=ModeType.DG)
    keyer.append("E")
    events = [e for _, e in run(keyer)]
    durations = BaudotEncoder().encode("E")
    assert len(events) == len(durations)
    assert events.count(KeyerEvent.KEY_DOWN) == sum(1 for d in durations if d > 0)


def test_rtty_transmission_controls():
    keyer = Keyer(mode=ModeType.DG)
    keyer.append("[")
    keyer.append("]")
    events = [e for _, e in run(keyer)]
    assert events == [KeyerEvent.START_TX, KeyerEvent.STOP_TX]


def test_phone_mode_keys_nothing():
    keyer = Keyer(mode=ModeType.PH)
    keyer.append("E")
    assert run(keyer) == []
    assert keyer.idle()


def test_invalid_timing():
    with pytest.raises(ValueError):
        Keyer(KeyingTiming(wpm=0))