import pytest

from contestlog.morse import (
    CONTROL_END_OF_MESSAGE,
    CONTROL_RX1,
    CodeType,
    KeyingTiming,
    MacroFields,
    MorseEncoder,
    expand_cw_macros,
    num_abbreviation,
    power_code,
)


def test_english_letters():
    enc = MorseEncoder()
    assert enc.encode("A") == ".-"
    assert enc.encode("S") == "..."
    assert enc.encode("0") == "-----"
    assert enc.encode("?") == "..--.."


def test_unknown_character_sends_nothing():
    enc = MorseEncoder()
    assert enc.encode("~") is None


def test_encode_requires_single_char():
    with pytest.raises(ValueError):
        MorseEncoder().encode("AB")


def test_brace_enters_wabun():
    enc = MorseEncoder()
    assert enc.encode("{") == "-..---"
    assert enc.code_type is CodeType.WABUN


def test_wabun_consonant_then_vowel():
    enc = MorseEncoder(CodeType.WABUN)
    assert enc.encode("K") is None
    assert enc.shift == "K"
    assert enc.encode("A") == ".-.."
    assert enc.shift == ""


def test_wabun_plain_vowel_and_nn():
    enc = MorseEncoder(CodeType.WABUN)
    assert enc.encode("A") == "--.--"
    assert enc.encode("N") is None
    assert enc.encode("N") == ".-.-."


def test_wabun_yi_keeps_shift():
    enc = MorseEncoder(CodeType.WABUN)
    enc.encode("Y")
    assert enc.encode("I") is None
    assert enc.shift == "Y"


def test_wabun_exit():
    enc = MorseEncoder(CodeType.WABUN)
    assert enc.encode("}") == "...-."
    assert enc.code_type is CodeType.ENGLISH
    enc2 = MorseEncoder(CodeType.WABUN)
    assert enc2.encode(")") is None
    assert enc2.code_type is CodeType.ENGLISH
    assert enc2.encode("A") == ".-"


def test_wabun_falls_back_to_english():
    enc = MorseEncoder(CodeType.WABUN)
    assert enc.encode("5") == "....."


def test_reset():
    enc = MorseEncoder(CodeType.WABUN)
    enc.encode("K")
    enc.reset()
    assert enc.code_type is CodeType.ENGLISH
    assert enc.shift == ""


def test_timing_element_length():
    assert KeyingTiming(wpm=24).element_ms == 50


def test_timing_dah_is_three_dits():
    t = KeyingTiming()
    dit = t.durations(".")
    dah = t.durations("-")
    assert dah[0] == 3 * dit[0]
    assert dit[1] == -dit[0]
    assert dit[-1] == -2 * t.element_ms


def test_timing_space_and_structure():
    t = KeyingTiming()
    out = t.durations(".- ")
    assert len(out) == 6
    assert out[4] == -t.element_ms
    assert all(v < 0 for v in out[1::2][:2])


def test_timing_control_pattern():
    t = KeyingTiming()
    assert t.durations("! ") == [CONTROL_RX1]
    assert t.durations("$") == [CONTROL_END_OF_MESSAGE]


def test_timing_rejects_zero_speed():
    with pytest.raises(ValueError):
        KeyingTiming(wpm=0)


def test_num_abbreviation_levels():
    assert num_abbreviation("599", 1) == "5NN"
    assert num_abbreviation("1009", 3) == "ATTN"
    assert num_abbreviation("1009", 0) == "1009"
    assert num_abbreviation("10", 2) == "AO"


def test_power_code():
    assert power_code("PLM", 0) == "M"
    assert power_code("PLM", 2) == "L"
    assert power_code("PLM", 7) == "M"
    with pytest.raises(ValueError):
        power_code("", 3)


def test_expand_calls():
    fields = MacroFields(my_callsign="JA1AAA", callsign="JA1ZZZ")
    assert expand_cw_macros("$C DE $I", fields) == "JA1ZZZ DE JA1AAA"


def test_expand_exchange_by_band():
    fields = MacroFields(sent_exch="13M/10M", bandid=12)
    assert expand_cw_macros("$W", fields) == "10M"
    fields.bandid = 3
    assert expand_cw_macros("$W", fields) == "13M"


def test_expand_power_only_for_ja_types():
    fields = MacroFields(power_codes="HM", bandid=1, multi_type=1)
    assert expand_cw_macros("$P", fields) == "H"
    fields.multi_type = 0
    assert expand_cw_macros("$P", fields) == ""


def test_expand_rst_seqnr_and_unknown():
    fields = MacroFields(sent_rst="599", seqnr=12)
    assert expand_cw_macros("$V", fields) == num_abbreviation("599", 1)
    assert expand_cw_macros("$S", fields) == "12"
    assert expand_cw_macros("A$QB", fields) == "AB"