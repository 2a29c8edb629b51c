import pytest

from contestlog.dupechk import (
    DupeChecker,
    ModeType,
    Score,
    bandmode_param,
    effective_bandmode,
)

MASK_ALL = 0xFF
MASK_NO_MODE = 0xFF - 3


@pytest.mark.parametrize("bandid", range(1, 14))
@pytest.mark.parametrize("mode", list(ModeType))
def test_bandmode_keeps_mode_in_low_bits(bandid, mode):
    assert bandmode_param(bandid, mode) & 3 == mode


def test_bandmode_distinct_per_band_and_mode():
    values = {bandmode_param(b, m) for b in range(1, 14) for m in ModeType}
    assert len(values) == 13 * len(ModeType)


def test_bandmode_fits_in_byte():
    assert 0 <= bandmode_param(100, ModeType.DG) <= 0xFF


def test_tone_keying_phone_counts_as_cw():
    assert effective_bandmode(5, ModeType.PH, True) == bandmode_param(5, ModeType.CW)
    assert effective_bandmode(5, ModeType.PH, False) == bandmode_param(5, ModeType.PH)
    assert effective_bandmode(5, ModeType.DG, True) == bandmode_param(5, ModeType.DG)


def test_is_dupe_same_bandmode():
    checker = DupeChecker()
    bm = bandmode_param(3, ModeType.CW)
    checker.add("JA1ZZZ", "10M", bm)
    assert checker.is_dupe("JA1ZZZ", bm, MASK_ALL)
    assert not checker.is_dupe("JA1YYY", bm, MASK_ALL)
    assert not checker.is_dupe("JA1ZZZ", bandmode_param(4, ModeType.CW), MASK_ALL)


def test_mask_merges_modes():
    checker = DupeChecker()
    checker.add("JA1ZZZ", "10M", bandmode_param(3, ModeType.CW))
    ph = bandmode_param(3, ModeType.PH)
    assert not checker.is_dupe("JA1ZZZ", ph, MASK_ALL)
    assert checker.is_dupe("JA1ZZZ", ph, MASK_NO_MODE)


def test_check_finds_exchange_from_other_band():
    checker = DupeChecker()
    checker.add("JA1ZZZ", "10M", bandmode_param(3, ModeType.CW))
    result = checker.check("JA1ZZZ", bandmode_param(4, ModeType.CW), MASK_ALL, True)
    assert not result.dupe
    assert result.exchange == "10M"


def test_check_dupe_without_exchange_wanted():
    checker = DupeChecker()
    bm = bandmode_param(3, ModeType.CW)
    checker.add("JA1ZZZ", "10M", bm)
    result = checker.check("JA1ZZZ", bm, MASK_ALL, False)
    assert result.dupe
    assert result.exchange is None


def test_check_dupe_still_collects_exchange_when_wanted():
    checker = DupeChecker()
    bm = bandmode_param(3, ModeType.CW)
    checker.add("JA1ZZZ", "10M", bm)
    checker.add("JA1ZZZ", "11H", bandmode_param(5, ModeType.CW))
    result = checker.check("JA1ZZZ", bm, MASK_ALL, True)
    assert result.dupe
    assert result.exchange == "11H"


def test_history_used_only_when_not_found():
    checker = DupeChecker()
    calls = []

    def history(call):
        calls.append(call)
        return "25M"

    result = checker.check("JA2AAA", bandmode_param(3, ModeType.CW), MASK_ALL, True, history)
    assert result.exchange == "25M"
    assert calls == ["JA2AAA"]

    checker.add("JA2AAA", "10M", bandmode_param(4, ModeType.CW))
    result = checker.check("JA2AAA", bandmode_param(3, ModeType.CW), MASK_ALL, True, history)
    assert result.exchange == "10M"
    assert calls == ["JA2AAA"]


def test_history_not_used_for_dupe():
    checker = DupeChecker()
    bm = bandmode_param(3, ModeType.CW)
    checker.add("JA2AAA", "", bm)
    result = checker.check("JA2AAA", bm, MASK_ALL, True, lambda c: "25M")
    assert result.dupe
    assert result.exchange is None


def test_history_miss_gives_no_exchange():
    checker = DupeChecker()
    result = checker.check("JA2AAA", bandmode_param(3, ModeType.CW), MASK_ALL, True, lambda c: None)
    assert not result.dupe
    assert result.exchange is None


def test_capacity_limits_additions():
    checker = DupeChecker(capacity=1)
    assert checker.add("A", "", 1)
    assert not checker.add("B", "", 1)
    assert len(checker) == 1
    assert not checker.is_dupe("B", 1, MASK_ALL)


def test_clear():
    checker = DupeChecker()
    checker.add("JA1ZZZ", "10M", 5)
    checker.clear()
    assert len(checker) == 0
    assert not checker.is_dupe("JA1ZZZ", 5, MASK_ALL)


def test_score_totals_and_reset():
    score = Score()
    score.worked_cw[0] = 2
    score.worked_ph[1] = 3
    score.multis[0] = 4
    totals = score.totals(cw_points=2)
    assert totals.qsos == 2 + 3
    assert totals.points == 2 * 2 + 3
    assert totals.multis == 4
    score.reset()
    assert score.totals(1) == (0, 0, 0)
    assert len(score.worked_cw) == score.n_bands