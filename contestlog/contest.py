"""Per-contest rules: name, dupe mask, CW points, exchange type and multiplier tables."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

CROSS_MODE_OK = 0xFF
CROSS_MODE_NG = 0xFF - 3


@dataclass(frozen=True)
class MultiAssignment:
    """A multiplier table applied to a band range; -1 means open-ended."""

    table: Optional[str]
    first_band: int = -1
    last_band: int = -1


@dataclass(frozen=True)
class ContestSettings:
    contest_id: int
    name: str
    mask: int
    cw_points: int
    multi_type: int
    multis: tuple[MultiAssignment, ...]

    def allows_cross_mode(self) -> bool:
        """True when CW and phone contacts with one station both count."""
        return self.mask == CROSS_MODE_OK


def _all(table: Optional[str]) -> tuple[MultiAssignment, ...]:
    return (MultiAssignment(table),)


_CONTESTS: dict[int, tuple[str, int, int, int, tuple[MultiAssignment, ...]]] = {
    0: ("NOMULTI", CROSS_MODE_OK, 1, 0, _all("acag")),
    1: ("TAMAGAWA", CROSS_MODE_OK, 2, 0, _all("tama")),
    2: ("TOKYOUHF", CROSS_MODE_NG, 1, 0, _all("tokyouhf")),
    3: ("CQWW", CROSS_MODE_NG, 1, 0, _all("cqzones")),
    4: ("Saitama-Int", CROSS_MODE_NG, 1, 0, _all("saitama_int")),
    5: ("KCJ", CROSS_MODE_NG, 1, 0, _all("kcj")),
    6: ("KantoUHF", CROSS_MODE_NG, 1, 0, _all("kantou")),
    7: ("AllJA", CROSS_MODE_NG, 1, 1, _all("allja")),
    8: ("JA No PWR", CROSS_MODE_NG, 1, 0, _all("allja")),
    9: ("ACAG(no multi)", CROSS_MODE_NG, 1, 3, _all(None)),
    10: ("KanagawaInt", CROSS_MODE_NG, 1, 0, _all("knint")),
    11: ("Yokohama", CROSS_MODE_OK, 3, 0, _all("yk")),
    12: ("UEC contest", CROSS_MODE_NG, 2, 2, _all("allja")),
    13: ("Tsurumigawa", CROSS_MODE_OK, 2, 0, _all("tmtest")),
    14: ("JA8(int)contest", CROSS_MODE_NG, 1, 4, _all("ja8int")),
    15: ("ARRL int'l", CROSS_MODE_NG, 1, 0, _all("arrl")),
    16: ("HSWAScontest", CROSS_MODE_OK, 1, 5, _all("hswas")),
    17: ("YN contest", CROSS_MODE_OK, 1, 0, _all("yntest")),
    18: ("ACAG(multi chk)", CROSS_MODE_NG, 1, 3, _all("acag")),
    19: (
        "FD",
        CROSS_MODE_NG,
        1,
        1,
        (MultiAssignment("allja", 1, 10), MultiAssignment("acag", 11, -1)),
    ),
}


def contest_settings(contest_id: int) -> ContestSettings:
    """Return the rules for a contest id; raises ValueError for an unknown id."""
    try:
        name, mask, cw_points, multi_type, multis = _CONTESTS[contest_id]
    except KeyError:
        raise ValueError(f"unknown contest id: {contest_id}") from None
    return ContestSettings(contest_id, name, mask, cw_points, multi_type, multis)