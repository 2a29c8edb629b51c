"""Duplicate-contact checking and per-band score bookkeeping."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Callable, NamedTuple, Optional

DEFAULT_BAND_COUNT = 13


class ModeType(IntEnum):
    """Mode families used for dupe checking; they occupy the low two bits of a bandmode."""

    OTHER = 0
    CW = 1
    PH = 2
    DG = 3


def bandmode_param(bandid: int, modetype: int) -> int:
    """Combine a band id and a mode type into a single byte-sized bandmode."""
    return (bandid * 4 + int(modetype)) & 0xFF


def effective_bandmode(bandid: int, modetype: int, tone_keying: bool) -> int:
    """Bandmode used for dupe checks: tone-keyed phone counts as CW."""
    if modetype == ModeType.PH and tone_keying:
        return bandmode_param(bandid, ModeType.CW)
    return bandmode_param(bandid, modetype)


@dataclass(frozen=True)
class DupeResult:
    """Outcome of a dupe check: whether it is a dupe and any exchange found."""

    dupe: bool
    exchange: Optional[str] = None


@dataclass(frozen=True)
class _Contact:
    callsign: str
    exchange: str
    bandmode: int


class DupeChecker:
    """Record of worked stations for dupe checks and exchange lookup."""

    def __init__(self, capacity: Optional[int] = None) -> None:
        self.capacity = capacity
        self._contacts: list[_Contact] = []

    def __len__(self) -> int:
        return len(self._contacts)

    def add(self, callsign: str, exchange: str, bandmode: int) -> bool:
        """Record a contact; returns False when the table is full."""
        if self.capacity is not None and len(self._contacts) >= self.capacity:
            return False
        self._contacts.append(_Contact(callsign, exchange, bandmode & 0xFF))
        return True

    def is_dupe(self, callsign: str, bandmode: int, mask: int) -> bool:
        """True if the callsign was already worked in the same (masked) bandmode."""
        target = bandmode & mask
        return any(
            (c.bandmode & mask) == target and c.callsign == callsign
            for c in self._contacts
        )

    def check(
        self,
        callsign: str,
        bandmode: int,
        mask: int,
        want_exchange: bool,
        history: Optional[Callable[[str], Optional[str]]] = None,
    ) -> DupeResult:
        """Check for a dupe and, if wanted, find an exchange from other bands or history.

        ``history`` is consulted only when the contact is not a dupe and no
        exchange was found among contacts on other bandmodes.
        """
        target = bandmode & mask
        dupe = False
        exchange: Optional[str] = None
        for contact in self._contacts:
            if dupe and not want_exchange:
                break
            if (contact.bandmode & mask) == target:
                if contact.callsign == callsign:
                    dupe = True
            elif want_exchange and contact.callsign == callsign:
                exchange = contact.exchange
                want_exchange = False
        if not dupe and want_exchange and history is not None:
            found = history(callsign)
            if found:
                exchange = found
        return DupeResult(dupe, exchange)

    def clear(self) -> None:
        """Forget all recorded contacts."""
        self._contacts.clear()


class ScoreTotals(NamedTuple):
    qsos: int
    multis: int
    points: int


@dataclass
class Score:
    """Per-band worked counts for CW and phone, and multipliers."""

    n_bands: int = DEFAULT_BAND_COUNT
    worked_cw: list[int] = field(default_factory=list)
    worked_ph: list[int] = field(default_factory=list)
    multis: list[int] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.worked_cw:
            self.worked_cw = [0] * self.n_bands
        if not self.worked_ph:
            self.worked_ph = [0] * self.n_bands
        if not self.multis:
            self.multis = [0] * self.n_bands

    def reset(self) -> None:
        """Zero every counter."""
        self.worked_cw = [0] * self.n_bands
        self.worked_ph = [0] * self.n_bands
        self.multis = [0] * self.n_bands

    def totals(self, cw_points: int) -> ScoreTotals:
        """Total QSOs, multipliers and points, with CW contacts worth ``cw_points``."""
        qsos = sum(self.worked_cw) + sum(self.worked_ph)
        points = sum(self.worked_cw) * cw_points + sum(self.worked_ph)
        return ScoreTotals(qsos, sum(self.multis), points)