"""Country (DXCC entity) lookup by callsign prefix."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, Optional, Sequence


def prefix_index(callsign: str) -> int:
    """Group index of a callsign's first character: digits 0-9, letters 10-35, else -1."""
    if not callsign:
        return -1
    c = callsign[0]
    if "0" <= c <= "9":
        return ord(c) - ord("0")
    if "A" <= c <= "Z":
        return ord(c) - ord("A") + 10
    return -1


@dataclass(frozen=True)
class EntityInfo:
    """Entity name, description, zones, continent, position and time offset, as text."""

    entity: str
    entity_desc: str
    cqzone: str
    ituzone: str
    continent: str
    lat: str
    lon: str
    tz: str


@dataclass(frozen=True)
class Prefix:
    """A callsign prefix pointing at an entity, with optional override text."""

    prefix: str
    entity: int
    override: str = ""


def apply_override(info: EntityInfo, override: str) -> EntityInfo:
    """Apply ``(cq) [itu] {cont} <lat/lon> ~tz~`` overrides to entity information."""
    values: dict[str, str] = {}
    buf: list[str] = []
    in_tz = False

    def take(name: str) -> None:
        values[name] = "".join(buf)
        buf.clear()

    for c in override:
        if c == ")":
            take("cqzone")
        elif c == "]":
            take("ituzone")
        elif c == "}":
            take("continent")
        elif c == "/":
            take("lat")
        elif c == ">":
            take("lon")
        elif c == "~":
            if in_tz:
                in_tz = False
                take("tz")
            else:
                in_tz = True
        elif c in "([{<":
            in_tz = False
        else:
            buf.append(c)
    return replace(info, **values)


def format_entity_info(callsign: str, info: Optional[EntityInfo]) -> str:
    """Text shown for a looked-up callsign, one display line per newline."""
    if info is None:
        return f"{callsign}\nEntity Not found\n"
    lat = " " + info.lat[1:] + "S" if info.lat.startswith("-") else info.lat + "N"
    lon = " " + info.lon[1:] + "E" if info.lon.startswith("-") else info.lon + "W"
    return (
        f"{callsign:<8} {info.entity}\n{info.entity_desc}\n"
        f"CQ:{info.cqzone:>2} ITU:{info.ituzone:>2} {info.continent:>2}\n"
        f"{lat},{lon}\nTZ={info.tz}\n"
    )


class CtyDatabase:
    """Entities with exact-match callsigns and forward-match prefixes.

    Exact matches are tried first; forward prefixes are tried in the order
    given and the first one the callsign starts with wins.
    """

    def __init__(
        self,
        entities: Sequence[EntityInfo],
        exact: Iterable[Prefix] = (),
        forward: Iterable[Prefix] = (),
    ) -> None:
        self.entities = tuple(entities)
        self._exact: dict[str, Prefix] = {}
        self._forward: dict[int, list[Prefix]] = {}
        for entry in exact:
            self._check(entry)
            self._exact.setdefault(entry.prefix, entry)
        for entry in forward:
            self._check(entry)
            self._forward.setdefault(prefix_index(entry.prefix), []).append(entry)

    def _check(self, entry: Prefix) -> None:
        if not 0 <= entry.entity < len(self.entities):
            raise ValueError(f"prefix {entry.prefix!r} refers to unknown entity {entry.entity}")

    def search(self, callsign: str) -> Optional[Prefix]:
        """The prefix entry matching a callsign, or None."""
        idx = prefix_index(callsign)
        if idx == -1:
            return None
        found = self._exact.get(callsign)
        if found is not None:
            return found
        for entry in self._forward.get(idx, ()):
            if callsign.startswith(entry.prefix):
                return entry
        return None

    def lookup(self, callsign: str) -> Optional[EntityInfo]:
        """Entity information for a callsign with overrides applied, or None."""
        entry = self.search(callsign)
        if entry is None:
            return None
        info = self.entities[entry.entity]
        if entry.override:
            info = apply_override(info, entry.override)
        return info