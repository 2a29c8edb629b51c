# contestlog

This package holds the core logic of an amateur-radio contest logger. It is
plain Python and needs no third-party packages.

## Modules

- **`contestlog.dupechk`**: dupe checking and scoring.
  - `DupeChecker` records worked stations. Use `add` to record one,
    `is_dupe` to test a callsign and `clear` to empty the record.
  - `check` reports whether a contact is a dupe. It can also find an
    exchange in two places:
    - an earlier contact with the same station on another band or mode;
    - a history callable that you supply.
  - `Score` keeps per-band CW and phone counts and multipliers. Its
    `totals(cw_points)` method returns QSOs, multipliers and points.
  - `ModeType`, `bandmode_param` and `effective_bandmode` build the
    bandmode byte. `effective_bandmode` counts tone-keyed phone as CW.
- **`contestlog.contest`**: contest rules. `contest_settings(contest_id)`
  returns a `ContestSettings` for ids 0 to 19 and raises `ValueError` for
  any other id. A `ContestSettings` holds:
  - the contest name;
  - the dupe mask (`allows_cross_mode()` tells whether CW and phone
    contacts with the same station both count);
  - the points for a CW QSO;
  - the exchange type;
  - the multiplier tables as `MultiAssignment` entries. Each entry gives
    the name of a table and the band range it covers.
- **`contestlog.editbuf`**: `EditBuffer` is a text field of bounded
  length with a cursor. It supports `insert`, `overwrite`, `backspace`,
  `delete`, `left`, `right` and `clear`.
- **`contestlog.morse`**: Morse code.
  - `MorseEncoder` encodes English and Wabun (Japanese) code. In Wabun
    you type romaji, and `{`, `)` and `}` switch between the two codes.
  - `KeyingTiming` turns patterns into key-down and key-up durations in
    milliseconds, using speed, dah ratio and duty.
  - `expand_cw_macros` expands `$` macros: `$I $C $W $P $J $V $S $N`. The
    values come from a `MacroFields`.
  - `num_abbreviation` gives cut numbers, and `power_code` gives the
    power letter for each band.
- **`contestlog.rtty`**: RTTY.
  - `baudot_code` looks up the Baudot code of a character.
  - `BaudotEncoder` produces 45.45-baud keying frames. It inserts
    LTRS/FIGS shifts where needed. `[` and `]` produce start and stop
    transmission controls.
  - `expand_rtty_memory` expands RTTY memory macros and stops adding
    substitutions at 50 characters.
- **`contestlog.keyer`**: `Keyer` sends buffered text as CW or RTTY. Call
  `tick()` once per millisecond. It returns the `KeyerEvent`s that tick
  produced:
  - key down and key up;
  - tone on, off, mark and space;
  - receiver selection;
  - end of message;
  - start and stop of transmission.

  Text not yet sent can be edited with `delete` and `clear`, and read
  back with `pending_text()`. With tone keying, the keyer keys the
  transmitter on before the first element. It releases it after 200 ms
  with nothing to send.
- **`contestlog.cluster`**: DX cluster spots.
  - `SpotLineReader` splits received bytes into lines.
  - `parse_spot` turns a `DX de` line into a `Spot`.
  - `is_cw_spot` and `is_ft_line` classify lines.
  - `parse_server` splits `host[:port]`.
  - `ClusterSession` is the state machine for a cluster connection. It
    runs the login, sending the callsign and then three filter commands.
    It sends user commands, drops the connection after five minutes with
    no data, and starts over after a disconnect. Your code carries out
    the network actions through the `connect`, `disconnect` and `send`
    callables you pass in.
- **`contestlog.console`**: console input.
  - `KeyEmulator` turns terminal characters, including ESC sequences for
    arrow keys, Home/End/PgUp/PgDn and function keys, into keyboard
    `KeyEvent`s.
  - `LineAssembler` collects command lines ended by LF.
- **`contestlog.cty`**: country lookup. `CtyDatabase` finds the entity
  for a callsign. It tries exact matches first, then forward prefixes in
  order. `lookup` applies overrides with `apply_override`. The overrides
  are `(cq)`, `[itu]`, `{continent}`, `<lat/lon>` and `~tz~`.
  `format_entity_info` renders the result as display lines.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Examples

Check for a dupe before logging a QSO:

```python
from contestlog.dupechk import DupeChecker, bandmode_param

checker = DupeChecker()
bm = bandmode_param(7, 1)
checker.add("JA0XYZ", "13M", bm)
checker.is_dupe("JA0XYZ", bm, 0xFF)   # True
```

Look up the rules of a contest:

```python
from contestlog.contest import contest_settings

settings = contest_settings(7)
settings.name                  # "AllJA"
settings.allows_cross_mode()   # False
```

Parse a cluster spot:

```python
from contestlog.cluster import parse_server, parse_spot

parse_server("cluster.example.com:7000")   # ("cluster.example.com", 7000)
spot = parse_spot(
    "DX de JA9ZZZ-#:  3510.50  JA0XYZ/1     CW 20 dB 19 WPM CQ           ? 1237Z"
)
spot.callsign, spot.frequency, spot.mode   # ("JA0XYZ/1", 3510.5, "CW")
```

Encode text as Morse patterns:

```python
from contestlog.morse import KeyingTiming, MorseEncoder

encoder = MorseEncoder()
[encoder.encode(c) for c in "CQ"]           # ["-.-.", "--.-"]
KeyingTiming(wpm=24).durations(".-")        # [50, -50, 150, -50, -100]
```

## What the package does not do

The package has no radio, network, file or display I/O of its own. Every
component takes inputs (bytes, characters, clock readings in
milliseconds) and returns results. Your program does the I/O. The package
has none of the following:

- no command-line program or interactive command interpreter;
- no QSO log file storage;
- no rig (CAT) control or hardware key output;
- no screen or bandmap display;
- no bandmap that is updated from cluster spots.

It ships no data tables. `ContestSettings` names multiplier tables but
does not hold their contents, and `CtyDatabase` is built from entities and
prefixes that you supply.