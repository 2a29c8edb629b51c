"""Amateur-radio contest logging core: dupes, contest rules, editing, keying, cluster spots, console input and prefixes."""

__version__ = "0.1.0"

__all__ = [
    "cluster",
    "console",
    "contest",
    "cty",
    "dupechk",
    "editbuf",
    "keyer",
    "morse",
    "rtty",
]