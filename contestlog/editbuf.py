"""Fixed-capacity, single-line text buffer with a cursor, as used by entry fields."""

from __future__ import annotations


class EditBuffer:
    """Editable text of at most ``size`` characters with a cursor.

    The cursor ranges from 0 (before the first character) to ``len(text)``
    (after the last one).
    """

    def __init__(self, size: int, text: str = "") -> None:
        if size < 0:
            raise ValueError(f"buffer size must not be negative: {size}")
        self.size = size
        self.text = text[:size]
        self.cursor = 0

    def __str__(self) -> str:
        return self.text

    def __len__(self) -> int:
        return len(self.text)

    def backspace(self) -> None:
        """Remove the character left of the cursor and move the cursor left."""
        if self.cursor <= 0:
            return
        pos = self.cursor
        self.text = self.text[: pos - 1] + self.text[pos:]
        self.cursor = pos - 1

    def delete(self) -> None:
        """Remove the character under the cursor; the cursor stays put."""
        pos = self.cursor
        if pos >= len(self.text):
            return
        self.text = self.text[:pos] + self.text[pos + 1 :]

    def left(self) -> None:
        """Move the cursor one place left, stopping at the start."""
        if self.cursor > 0:
            self.cursor -= 1

    def right(self) -> None:
        """Move the cursor one place right, stopping at the end of the text."""
        if self.cursor < len(self.text):
            self.cursor += 1

    def insert(self, char: str) -> None:
        """Insert a character at the cursor and advance it.

        Nothing happens when the cursor is at the capacity; text pushed past
        the capacity is dropped from the end.
        """
        pos = self.cursor
        if pos >= self.size:
            return
        self.text = (self.text[:pos] + char + self.text[pos:])[: self.size]
        self.cursor = pos + 1

    def overwrite(self, char: str) -> None:
        """Replace the character at the cursor (append at the end) and advance."""
        pos = self.cursor
        if pos >= self.size:
            return
        self.text = self.text[:pos] + char + self.text[pos + 1 :]
        self.cursor = pos + 1

    def clear(self) -> None:
        """Empty the buffer and put the cursor at the start."""
        self.text = ""
        self.cursor = 0