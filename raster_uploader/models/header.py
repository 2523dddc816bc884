"""Data model for a parsed ENVI text header."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class HeaderEntry:
    """A single ``key = value`` pair from the header.

    Attributes:
        key: Trimmed, case-sensitive key.
        value: Trimmed raw value text.
        line: 1-based line number the entry starts on.
    """

    key: str
    value: str
    line: int = 0


@dataclass(frozen=True, slots=True)
class HeaderRecord:
    """Ordered sequence of header entries.

    Unrecognised keys are kept so the record mirrors the file.  When a
    key repeats, lookups return the last occurrence.

    Attributes:
        entries: Entries in file order.
        source: Name of the header file (for error messages).
    """

    entries: tuple[HeaderEntry, ...] = field(default_factory=tuple)
    source: str = ""

    def get(self, key: str, default: str | None = None) -> str | None:
        """Return the value of the last entry named *key*."""
        entry = self.entry(key)
        return entry.value if entry is not None else default

    def entry(self, key: str) -> HeaderEntry | None:
        """Return the last entry named *key*, or ``None``."""
        for candidate in reversed(self.entries):
            if candidate.key == key:
                return candidate
        return None
