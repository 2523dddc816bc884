"""Parse header activity — read an ENVI text header into a HeaderRecord.

The header is line-oriented ``key = value`` text.  Each non-empty line
is split on its first ``=``; key and value are trimmed.  Five keys are
interpreted downstream (``samples``, ``lines``, ``header offset``,
``map info``, ``data type``); every other key is kept in the record
untouched.

Two ENVI conventions are accepted without being treated as malformed:
- the ``ENVI`` signature on the first non-empty line is skipped;
- a value that opens ``{`` without closing it continues on the following
  lines until the matching ``}``.

Every malformed line raises ``HeaderParseError`` with its line number.
"""

from __future__ import annotations

import logging
from pathlib import Path

from raster_uploader.core.constants import (
    HEADER_SIGNATURE,
    KEY_MAP_INFO,
    MAP_INFO_MIN_FIELDS,
)
from raster_uploader.core.exceptions import DatasetNotFoundError, ValidationError
from raster_uploader.models.header import HeaderEntry, HeaderRecord

logger = logging.getLogger("raster_uploader.activities.parse_header")


class HeaderParseError(ValidationError):
    """Raised when a header line or field is malformed.

    Attributes:
        line: 1-based line number of the offending line (0 if unknown).
        reason: Short machine-friendly reason (e.g. ``"missing separator"``).
        source: Name of the header file.
    """

    default_stage = "parse_header"
    default_code = "HEADER_PARSE_FAILED"

    def __init__(self, *, line: int, reason: str, source: str = "", **kwargs: object) -> None:
        self.line = line
        self.reason = reason
        self.source = source
        location = f"{source}:{line}" if source else f"line {line}"
        super().__init__(f"Malformed header at {location}: {reason}", **kwargs)


def parse_header_file(header_path: Path | str) -> HeaderRecord:
    """Read and parse a header file.

    Raises:
        DatasetNotFoundError: If the header file does not exist.
        HeaderParseError: If any line is malformed.
    """
    path = Path(header_path)
    try:
        text = path.read_text(encoding="utf-8-sig", errors="replace")
    except FileNotFoundError as exc:
        raise DatasetNotFoundError(path, stage="parse_header") from exc

    return parse_header_text(text, source=path.name)


def parse_header_text(text: str, *, source: str = "") -> HeaderRecord:
    """Parse header text into a ``HeaderRecord``.

    Args:
        text: Full header text.
        source: Header file name, used in error messages.

    Raises:
        HeaderParseError: If a line has no ``=`` separator, a brace value
            is never closed, or ``map info`` has fewer than 8 fields.
    """
    entries: list[HeaderEntry] = []
    seen_content = False
    pending: HeaderEntry | None = None

    for number, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()

        if pending is not None:
            pending = HeaderEntry(pending.key, f"{pending.value} {line}".rstrip(), pending.line)
            if "}" in line:
                entries.append(_checked(pending, source))
                pending = None
            continue

        if not line:
            continue

        if not seen_content:
            seen_content = True
            if line == HEADER_SIGNATURE:
                continue

        key, sep, value = line.partition("=")
        if not sep:
            raise HeaderParseError(line=number, reason="missing separator", source=source)

        entry = HeaderEntry(key.strip(), value.strip(), number)
        if entry.value.startswith("{") and "}" not in entry.value:
            pending = entry
            continue

        entries.append(_checked(entry, source))

    if pending is not None:
        raise HeaderParseError(line=pending.line, reason="unterminated brace", source=source)

    logger.debug("Parsed header | source=%s | entries=%d", source, len(entries))
    return HeaderRecord(entries=tuple(entries), source=source)


def split_map_info(value: str, *, line: int = 0, source: str = "") -> list[str]:
    """Split a ``map info`` value into its trimmed comma-separated fields.

    The value's outer braces are kept on the first and last field, as in
    the file (``{UTM`` … ``{WGS-84}}``).

    Raises:
        HeaderParseError: If there are fewer than 8 fields.
    """
    fields = [part.strip() for part in value.split(",")]
    if len(fields) < MAP_INFO_MIN_FIELDS:
        raise HeaderParseError(line=line, reason="insufficient fields", source=source)
    return fields


def _checked(entry: HeaderEntry, source: str) -> HeaderEntry:
    if entry.key == KEY_MAP_INFO:
        split_map_info(entry.value, line=entry.line, source=source)
    return entry
