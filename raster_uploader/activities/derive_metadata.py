"""Derive metadata activity — turn a HeaderRecord into DerivedMetadata.

Reads the five interpreted header keys, the optional sidecar no-data
value, and computes the raster's right and bottom edges:

    maxx = minx + resolution * rowlength
    miny = maxy - resolution * columnlength

Decimal values are parsed locale-robustly: headers written under a
comma-decimal locale (``0,5``) are recovered by a second parse that
treats ``,`` as the decimal separator.  The second parse only runs
when the first one yields exactly zero for text that is not a literal
zero; a value the first parse reads as non-zero is never re-read.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from raster_uploader.activities.parse_header import HeaderParseError, split_map_info
from raster_uploader.core.constants import (
    DATA_TYPE_VALUE_LENGTHS,
    KEY_DATA_TYPE,
    KEY_HEADER_OFFSET,
    KEY_LINES,
    KEY_MAP_INFO,
    KEY_SAMPLES,
    MAP_INFO_CRS_INDEX,
    MAP_INFO_MAX_Y_INDEX,
    MAP_INFO_MIN_X_INDEX,
    MAP_INFO_RESOLUTION_INDEX,
)
from raster_uploader.core.exceptions import ValidationError
from raster_uploader.models.header import HeaderRecord
from raster_uploader.models.metadata import DerivedMetadata

logger = logging.getLogger("raster_uploader.activities.derive_metadata")

# A literal zero in either decimal convention: "0", "-0", "0.0", "0,000", ".0", "0e5"
_LITERAL_ZERO_RE = re.compile(r"^[+-]?(0+([.,]0*)?|[.,]0+)([eE][+-]?\d+)?$")


class IncompleteMetadataError(ValidationError):
    """Raised when the bounds cannot be derived for lack of inputs.

    Attributes:
        missing: Names of the absent input fields.
    """

    default_stage = "derive_metadata"
    default_code = "METADATA_INCOMPLETE"

    def __init__(self, missing: list[str], **kwargs: object) -> None:
        self.missing = list(missing)
        msg = f"Cannot derive maxx/miny, missing: {', '.join(self.missing)}"
        super().__init__(msg, **kwargs)


class SidecarParseError(ValidationError):
    """Raised when the auxiliary sidecar is not well-formed XML."""

    default_stage = "derive_metadata"
    default_code = "SIDECAR_PARSE_FAILED"


# ---------------------------------------------------------------------------
# Number parsing
# ---------------------------------------------------------------------------


def parse_header_float(text: str, *, line: int = 0, source: str = "") -> float:
    """Parse a decimal header value, falling back to comma-decimal.

    Args:
        text: Raw value text (e.g. ``"30.0"`` or ``"0,5"``).
        line: Header line number, for error messages.
        source: Header file name, for error messages.

    Returns:
        The parsed value.

    Raises:
        HeaderParseError: If neither ``.`` nor ``,`` as decimal separator
            yields a number.
    """
    value = text.strip()
    if _LITERAL_ZERO_RE.match(value):
        return 0.0

    # A failed parse counts as zero and takes the fallback.
    parsed = _try_float(value)
    if not parsed:
        retried = _try_float(value.replace(",", "."))
        if retried is not None:
            logger.debug("Comma-decimal fallback | value=%r | parsed=%s", value, retried)
            parsed = retried
    if parsed is None:
        raise HeaderParseError(line=line, reason="invalid decimal", source=source)
    return parsed


def parse_header_int(text: str, *, line: int = 0, source: str = "") -> int:
    """Parse an integer header value.

    Raises:
        HeaderParseError: If *text* is not an integer.
    """
    try:
        return int(text.strip())
    except ValueError as exc:
        raise HeaderParseError(line=line, reason="invalid integer", source=source) from exc


def _try_float(value: str) -> float | None:
    try:
        return float(value)
    except ValueError:
        return None


# ---------------------------------------------------------------------------
# Sidecar
# ---------------------------------------------------------------------------


def read_null_value(sidecar_path: Path | str) -> float | None:
    """Read the no-data value from an auxiliary XML sidecar.

    Returns:
        The text of the first ``NoDataValue`` element parsed as a decimal,
        or ``None`` if the sidecar is absent, has no such element, or the
        element is empty.

    Raises:
        SidecarParseError: If the sidecar is not well-formed XML.
        HeaderParseError: If the element text is not a decimal.
    """
    from lxml import etree  # type: ignore[attr-defined]

    path = Path(sidecar_path)
    if not path.is_file():
        return None

    parser = etree.XMLParser(resolve_entities=False, no_network=True, huge_tree=False)
    try:
        root = etree.fromstring(path.read_bytes(), parser=parser)
    except etree.XMLSyntaxError as exc:
        msg = f"Sidecar {path.name} is not valid XML: {exc}"
        raise SidecarParseError(msg) from exc

    element = root if root.tag == "NoDataValue" else root.find(".//NoDataValue")
    if element is None:
        logger.debug("Sidecar has no NoDataValue | sidecar=%s", path.name)
        return None

    text = (element.text or "").strip()
    if not text:
        return None
    return parse_header_float(text, source=path.name)


# ---------------------------------------------------------------------------
# Derivation
# ---------------------------------------------------------------------------


def derive_metadata(record: HeaderRecord, *, null_value: float | None = None) -> DerivedMetadata:
    """Build the blob metadata for a parsed header.

    Args:
        record: Parsed header record.
        null_value: No-data value from the sidecar, if any.

    Returns:
        A fully derived ``DerivedMetadata``.

    Raises:
        HeaderParseError: If an interpreted value is not a number or
            ``map info`` has too few fields.
        IncompleteMetadataError: If any of ``samples``, ``lines``, or the
            ``map info`` coordinates is missing.
    """
    source = record.source
    fields: dict[str, object] = {"nullvalue": null_value}

    for key, name in (
        (KEY_SAMPLES, "rowlength"),
        (KEY_LINES, "columnlength"),
        (KEY_HEADER_OFFSET, "headeroffset"),
    ):
        entry = record.entry(key)
        if entry is not None:
            fields[name] = parse_header_int(entry.value, line=entry.line, source=source)

    map_info = record.entry(KEY_MAP_INFO)
    if map_info is not None:
        parts = split_map_info(map_info.value, line=map_info.line, source=source)
        for index, name in (
            (MAP_INFO_MIN_X_INDEX, "minx"),
            (MAP_INFO_MAX_Y_INDEX, "maxy"),
            (MAP_INFO_RESOLUTION_INDEX, "resolution"),
        ):
            fields[name] = parse_header_float(parts[index], line=map_info.line, source=source)
        fields["crs"] = parts[MAP_INFO_CRS_INDEX].replace("{", "").replace("}", "").strip()

    data_type = record.entry(KEY_DATA_TYPE)
    if data_type is not None:
        value_length = DATA_TYPE_VALUE_LENGTHS.get(data_type.value)
        if value_length is None:
            logger.warning(
                "Unrecognised data type, valuelength not set | source=%s | data_type=%s",
                source,
                data_type.value,
            )
        fields["valuelength"] = value_length

    fields.update(_derive_bounds(fields))
    return DerivedMetadata(**fields)  # type: ignore[arg-type]


def _derive_bounds(fields: dict[str, object]) -> dict[str, float]:
    """Compute ``maxx``/``miny`` from the five required inputs.

    Raises:
        IncompleteMetadataError: If any input is absent.
    """
    required = ("minx", "maxy", "resolution", "rowlength", "columnlength")
    missing = [name for name in required if fields.get(name) is None]
    if missing:
        raise IncompleteMetadataError(missing)

    minx = float(fields["minx"])  # type: ignore[arg-type]
    maxy = float(fields["maxy"])  # type: ignore[arg-type]
    resolution = float(fields["resolution"])  # type: ignore[arg-type]
    return {
        "maxx": minx + resolution * float(fields["rowlength"]),  # type: ignore[arg-type]
        "miny": maxy - resolution * float(fields["columnlength"]),  # type: ignore[arg-type]
    }
