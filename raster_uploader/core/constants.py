"""Shared pipeline constants — single source of truth.

Centralises the page size, the ENVI dataset file suffixes, and the
header keys the uploader interprets, so that activities and the
orchestrator never repeat string literals.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Page blob alignment
# ---------------------------------------------------------------------------

BYTES_PER_PAGE: int = 512
"""Page blob content length must be an exact multiple of this size."""

UPLOAD_CHUNK_SIZE: int = 4 * 1024 * 1024
"""Bytes read from disk per upload chunk (the page blob write limit)."""

# ---------------------------------------------------------------------------
# Dataset file suffixes
# ---------------------------------------------------------------------------

PAYLOAD_SUFFIX: str = ".bin"
"""Raw pixel payload; the blob name is the payload name without it."""

HEADER_SUFFIX: str = ".hdr"
"""Text header, replaces the payload suffix."""

SIDECAR_SUFFIX: str = ".aux.xml"
"""Auxiliary metadata sidecar, appended to the full payload name."""

# ---------------------------------------------------------------------------
# Header keys (case- and whitespace-sensitive)
# ---------------------------------------------------------------------------

HEADER_SIGNATURE: str = "ENVI"

KEY_SAMPLES: str = "samples"
KEY_LINES: str = "lines"
KEY_HEADER_OFFSET: str = "header offset"
KEY_MAP_INFO: str = "map info"
KEY_DATA_TYPE: str = "data type"

#: ``map info`` needs fields 0..7 (min-x at 3, max-y at 4, resolution at 5, CRS at 7).
MAP_INFO_MIN_FIELDS: int = 8
MAP_INFO_MIN_X_INDEX: int = 3
MAP_INFO_MAX_Y_INDEX: int = 4
MAP_INFO_RESOLUTION_INDEX: int = 5
MAP_INFO_CRS_INDEX: int = 7

#: ENVI ``data type`` code → bytes per value.  Unlisted codes are not interpreted.
DATA_TYPE_VALUE_LENGTHS: dict[str, int] = {
    "1": 1,
    "2": 2,
    "4": 4,
    "5": 8,
}
