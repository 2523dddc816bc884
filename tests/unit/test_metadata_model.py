"""Tests for the HeaderRecord and DerivedMetadata models.

Validates:
- HeaderRecord lookup semantics (last occurrence wins, order kept)
- DerivedMetadata field validation and immutability
- Blob metadata serialisation (string values, absent fields omitted)
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from raster_uploader.models.header import HeaderEntry, HeaderRecord
from raster_uploader.models.metadata import METADATA_KEYS, DerivedMetadata


class TestHeaderRecord:
    def _record(self) -> HeaderRecord:
        return HeaderRecord(
            entries=(
                HeaderEntry("samples", "10", 1),
                HeaderEntry("lines", "20", 2),
                HeaderEntry("samples", "30", 3),
            ),
            source="t.hdr",
        )

    def test_get_last_occurrence(self) -> None:
        assert self._record().get("samples") == "30"

    def test_entry_carries_line(self) -> None:
        entry = self._record().entry("samples")
        assert entry is not None
        assert entry.line == 3

    def test_get_default(self) -> None:
        assert self._record().get("bands") is None
        assert self._record().get("bands", "1") == "1"

    def test_lookup_is_case_sensitive(self) -> None:
        record = self._record()
        assert record.entry("lines") is not None
        assert record.entry("Lines") is None

    def test_duplicates_kept_in_entries(self) -> None:
        assert [e.value for e in self._record().entries] == ["10", "20", "30"]

    def test_immutable(self) -> None:
        record = self._record()
        with pytest.raises(AttributeError):
            record.source = "other"  # type: ignore[misc]


class TestDerivedMetadata:
    def test_all_fields_optional(self) -> None:
        meta = DerivedMetadata()
        assert meta.to_blob_metadata() == {}
        assert meta.bounds is None

    @pytest.mark.parametrize("length", [1, 2, 4, 8])
    def test_valid_value_lengths(self, length: int) -> None:
        assert DerivedMetadata(valuelength=length).valuelength == length

    @pytest.mark.parametrize("length", [0, 3, 16])
    def test_invalid_value_length_rejected(self, length: int) -> None:
        with pytest.raises(ValidationError):
            DerivedMetadata(valuelength=length)

    def test_frozen(self) -> None:
        meta = DerivedMetadata(rowlength=1)
        with pytest.raises(ValidationError):
            meta.rowlength = 2  # type: ignore[misc]

    def test_bounds(self) -> None:
        meta = DerivedMetadata(minx=0.0, miny=-5.0, maxx=10.0, maxy=5.0)
        assert meta.bounds == (0.0, -5.0, 10.0, 5.0)

    def test_blob_metadata_strings(self) -> None:
        meta = DerivedMetadata(
            rowlength=100,
            minx=500000.0,
            resolution=0.25,
            crs="WGS-84",
            nullvalue=-3.4028234663852886e38,
        )
        assert meta.to_blob_metadata() == {
            "nullvalue": "-3.4028234663852886e+38",
            "rowlength": "100",
            "minx": "500000.0",
            "resolution": "0.25",
            "crs": "WGS-84",
        }

    def test_blob_metadata_key_order(self) -> None:
        meta = DerivedMetadata(**{key: 1 if key != "crs" else "x" for key in METADATA_KEYS})
        assert list(meta.to_blob_metadata()) == list(METADATA_KEYS)

    def test_zero_values_kept(self) -> None:
        meta = DerivedMetadata(headeroffset=0, minx=0.0)
        assert meta.to_blob_metadata() == {"headeroffset": "0", "minx": "0.0"}
