from datetime import UTC, datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from pdfindex.pdf.base import BaseTagReader
from pdfindex.pdf.exceptions import PdfExtractionError
from pdfindex.pdf.metadata import MetadataReader, coerce_date, coerce_page_count, coerce_text


class TestCoercePageCount:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (12, 12),
            ("7", 7),
            (" 3 ", 3),
            (4.0, 4),
            (b"5", 5),
            (-2, 0),
            ("many", 0),
            (None, 0),
            (True, 0),
            ("inf", 0),
            ("1e400", 0),
            (float("inf"), 0),
            (float("nan"), 0),
            ("-inf", 0),
        ],
    )
    def test_coercion(self, value: object, expected: int) -> None:
        assert coerce_page_count(value) == expected


class TestCoerceText:
    def test_strips_whitespace(self) -> None:
        assert coerce_text("  Annual Report \n") == "Annual Report"

    def test_empty_becomes_none(self) -> None:
        assert coerce_text("   ") is None
        assert coerce_text(None) is None

    def test_decodes_utf16_bytes(self) -> None:
        assert coerce_text("Résumé".encode("utf-16")) == "Résumé"

    def test_decodes_latin1_bytes(self) -> None:
        assert coerce_text("Café".encode("latin-1")) == "Café"

    def test_non_string_is_stringified(self) -> None:
        assert coerce_text(42) == "42"


class TestCoerceDate:
    def test_pdf_date_with_offset(self) -> None:
        assert coerce_date("D:20240102030405+02'00'") == datetime(
            2024, 1, 2, 3, 4, 5, tzinfo=timezone(timedelta(hours=2))
        )

    def test_pdf_date_negative_offset(self) -> None:
        result = coerce_date("D:20231231235959-05'30'")
        assert result is not None
        assert result.utcoffset() == -timedelta(hours=5, minutes=30)

    def test_pdf_date_zulu(self) -> None:
        assert coerce_date("D:20240102030405Z") == datetime(
            2024, 1, 2, 3, 4, 5, tzinfo=UTC
        )

    def test_pdf_date_year_only(self) -> None:
        assert coerce_date("D:2019") == datetime(2019, 1, 1, tzinfo=UTC)

    def test_exif_date(self) -> None:
        assert coerce_date("2024:03:15 10:20:30+01:00") == datetime(
            2024, 3, 15, 10, 20, 30, tzinfo=timezone(timedelta(hours=1))
        )

    def test_iso_date(self) -> None:
        assert coerce_date("2024-03-15T10:20:30") == datetime(
            2024, 3, 15, 10, 20, 30, tzinfo=UTC
        )

    def test_naive_datetime_is_utc(self) -> None:
        result = coerce_date(datetime(2020, 5, 6, 7, 8, 9))
        assert result is not None
        assert result.tzinfo is UTC

    def test_aware_datetime_kept(self) -> None:
        value = datetime(2020, 5, 6, tzinfo=timezone(timedelta(hours=-3)))
        assert coerce_date(value) is value

    @pytest.mark.parametrize("value", ["", "yesterday", "D:abcd", "D:20241399", 123, None])
    def test_unparseable_is_none(self, value: object) -> None:
        assert coerce_date(value) is None


class TestMetadataReader:
    def test_coerces_raw_tags(self) -> None:
        tag_reader = MagicMock(spec=BaseTagReader)
        tag_reader.read_tags.return_value = {
            "PageCount": "3",
            "Title": "  Invoice  ",
            "Author": "",
            "Subject": None,
            "Creator": "Writer",
            "Producer": b"LibreOffice",
            "CreateDate": "D:20240102030405Z",
        }

        metadata = MetadataReader(tag_reader).read(Path("/files/doc.pdf"))

        assert metadata.page_count == 3
        assert metadata.title == "Invoice"
        assert metadata.author is None
        assert metadata.subject is None
        assert metadata.creator == "Writer"
        assert metadata.producer == "LibreOffice"
        assert metadata.creation_date == datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC)

    def test_missing_tags_use_defaults(self) -> None:
        tag_reader = MagicMock(spec=BaseTagReader)
        tag_reader.read_tags.return_value = {}

        metadata = MetadataReader(tag_reader).read(Path("/files/doc.pdf"))

        assert metadata.page_count == 0
        assert metadata.title is None
        assert metadata.creation_date is None

    def test_unrepresentable_page_count_becomes_zero(self) -> None:
        tag_reader = MagicMock(spec=BaseTagReader)
        tag_reader.read_tags.return_value = {"PageCount": "1e400", "Title": "Huge"}

        metadata = MetadataReader(tag_reader).read(Path("/files/doc.pdf"))

        assert metadata.page_count == 0
        assert metadata.title == "Huge"

    def test_propagates_extraction_error(self) -> None:
        tag_reader = MagicMock(spec=BaseTagReader)
        tag_reader.read_tags.side_effect = PdfExtractionError("broken")

        with pytest.raises(PdfExtractionError):
            MetadataReader(tag_reader).read(Path("/files/doc.pdf"))
