"""Turns raw PDF tags into a typed PdfMetadata.

Tag readers return whatever the underlying library hands back: strings,
bytes, numbers or datetimes, in several date dialects. Coercion here is
lenient; a value that cannot be understood becomes None (or 0 for the
page count) instead of failing the document.
"""

import math
import re
from datetime import UTC, datetime, timedelta, timezone
from pathlib import Path
from typing import Any

from pdfindex.logging.logger import Log
from pdfindex.pdf.base import BaseTagReader
from pdfindex.processor.models import PdfMetadata

_PDF_DATE_RE = re.compile(
    r"^D:(\d{4})(\d{2})?(\d{2})?(\d{2})?(\d{2})?(\d{2})?"
    r"(?:(Z)|([+-])(\d{2})'?(?:(\d{2})'?)?)?"
)
_EXIF_DATE_RE = re.compile(
    r"^(\d{4}):(\d{2}):(\d{2}) (\d{2}):(\d{2}):(\d{2})(?:\.\d+)?"
    r"(?:(Z)|([+-])(\d{2}):(\d{2}))?$"
)


class MetadataReader:
    """Reads and normalizes document-level metadata."""

    def __init__(self, tag_reader: BaseTagReader) -> None:
        self._tag_reader = tag_reader

    def read(self, path: Path) -> PdfMetadata:
        """Read metadata for the PDF at *path*.

        Raises:
            PdfExtractionError: if the tag reader cannot open the file.
        """
        tags = self._tag_reader.read_tags(path)
        metadata = PdfMetadata(
            page_count=coerce_page_count(tags.get("PageCount")),
            title=coerce_text(tags.get("Title")),
            author=coerce_text(tags.get("Author")),
            subject=coerce_text(tags.get("Subject")),
            creator=coerce_text(tags.get("Creator")),
            producer=coerce_text(tags.get("Producer")),
            creation_date=coerce_date(tags.get("CreateDate")),
        )
        Log.debug(f"Read metadata for {path}: {metadata.page_count} pages")
        return metadata


def coerce_page_count(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(value, 0)
    if isinstance(value, (str, bytes)):
        raw = value.decode("latin-1") if isinstance(value, bytes) else value
        try:
            value = float(raw.strip())
        except ValueError:
            return 0
    if isinstance(value, float):
        if not math.isfinite(value):
            return 0
        return max(int(value), 0)
    return 0


def coerce_text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, bytes):
        text = _decode_pdf_bytes(value)
    else:
        text = str(value)
    text = text.strip().strip("\x00")
    return text or None


def coerce_date(value: Any) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo is not None else value.replace(tzinfo=UTC)
    if isinstance(value, bytes):
        value = _decode_pdf_bytes(value)
    if not isinstance(value, str):
        return None
    raw = value.strip()
    if not raw:
        return None
    try:
        if raw.startswith("D:"):
            return _parse_pdf_date(raw)
        exif = _EXIF_DATE_RE.match(raw)
        if exif:
            return _build_date(exif.groups())
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        return None
    return parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=UTC)


def _parse_pdf_date(raw: str) -> datetime | None:
    match = _PDF_DATE_RE.match(raw)
    if not match:
        return None
    return _build_date(match.groups())


def _build_date(groups: tuple[str | None, ...]) -> datetime:
    year, month, day, hour, minute, second, zulu, sign, tz_hours, tz_minutes = groups
    tz = UTC
    if not zulu and sign:
        offset = timedelta(hours=int(tz_hours or 0), minutes=int(tz_minutes or 0))
        tz = timezone(-offset if sign == "-" else offset)
    return datetime(
        int(year or 0),
        int(month or 1),
        int(day or 1),
        int(hour or 0),
        int(minute or 0),
        int(second or 0),
        tzinfo=tz,
    )


def _decode_pdf_bytes(value: bytes) -> str:
    if value.startswith((b"\xfe\xff", b"\xff\xfe")):
        return value.decode("utf-16", errors="replace")
    try:
        return value.decode("utf-8")
    except UnicodeDecodeError:
        return value.decode("latin-1")
