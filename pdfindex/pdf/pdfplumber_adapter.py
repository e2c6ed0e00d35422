from pathlib import Path
from typing import Any

import pdfplumber

from pdfindex.pdf.base import BaseTagReader
from pdfindex.pdf.exceptions import PdfExtractionError


class PdfPlumberTagReader(BaseTagReader):
    """Reads PDF info-dictionary tags using pdfplumber."""

    def read_tags(self, path: Path) -> dict[str, Any]:
        try:
            with pdfplumber.open(path) as pdf:
                info = dict(pdf.metadata or {})
                page_count = len(pdf.pages)
        except Exception as exc:
            raise PdfExtractionError(f"pdfplumber tag read failed: {exc}") from exc
        return {
            "PageCount": page_count,
            "Title": info.get("Title"),
            "Author": info.get("Author"),
            "Subject": info.get("Subject"),
            "Creator": info.get("Creator"),
            "Producer": info.get("Producer"),
            "CreateDate": info.get("CreationDate"),
        }
