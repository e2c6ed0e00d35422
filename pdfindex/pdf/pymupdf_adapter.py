from pathlib import Path
from typing import Any

import pymupdf

from pdfindex.pdf.base import BaseTagReader
from pdfindex.pdf.exceptions import PdfExtractionError


class PyMuPdfTagReader(BaseTagReader):
    """Reads PDF info-dictionary tags using PyMuPDF."""

    def read_tags(self, path: Path) -> dict[str, Any]:
        try:
            with pymupdf.open(str(path), filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                info = doc.metadata or {}
                page_count = doc.page_count
        except Exception as exc:
            raise PdfExtractionError(f"pymupdf tag read failed: {exc}") from exc
        return {
            "PageCount": page_count,
            "Title": info.get("title"),
            "Author": info.get("author"),
            "Subject": info.get("subject"),
            "Creator": info.get("creator"),
            "Producer": info.get("producer"),
            "CreateDate": info.get("creationDate"),
        }
