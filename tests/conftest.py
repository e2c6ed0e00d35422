import io
from pathlib import Path

import pytest
from reportlab.lib.pagesizes import A4, letter
from reportlab.pdfgen import canvas


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text and tags."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.setTitle("Quarterly Report")
    c.setAuthor("Jane Doe")
    c.setSubject("Finance")
    c.setCreator("pdfindex tests")
    c.drawString(72, 720, "Hello PDF World")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a two-page PDF, letter then A4."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Page one content")
    c.showPage()
    c.setPageSize(A4)
    c.drawString(72, 720, "Page two content")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """Generate a valid PDF with no text content (blank page)."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def sample_pdf_path(tmp_path: Path, sample_pdf_bytes: bytes) -> Path:
    path = tmp_path / "sample.pdf"
    path.write_bytes(sample_pdf_bytes)
    return path


@pytest.fixture()
def multi_page_pdf_path(tmp_path: Path, multi_page_pdf_bytes: bytes) -> Path:
    path = tmp_path / "multi.pdf"
    path.write_bytes(multi_page_pdf_bytes)
    return path


@pytest.fixture()
def empty_pdf_path(tmp_path: Path, empty_pdf_bytes: bytes) -> Path:
    path = tmp_path / "empty.pdf"
    path.write_bytes(empty_pdf_bytes)
    return path
