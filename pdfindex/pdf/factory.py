from pdfindex.config.settings import Settings
from pdfindex.pdf.base import BaseTagReader
from pdfindex.pdf.pdfplumber_adapter import PdfPlumberTagReader
from pdfindex.pdf.pymupdf_adapter import PyMuPdfTagReader


class TagReaderFactory:
    """Creates the correct PDF tag reader based on settings."""

    ADAPTERS: dict[str, type[BaseTagReader]] = {
        "pdfplumber": PdfPlumberTagReader,
        "pymupdf": PyMuPdfTagReader,
    }

    @classmethod
    def create(cls, settings: Settings) -> BaseTagReader:
        engine = settings.pdf_engine.lower()
        adapter_cls = cls.ADAPTERS.get(engine)
        if adapter_cls is None:
            raise ValueError(
                f"Unknown PDF engine '{engine}'. Choose from: {list(cls.ADAPTERS)}"
            )
        return adapter_cls()
