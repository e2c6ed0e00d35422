from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum


class DocumentStatus(StrEnum):
    """Lifecycle of a processed PDF document."""

    PENDING = "pending"
    PROCESSING = "processing"
    READY = "ready"
    FAILED = "failed"


class TextSource(StrEnum):
    """Where the text of a page came from."""

    EMBEDDED = "embedded"
    OCR = "ocr"
    NONE = "none"


class JobStatus(StrEnum):
    """Terminal status reported back to the job queue."""

    SUCCESS = "success"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class Asset:
    """Asset row as needed for processing (subset of DB columns)."""

    id: str
    owner_id: str
    original_path: str
    original_file_name: str
    deleted_at: datetime | None = None

    @property
    def is_pdf(self) -> bool:
        return self.original_file_name.lower().endswith(".pdf")

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


@dataclass(frozen=True)
class PdfMetadata:
    """Document-level metadata read from the PDF tags."""

    page_count: int = 0
    title: str | None = None
    author: str | None = None
    subject: str | None = None
    creator: str | None = None
    producer: str | None = None
    creation_date: datetime | None = None


@dataclass(frozen=True)
class PageSize:
    """Page geometry in PDF points."""

    width: float
    height: float


@dataclass
class ExtractedPage:
    """A page as it moves through text extraction and OCR fallback."""

    page_number: int
    text: str = ""
    text_source: TextSource = TextSource.NONE
    width: float | None = None
    height: float | None = None
    search_text: str = ""


@dataclass(slots=True)
class ProcessingResult:
    """Everything persisted atomically at the end of a successful run."""

    asset_id: str
    metadata: PdfMetadata
    pages: list[ExtractedPage] = field(default_factory=list)
    search_text: str = ""
