from dataclasses import dataclass, field
from datetime import datetime
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass
class JobRecord:
    """Represents a row from the pdf_jobs table."""

    id: int
    asset_id: str
    status: str
    attempts: int
    error_message: str | None = None
    locked_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class DocumentRecord:
    """Represents a row from the pdf_documents table joined with its asset."""

    asset_id: str
    page_count: int
    status: str
    original_file_name: str | None = None
    title: str | None = None
    author: str | None = None
    subject: str | None = None
    creator: str | None = None
    producer: str | None = None
    creation_date: datetime | None = None
    processed_at: datetime | None = None
    last_error: str | None = None
    created_at: datetime | None = None


@dataclass
class PageRecord:
    """Represents a row from the pdf_pages table."""

    asset_id: str
    page_number: int
    text: str
    text_source: str
    width: float | None = None
    height: float | None = None
    id: int | None = None


@dataclass
class SearchHit:
    """A document matching a full-text query, with the pages that matched."""

    document: DocumentRecord
    matching_pages: list[int] = field(default_factory=list)


@dataclass
class PageMatch:
    """A page matching an in-document query."""

    page_number: int
    snippet: str
    match_offset: int | None = None


@dataclass
class Paginated(Generic[T]):
    """One page of results and the number of the next page, if any."""

    items: list[T]
    next_page: int | None = None


def paginate(rows: list[T], page: int, size: int) -> Paginated[T]:
    """Trim a ``LIMIT size + 1`` result set and compute the next page."""
    has_next = len(rows) > size
    return Paginated(items=rows[:size], next_page=page + 1 if has_next else None)
