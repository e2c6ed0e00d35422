from typing import Any

from psycopg.rows import dict_row

from pdfindex.database.connection import get_connection
from pdfindex.database.models import DocumentRecord, PageRecord, Paginated, paginate
from pdfindex.processor.exceptions import DocumentNotFoundError
from pdfindex.processor.models import ProcessingResult

_DOCUMENT_COLUMNS = """
    d.asset_id, a.original_file_name, d.page_count, d.status,
    d.title, d.author, d.subject, d.creator, d.producer,
    d.creation_date, d.processed_at, d.last_error, a.created_at
"""

_PAGE_COLUMNS = "p.id, p.asset_id, p.page_number, p.text, p.text_source, p.width, p.height"


class DocumentRepository:
    """Database operations for pdf_documents, pdf_pages and pdf_search.

    pdf_documents.status is the single mutation point of the processing
    state machine; transitions are done with conditional upserts so that
    concurrent triggers cannot queue the same document twice.
    """

    # ------------------------------------------------------------------
    # State machine
    # ------------------------------------------------------------------

    def mark_pending(self, asset_id: str) -> int | None:
        """Move a document to pending and queue a job for it in one transaction.

        Creates the row on first trigger and only moves ready or failed
        documents. Returns the new job ID, or None when a run is already
        queued or in flight.
        """
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    INSERT INTO pdf_documents (asset_id, status)
                    VALUES (%s, 'pending')
                    ON CONFLICT (asset_id) DO UPDATE
                    SET status = 'pending', last_error = NULL,
                        processed_at = NULL, updated_at = NOW()
                    WHERE pdf_documents.status IN ('ready', 'failed')
                    RETURNING asset_id
                    """,
                    (asset_id,),
                )
                if cur.fetchone() is None:
                    conn.rollback()
                    return None
                cur.execute(
                    "INSERT INTO pdf_jobs (asset_id) VALUES (%s) RETURNING id",
                    (asset_id,),
                )
                row = cur.fetchone()
                if row is None:
                    raise RuntimeError(f"Failed to queue job for asset {asset_id}")
            conn.commit()
        return int(row[0])

    def mark_processing(self, asset_id: str) -> None:
        """Start a run: status processing, previous error cleared."""
        with get_connection() as conn:
            conn.execute(
                """
                INSERT INTO pdf_documents (asset_id, status)
                VALUES (%s, 'processing')
                ON CONFLICT (asset_id) DO UPDATE
                SET status = 'processing', last_error = NULL,
                    processed_at = NULL, updated_at = NOW()
                """,
                (asset_id,),
            )
            conn.commit()

    def mark_failed(self, asset_id: str, error: str) -> None:
        """End a run as failed with a (pre-truncated) error message."""
        with get_connection() as conn:
            conn.execute(
                """
                INSERT INTO pdf_documents (asset_id, status, last_error)
                VALUES (%s, 'failed', %s)
                ON CONFLICT (asset_id) DO UPDATE
                SET status = 'failed', last_error = EXCLUDED.last_error,
                    processed_at = NULL, updated_at = NOW()
                """,
                (asset_id, error),
            )
            conn.commit()

    def save_result(self, result: ProcessingResult) -> None:
        """Persist metadata, pages and search text, and mark the document ready.

        Runs as one transaction: pages are deleted and re-inserted, the
        search row is upserted, and nothing is visible until commit.
        """
        metadata = result.metadata
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    INSERT INTO pdf_documents (
                        asset_id, page_count, title, author, subject, creator,
                        producer, creation_date, processed_at, status, last_error
                    )
                    VALUES (%s, %s, %s, %s, %s, %s, %s, %s, NOW(), 'ready', NULL)
                    ON CONFLICT (asset_id) DO UPDATE
                    SET page_count = EXCLUDED.page_count,
                        title = EXCLUDED.title,
                        author = EXCLUDED.author,
                        subject = EXCLUDED.subject,
                        creator = EXCLUDED.creator,
                        producer = EXCLUDED.producer,
                        creation_date = EXCLUDED.creation_date,
                        processed_at = EXCLUDED.processed_at,
                        status = 'ready',
                        last_error = NULL,
                        updated_at = NOW()
                    """,
                    (
                        result.asset_id,
                        metadata.page_count,
                        metadata.title,
                        metadata.author,
                        metadata.subject,
                        metadata.creator,
                        metadata.producer,
                        metadata.creation_date,
                    ),
                )
                cur.execute("DELETE FROM pdf_pages WHERE asset_id = %s", (result.asset_id,))
                if result.pages:
                    cur.executemany(
                        """
                        INSERT INTO pdf_pages
                            (asset_id, page_number, text, search_text, text_source, width, height)
                        VALUES (%s, %s, %s, %s, %s, %s, %s)
                        """,
                        [
                            (
                                result.asset_id,
                                page.page_number,
                                page.text,
                                page.search_text,
                                str(page.text_source),
                                page.width,
                                page.height,
                            )
                            for page in result.pages
                        ],
                    )
                cur.execute(
                    """
                    INSERT INTO pdf_search (asset_id, text)
                    VALUES (%s, %s)
                    ON CONFLICT (asset_id) DO UPDATE SET text = EXCLUDED.text
                    """,
                    (result.asset_id, result.search_text),
                )
            conn.commit()

    def find_by_asset_id(self, asset_id: str) -> DocumentRecord | None:
        """Find a document regardless of owner. Used by the processor and tests."""
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    SELECT {_DOCUMENT_COLUMNS}
                    FROM pdf_documents d
                    JOIN assets a ON a.id = d.asset_id
                    WHERE d.asset_id = %s
                    """,
                    (asset_id,),
                )
                row = cur.fetchone()
        return _to_document(row) if row is not None else None

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    def list_by_owner(
        self,
        owner_id: str,
        page: int,
        size: int,
        status: str | None = None,
    ) -> Paginated[DocumentRecord]:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    SELECT {_DOCUMENT_COLUMNS}
                    FROM pdf_documents d
                    JOIN assets a ON a.id = d.asset_id
                    WHERE a.owner_id = %s
                      AND a.deleted_at IS NULL
                      AND (%s::text IS NULL OR d.status = %s::text)
                    ORDER BY a.file_created_at DESC
                    LIMIT %s OFFSET %s
                    """,
                    (owner_id, status, status, size + 1, (page - 1) * size),
                )
                rows = cur.fetchall()
        return paginate([_to_document(row) for row in rows], page, size)

    def get_by_owner(self, owner_id: str, asset_id: str) -> DocumentRecord:
        """Fetch one live document of *owner_id*.

        Raises:
            DocumentNotFoundError: if it does not exist or belongs to someone else.
        """
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    SELECT {_DOCUMENT_COLUMNS}
                    FROM pdf_documents d
                    JOIN assets a ON a.id = d.asset_id
                    WHERE a.owner_id = %s
                      AND d.asset_id = %s
                      AND a.deleted_at IS NULL
                    """,
                    (owner_id, asset_id),
                )
                row = cur.fetchone()
        if row is None:
            raise DocumentNotFoundError(f"Document {asset_id} not found")
        return _to_document(row)

    def get_pages_by_owner(self, owner_id: str, asset_id: str) -> list[PageRecord]:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    SELECT {_PAGE_COLUMNS}
                    FROM pdf_pages p
                    JOIN assets a ON a.id = p.asset_id
                    WHERE a.owner_id = %s AND p.asset_id = %s
                    ORDER BY p.page_number
                    """,
                    (owner_id, asset_id),
                )
                rows = cur.fetchall()
        return [_to_page(row) for row in rows]

    def get_page_by_owner(
        self, owner_id: str, asset_id: str, page_number: int
    ) -> PageRecord | None:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    SELECT {_PAGE_COLUMNS}
                    FROM pdf_pages p
                    JOIN assets a ON a.id = p.asset_id
                    WHERE a.owner_id = %s AND p.asset_id = %s AND p.page_number = %s
                    """,
                    (owner_id, asset_id, page_number),
                )
                row = cur.fetchone()
        return _to_page(row) if row is not None else None

    def search_by_text(
        self, owner_id: str, query: str, page: int, size: int
    ) -> Paginated[DocumentRecord]:
        """Find documents whose search index matches an already-tokenized *query*."""
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    SELECT {_DOCUMENT_COLUMNS}
                    FROM pdf_search s
                    JOIN pdf_documents d ON d.asset_id = s.asset_id
                    JOIN assets a ON a.id = s.asset_id
                    WHERE a.owner_id = %s
                      AND a.deleted_at IS NULL
                      AND s.text %%>> %s
                    ORDER BY a.file_created_at DESC
                    LIMIT %s OFFSET %s
                    """,
                    (owner_id, query, size + 1, (page - 1) * size),
                )
                rows = cur.fetchall()
        return paginate([_to_document(row) for row in rows], page, size)

    def get_matching_pages(self, asset_id: str, query: str) -> list[int]:
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    SELECT page_number
                    FROM pdf_pages
                    WHERE asset_id = %s
                      AND search_text %%>> %s
                    ORDER BY page_number
                    """,
                    (asset_id, query),
                )
                rows = cur.fetchall()
        return [int(row[0]) for row in rows]

    def search_pages_by_owner(
        self, owner_id: str, asset_id: str, query: str
    ) -> list[PageRecord]:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    SELECT {_PAGE_COLUMNS}
                    FROM pdf_pages p
                    JOIN assets a ON a.id = p.asset_id
                    WHERE a.owner_id = %s
                      AND p.asset_id = %s
                      AND p.search_text %%>> %s
                    ORDER BY p.page_number
                    """,
                    (owner_id, asset_id, query),
                )
                rows = cur.fetchall()
        return [_to_page(row) for row in rows]


def _to_document(row: dict[str, Any]) -> DocumentRecord:
    return DocumentRecord(
        asset_id=str(row["asset_id"]),
        original_file_name=row["original_file_name"],
        page_count=row["page_count"],
        status=row["status"],
        title=row["title"],
        author=row["author"],
        subject=row["subject"],
        creator=row["creator"],
        producer=row["producer"],
        creation_date=row["creation_date"],
        processed_at=row["processed_at"],
        last_error=row["last_error"],
        created_at=row["created_at"],
    )


def _to_page(row: dict[str, Any]) -> PageRecord:
    return PageRecord(
        id=row["id"],
        asset_id=str(row["asset_id"]),
        page_number=row["page_number"],
        text=row["text"],
        text_source=row["text_source"],
        width=row["width"],
        height=row["height"],
    )
