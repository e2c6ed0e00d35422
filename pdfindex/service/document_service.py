from pdfindex.database.models import (
    DocumentRecord,
    PageMatch,
    PageRecord,
    Paginated,
    SearchHit,
)
from pdfindex.database.repositories.asset_repository import AssetRepository
from pdfindex.database.repositories.document_repository import DocumentRepository
from pdfindex.logging.logger import Log
from pdfindex.processor.models import DocumentStatus, JobStatus
from pdfindex.search.tokenizer import SearchTokenizer


class DocumentService:
    """Operations exposed to the host application.

    Every read is scoped to *owner_id*; a document owned by someone else
    behaves exactly like a missing one.
    """

    def __init__(
        self,
        asset_repo: AssetRepository,
        doc_repo: DocumentRepository,
        tokenizer: SearchTokenizer,
        snippet_radius: int = 60,
    ) -> None:
        self._asset_repo = asset_repo
        self._doc_repo = doc_repo
        self._tokenizer = tokenizer
        self._snippet_radius = snippet_radius

    # ------------------------------------------------------------------
    # Triggers
    # ------------------------------------------------------------------

    def on_asset_uploaded(self, asset_id: str) -> bool:
        """Queue processing for a freshly uploaded asset if it is a live PDF."""
        asset = self._asset_repo.get_asset_for_processing(asset_id)
        if asset is None or asset.is_deleted or not asset.is_pdf:
            return False
        return self._enqueue(asset_id)

    def queue_all(self, force: bool = False) -> JobStatus:
        """Queue every PDF asset, or only the never-processed ones without *force*."""
        asset_ids = self._asset_repo.get_pdf_asset_ids(force=force)
        queued = sum(1 for asset_id in asset_ids if self._enqueue(asset_id))
        Log.info(f"Queued {queued}/{len(asset_ids)} PDF assets (force={force})")
        return JobStatus.SUCCESS

    def request_reprocess(self, owner_id: str, asset_id: str) -> bool:
        """Re-run processing for a ready or failed document.

        Returns False without side effects while a run is pending or in
        flight.

        Raises:
            DocumentNotFoundError: if *owner_id* has no such document.
        """
        document = self._doc_repo.get_by_owner(owner_id, asset_id)
        if not self._enqueue(asset_id):
            Log.debug(f"Ignoring reprocess of {asset_id}: status is {document.status}")
            return False
        return True

    def _enqueue(self, asset_id: str) -> bool:
        job_id = self._doc_repo.mark_pending(asset_id)
        if job_id is None:
            return False
        Log.debug(f"Queued job {job_id} for PDF asset {asset_id}")
        return True

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_documents(
        self,
        owner_id: str,
        page: int = 1,
        size: int = 50,
        status: DocumentStatus | None = None,
    ) -> Paginated[DocumentRecord]:
        _check_paging(page, size)
        return self._doc_repo.list_by_owner(
            owner_id, page, size, str(status) if status is not None else None
        )

    def get_document(self, owner_id: str, asset_id: str) -> DocumentRecord:
        return self._doc_repo.get_by_owner(owner_id, asset_id)

    def get_pages(self, owner_id: str, asset_id: str) -> list[PageRecord]:
        self._doc_repo.get_by_owner(owner_id, asset_id)
        return self._doc_repo.get_pages_by_owner(owner_id, asset_id)

    def get_page(self, owner_id: str, asset_id: str, page_number: int) -> PageRecord | None:
        self._doc_repo.get_by_owner(owner_id, asset_id)
        return self._doc_repo.get_page_by_owner(owner_id, asset_id, page_number)

    def search(
        self, owner_id: str, query: str, page: int = 1, size: int = 50
    ) -> Paginated[SearchHit]:
        """Full-text search over the owner's documents.

        The query is folded with the same tokenizer as the index. A query
        that folds to nothing matches nothing.
        """
        _check_paging(page, size)
        needle = self._tokenizer.tokenize(query)
        if not needle:
            return Paginated(items=[])

        documents = self._doc_repo.search_by_text(owner_id, needle, page, size)
        hits = [
            SearchHit(
                document=document,
                matching_pages=self._doc_repo.get_matching_pages(document.asset_id, needle),
            )
            for document in documents.items
        ]
        return Paginated(items=hits, next_page=documents.next_page)

    def search_in_document(
        self, owner_id: str, asset_id: str, query: str
    ) -> list[PageMatch]:
        self._doc_repo.get_by_owner(owner_id, asset_id)
        needle = self._tokenizer.tokenize(query)
        if not needle:
            return []

        matches: list[PageMatch] = []
        for page in self._doc_repo.search_pages_by_owner(owner_id, asset_id, needle):
            snippet = self._tokenizer.find_snippet(page.text, query, self._snippet_radius)
            matches.append(
                PageMatch(
                    page_number=page.page_number,
                    snippet=snippet.text,
                    match_offset=snippet.offset,
                )
            )
        return matches


def _check_paging(page: int, size: int) -> None:
    if page < 1:
        raise ValueError(f"page must be >= 1, got {page}")
    if size < 1:
        raise ValueError(f"size must be >= 1, got {size}")
