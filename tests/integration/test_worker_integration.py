import shutil
from collections.abc import Callable
from pathlib import Path

import pytest

from pdfindex.config.settings import Settings
from pdfindex.database.connection import get_connection
from pdfindex.database.repositories.asset_repository import AssetRepository
from pdfindex.database.repositories.document_repository import DocumentRepository
from pdfindex.database.repositories.job_repository import JobRepository
from pdfindex.processor.processor import build_processor
from pdfindex.search.tokenizer import SearchTokenizer
from pdfindex.service.document_service import DocumentService
from pdfindex.worker.job_runner import JobRunner
from pdfindex.worker.worker import Worker

requires_poppler = pytest.mark.skipif(
    shutil.which("pdftotext") is None or shutil.which("pdfinfo") is None,
    reason="poppler-utils not installed",
)


def _service(settings: Settings) -> DocumentService:
    return DocumentService(
        AssetRepository(),
        DocumentRepository(),
        SearchTokenizer(),
    )


def _worker(settings: Settings, files_root: Path) -> Worker:
    job_repo = JobRepository(
        max_attempts=settings.max_job_attempts,
        stale_after_seconds=settings.job_stale_after_seconds,
    )
    processor = build_processor(settings, files_root=files_root)
    doc_repo = DocumentRepository()
    return Worker(job_repo, JobRunner(processor, job_repo, doc_repo, settings), settings)


def _job_status(asset_id: str) -> str:
    with get_connection() as conn:
        with conn.cursor() as cur:
            cur.execute(
                "SELECT status FROM pdf_jobs WHERE asset_id = %s ORDER BY id DESC LIMIT 1",
                (asset_id,),
            )
            row = cur.fetchone()
    assert row is not None
    return str(row[0])


@pytest.mark.integration
@requires_poppler
class TestWorkerIntegration:
    def test_upload_to_searchable_document(
        self,
        make_asset: Callable[..., str],
        owner_id: str,
        files_root: Path,
        sample_pdf_bytes: bytes,
        test_settings: Settings,
    ) -> None:
        asset_id = make_asset(file_name="hello.pdf")
        (files_root / "hello.pdf").write_bytes(sample_pdf_bytes)
        service = _service(test_settings)

        assert service.on_asset_uploaded(asset_id) is True
        assert service.on_asset_uploaded(asset_id) is False
        assert _worker(test_settings, files_root).run(max_jobs=1) == 1

        document = service.get_document(owner_id, asset_id)
        assert document.status == "ready"
        assert document.title == "Quarterly Report"
        pages = service.get_pages(owner_id, asset_id)
        assert len(pages) == 1
        assert "Hello PDF World" in pages[0].text
        assert pages[0].text_source == "embedded"
        assert pages[0].width == pytest.approx(612.0)
        assert _job_status(asset_id) == "done"

        hits = service.search(owner_id, "hello world")
        assert [hit.document.asset_id for hit in hits.items] == [asset_id]
        assert hits.items[0].matching_pages == [1]

        matches = service.search_in_document(owner_id, asset_id, "PDF world")
        assert matches[0].page_number == 1
        assert matches[0].match_offset == 6

    def test_missing_file_fails_document(
        self,
        make_asset: Callable[..., str],
        owner_id: str,
        files_root: Path,
        test_settings: Settings,
    ) -> None:
        asset_id = make_asset(file_name="gone.pdf")
        service = _service(test_settings)
        service.on_asset_uploaded(asset_id)

        _worker(test_settings, files_root).run(max_jobs=1)

        document = service.get_document(owner_id, asset_id)
        assert document.status == "failed"
        assert document.last_error is not None
        assert "File not found" in document.last_error
        assert _job_status(asset_id) == "failed"
        assert service.request_reprocess(owner_id, asset_id) is True
