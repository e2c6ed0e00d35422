import argparse

from pdfindex.config.settings import Settings
from pdfindex.database.connection import apply_schema, close_pool, get_connection, init_pool
from pdfindex.database.repositories.asset_repository import AssetRepository
from pdfindex.database.repositories.document_repository import DocumentRepository
from pdfindex.database.repositories.job_repository import JobRepository
from pdfindex.logging.logger import Log
from pdfindex.processor.processor import build_processor
from pdfindex.search.tokenizer import SearchTokenizer
from pdfindex.service.document_service import DocumentService
from pdfindex.worker.job_runner import JobRunner
from pdfindex.worker.worker import Worker


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="PDF indexing worker")
    parser.add_argument(
        "--init-schema",
        action="store_true",
        help="Create the pdfindex tables and indexes before starting",
    )
    parser.add_argument(
        "--queue-all",
        action="store_true",
        help="Queue every PDF asset that has never been processed",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="With --queue-all, queue every live PDF asset",
    )
    parser.add_argument(
        "--max-jobs",
        type=int,
        default=None,
        help="Stop after processing this many jobs",
    )
    return parser.parse_args(argv)


def build_service(settings: Settings) -> DocumentService:
    return DocumentService(
        asset_repo=AssetRepository(),
        doc_repo=DocumentRepository(),
        tokenizer=SearchTokenizer(),
        snippet_radius=settings.search_snippet_radius,
    )


def main(argv: list[str] | None = None) -> None:
    """Entry point: initialize pool -> build dependencies -> start worker loop."""
    args = parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level, settings.app_env)
    init_pool(settings)

    try:
        if args.init_schema:
            with get_connection() as conn:
                apply_schema(conn)
            Log.info("Database schema applied")

        if args.queue_all:
            build_service(settings).queue_all(force=args.force)

        processor = build_processor(settings)
        job_repo = JobRepository(settings.max_job_attempts, settings.job_stale_after_seconds)
        doc_repo = DocumentRepository()
        job_runner = JobRunner(processor, job_repo, doc_repo, settings)
        worker = Worker(job_repo, job_runner, settings)
        worker.run(max_jobs=args.max_jobs)
    finally:
        close_pool()


if __name__ == "__main__":
    main()
