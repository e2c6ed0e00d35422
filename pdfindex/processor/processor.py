from pathlib import Path

from pdfindex.config.settings import Settings
from pdfindex.database.repositories.asset_repository import AssetRepository
from pdfindex.database.repositories.document_repository import DocumentRepository
from pdfindex.logging.logger import Log
from pdfindex.ocr.factory import OcrClientFactory
from pdfindex.ocr.fallback import OcrFallbackCoordinator
from pdfindex.pdf.factory import TagReaderFactory
from pdfindex.pdf.metadata import MetadataReader
from pdfindex.pdf.page_dimensions import PageDimensionExtractor
from pdfindex.pdf.page_text import PageTextExtractor
from pdfindex.pdf.rasterizer import PageRasterizer
from pdfindex.processor.diagnostics import MissingToolLog
from pdfindex.processor.exceptions import FileReadError, FileTooLargeError
from pdfindex.processor.models import (
    Asset,
    ExtractedPage,
    JobStatus,
    PdfMetadata,
    ProcessingResult,
)
from pdfindex.processor.process_runner import ProcessRunner
from pdfindex.processor.storage import Storage
from pdfindex.search.tokenizer import SearchTokenizer

MAX_ERROR_LENGTH = 500


class Processor:
    """Orchestrates processing of one PDF asset.

    Pipeline: load asset -> limits -> metadata -> dimensions -> page text
    -> OCR fallback -> tokenize -> persist. The document status moves
    ``processing`` -> ``ready`` | ``failed``; input that is not a live PDF
    is skipped without touching the status.
    """

    def __init__(
        self,
        asset_repo: AssetRepository,
        doc_repo: DocumentRepository,
        storage: Storage,
        metadata_reader: MetadataReader,
        dimension_extractor: PageDimensionExtractor,
        text_extractor: PageTextExtractor,
        ocr_fallback: OcrFallbackCoordinator,
        tokenizer: SearchTokenizer,
        max_pages: int = 250,
        max_file_size_bytes: int | None = None,
    ) -> None:
        self._asset_repo = asset_repo
        self._doc_repo = doc_repo
        self._storage = storage
        self._metadata_reader = metadata_reader
        self._dimension_extractor = dimension_extractor
        self._text_extractor = text_extractor
        self._ocr_fallback = ocr_fallback
        self._tokenizer = tokenizer
        self._max_pages = max_pages
        self._max_file_size_bytes = max_file_size_bytes

    def process(self, asset_id: str) -> JobStatus:
        """Process one asset and report the job outcome."""
        asset = self._asset_repo.get_asset_for_processing(asset_id)
        if asset is None or asset.is_deleted or not asset.is_pdf:
            Log.debug(f"Skipping asset {asset_id}: missing, deleted or not a PDF")
            return JobStatus.SKIPPED

        Log.info(f"Processing PDF asset {asset_id} ({asset.original_file_name})")
        self._doc_repo.mark_processing(asset_id)

        try:
            result = self._run(asset)
            self._doc_repo.save_result(result)
        except Exception as exc:
            Log.error(f"Failed to process PDF asset {asset_id}: {exc}", exc_info=True)
            self._doc_repo.mark_failed(asset_id, truncate_error(exc))
            return JobStatus.FAILED

        Log.info(
            f"Processed PDF asset {asset_id}: {len(result.pages)} pages, "
            f"{len(result.search_text)} index chars"
        )
        return JobStatus.SUCCESS

    def _run(self, asset: Asset) -> ProcessingResult:
        path = self._storage.resolve(asset.original_path)
        self._check_file(path)

        metadata = self._metadata_reader.read(path)
        pages = self._extract_pages(path, metadata)

        for page in pages:
            page.search_text = self._tokenizer.tokenize(page.text)
        search_text = " ".join(page.search_text for page in pages if page.search_text)
        return ProcessingResult(
            asset_id=asset.id,
            metadata=metadata,
            pages=pages,
            search_text=search_text,
        )

    def _check_file(self, path: Path) -> None:
        if not self._storage.exists(path):
            raise FileReadError(f"File not found: {path}")
        size = self._storage.size(path)
        if self._max_file_size_bytes is not None and size > self._max_file_size_bytes:
            raise FileTooLargeError(size, self._max_file_size_bytes)

    def _extract_pages(self, path: Path, metadata: PdfMetadata) -> list[ExtractedPage]:
        if metadata.page_count > self._max_pages:
            Log.warning(
                f"{path} has {metadata.page_count} pages, over the limit of "
                f"{self._max_pages}; page text will not be extracted"
            )
            return []

        sizes = self._dimension_extractor.extract(path, metadata.page_count)
        pages = self._text_extractor.extract(path, metadata.page_count, sizes)
        self._ocr_fallback.apply(path, pages)
        return pages


def truncate_error(exc: Exception) -> str:
    message = str(exc) or type(exc).__name__
    return message[:MAX_ERROR_LENGTH]


def build_processor(
    settings: Settings,
    files_root: Path | None = None,
    missing_tools: MissingToolLog | None = None,
) -> Processor:
    """Build a Processor with all required adapters.

    One MissingToolLog is shared by every tool-backed extractor so that a
    missing binary is reported once per process.
    """
    missing_tools = missing_tools or MissingToolLog()
    storage = Storage(files_root=files_root or Path(settings.files_root))
    runner = ProcessRunner(timeout_seconds=settings.tool_timeout_seconds)
    rasterizer = PageRasterizer(
        runner,
        missing_tools,
        storage,
        dpi=settings.ocr_raster_dpi,
        binary=settings.pdftoppm_bin,
    )
    return Processor(
        asset_repo=AssetRepository(),
        doc_repo=DocumentRepository(),
        storage=storage,
        metadata_reader=MetadataReader(TagReaderFactory.create(settings)),
        dimension_extractor=PageDimensionExtractor(
            runner, missing_tools, binary=settings.pdfinfo_bin
        ),
        text_extractor=PageTextExtractor(
            runner,
            missing_tools,
            min_embedded_length=settings.pdf_min_embedded_text_length,
            binary=settings.pdftotext_bin,
        ),
        ocr_fallback=OcrFallbackCoordinator(
            rasterizer,
            OcrClientFactory.create(settings),
            enabled=settings.ocr_enabled,
        ),
        tokenizer=SearchTokenizer(),
        max_pages=settings.pdf_max_pages,
        max_file_size_bytes=settings.pdf_max_file_size_bytes,
    )
