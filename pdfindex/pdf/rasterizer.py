import tempfile
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path

from pdfindex.logging.logger import Log
from pdfindex.processor.diagnostics import MissingToolLog
from pdfindex.processor.process_runner import ProcessRunner, SpawnError
from pdfindex.processor.storage import Storage


class RasterizerUnavailableError(Exception):
    """Raised when the rasterization binary cannot be found."""


class PageRasterizer:
    """Renders a single PDF page to a temporary PNG for OCR."""

    def __init__(
        self,
        runner: ProcessRunner,
        missing_tools: MissingToolLog,
        storage: Storage,
        dpi: int = 300,
        binary: str = "pdftoppm",
    ) -> None:
        self._runner = runner
        self._missing_tools = missing_tools
        self._storage = storage
        self._dpi = dpi
        self._binary = binary

    @contextmanager
    def rasterize(self, path: Path, page_number: int) -> Generator[Path | None, None, None]:
        """Yield the rendered image path, or None if no image was produced.

        The temp directory holding the image is removed on exit, whatever
        happens inside the ``with`` block.

        Raises:
            RasterizerUnavailableError: if the rasterizer binary is missing.
        """
        work_dir = Path(tempfile.mkdtemp(prefix="pdf-ocr-"))
        try:
            yield self._render(path, page_number, work_dir)
        finally:
            self._storage.remove_directory(work_dir)

    def _render(self, path: Path, page_number: int, work_dir: Path) -> Path | None:
        page = str(page_number)
        prefix = work_dir / "page"
        result = self._runner.run(
            self._binary,
            [
                "-f", page,
                "-l", page,
                "-r", str(self._dpi),
                "-png",
                "-singlefile",
                str(path),
                str(prefix),
            ],
        )
        if result.error is SpawnError.NOT_FOUND:
            self._missing_tools.warn_once(
                self._binary,
                f"{self._binary} not found, OCR fallback will be skipped",
            )
            raise RasterizerUnavailableError(f"{self._binary} not found")
        if not result.ok:
            Log.warning(
                f"{self._binary} failed on page {page_number} of {path} "
                f"(exit={result.exit_code}, error={result.error}): {result.message}"
            )
            return None
        image = prefix.with_suffix(".png")
        if not self._storage.exists(image):
            Log.warning(f"{self._binary} produced no image for page {page_number} of {path}")
            return None
        return image
