from pathlib import Path

from pdfindex.logging.logger import Log
from pdfindex.ocr.base import BaseOcrClient
from pdfindex.ocr.exceptions import OcrError
from pdfindex.pdf.rasterizer import PageRasterizer, RasterizerUnavailableError
from pdfindex.processor.models import ExtractedPage, TextSource


class OcrFallbackCoordinator:
    """Recovers text for pages without embedded text via the OCR service.

    Pages are updated in place. A page whose OCR attempt fails or comes
    back empty keeps ``TextSource.NONE``; nothing here fails the document.
    """

    def __init__(
        self,
        rasterizer: PageRasterizer,
        ocr_client: BaseOcrClient | None,
        enabled: bool = True,
    ) -> None:
        self._rasterizer = rasterizer
        self._ocr_client = ocr_client
        self._enabled = enabled

    @property
    def available(self) -> bool:
        return self._enabled and self._ocr_client is not None

    def apply(self, path: Path, pages: list[ExtractedPage]) -> int:
        """Run OCR over textless pages. Returns the number of pages recovered."""
        candidates = [p for p in pages if p.text_source is TextSource.NONE]
        if not candidates or not self.available:
            return 0

        recovered = 0
        for page in candidates:
            try:
                text = self._recognize(path, page.page_number)
            except RasterizerUnavailableError:
                break
            if text:
                page.text = text
                page.text_source = TextSource.OCR
                recovered += 1
        Log.info(f"OCR recovered {recovered}/{len(candidates)} pages of {path}")
        return recovered

    def _recognize(self, path: Path, page_number: int) -> str:
        if self._ocr_client is None:
            raise ValueError("OCR client must be configured before recognition")
        with self._rasterizer.rasterize(path, page_number) as image:
            if image is None:
                return ""
            try:
                result = self._ocr_client.ocr(image)
            except OcrError as exc:
                Log.warning(f"OCR failed on page {page_number} of {path}: {exc}")
                return ""
        text = result.joined()
        if not text:
            Log.debug(f"OCR returned no text for page {page_number} of {path}")
        return text
