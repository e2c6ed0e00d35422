from abc import ABC, abstractmethod
from pathlib import Path

from pdfindex.ocr.models import OcrResult


class BaseOcrClient(ABC):
    """Contract for text-recognition service adapters."""

    @abstractmethod
    def ocr(self, image_path: Path) -> OcrResult:
        """Recognize text in the image at *image_path*.

        Returns:
            OcrResult with the recognized text fragments in reading order.

        Raises:
            OcrError: on any failure.
        """
