from pdfindex.config.settings import Settings
from pdfindex.ocr.base import BaseOcrClient
from pdfindex.ocr.ml_client_adapter import MachineLearningOcrClient
from pdfindex.ocr.models import OcrConfig


class OcrClientFactory:
    """Creates the configured OCR client, or None when OCR is off."""

    @classmethod
    def create(cls, settings: Settings) -> BaseOcrClient | None:
        base_url = settings.machine_learning_url.strip()
        if not settings.ocr_enabled or not base_url:
            return None
        return MachineLearningOcrClient(
            base_url=base_url,
            config=OcrConfig(
                model_name=settings.ocr_model_name,
                min_detection_score=settings.ocr_min_detection_score,
                min_recognition_score=settings.ocr_min_recognition_score,
            ),
            timeout_seconds=settings.ocr_timeout_seconds,
        )
