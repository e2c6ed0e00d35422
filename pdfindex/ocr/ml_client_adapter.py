import json
from pathlib import Path

import httpx

from pdfindex.ocr.base import BaseOcrClient
from pdfindex.ocr.exceptions import OcrError, OcrNetworkError
from pdfindex.ocr.models import OcrConfig, OcrResult


class MachineLearningOcrClient(BaseOcrClient):
    """OCR adapter for the machine-learning service ``/predict`` endpoint."""

    def __init__(
        self,
        *,
        base_url: str,
        config: OcrConfig,
        timeout_seconds: int,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._config = config
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"),
            timeout=timeout_seconds,
            transport=transport,
        )

    def ocr(self, image_path: Path) -> OcrResult:
        try:
            with image_path.open("rb") as image:
                response = self._client.post(
                    "/predict",
                    data={"entries": json.dumps(self._entries())},
                    files={"image": (image_path.name, image, "image/png")},
                )
        except OSError as exc:
            raise OcrError(f"Cannot read OCR input {image_path}: {exc}") from exc
        except (httpx.ConnectError, httpx.TimeoutException) as exc:
            raise OcrNetworkError(f"OCR service network error: {exc}") from exc
        except httpx.HTTPError as exc:
            raise OcrNetworkError(f"OCR service transport error: {exc}") from exc

        if response.status_code >= 400:
            raise OcrError(
                f"OCR service returned HTTP {response.status_code}: {response.text[:200]}"
            )
        return self._parse(response)

    def _entries(self) -> dict[str, object]:
        return {
            "ocr": {
                "detection": {
                    "modelName": self._config.model_name,
                    "options": {"minScore": self._config.min_detection_score},
                },
                "recognition": {
                    "modelName": self._config.model_name,
                    "options": {"minScore": self._config.min_recognition_score},
                },
            }
        }

    @staticmethod
    def _parse(response: httpx.Response) -> OcrResult:
        try:
            payload = response.json()
        except ValueError as exc:
            raise OcrError(f"Invalid JSON from OCR service: {exc}") from exc
        if not isinstance(payload, dict):
            raise OcrError("OCR response must be an object")
        ocr = payload.get("ocr")
        if not isinstance(ocr, dict):
            raise OcrError("OCR response is missing the 'ocr' object")
        text = ocr.get("text", [])
        if not isinstance(text, list):
            raise OcrError("'ocr.text' must be a list")
        return OcrResult(text=[str(fragment) for fragment in text if fragment is not None])
