from dataclasses import dataclass, field


@dataclass(frozen=True)
class OcrConfig:
    """Model selection and score thresholds sent with each OCR request."""

    model_name: str
    min_detection_score: float = 0.5
    min_recognition_score: float = 0.8


@dataclass(frozen=True)
class OcrResult:
    """Output of the OCR service for one image."""

    text: list[str] = field(default_factory=list)

    def joined(self) -> str:
        return " ".join(self.text).strip()
