"""Errors raised by the book scanning pipeline.

Only recognition-layer failures are raised to callers. A missing ISBN is
reported as ``None`` and correction failures are absorbed by the corrector.
"""

from typing import Optional


class BookScanError(Exception):
    """Base error carrying a short machine readable code.

    Attributes:
        code: Error code (e.g., "OCR-E001").
        message: Human-readable explanation.
    """

    code = "OCR-E000"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


class InvalidImageError(BookScanError):
    """Input could not be converted to a pixel buffer."""

    code = "OCR-E001"


class RecognitionFailedError(BookScanError):
    """The OCR engine reported an error.

    Attributes:
        cause: Underlying engine exception.
    """

    code = "OCR-E002"

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause
