"""Book scanning pipeline: recognition followed by optional correction.

This module wires the recognition adapter and the correction stage into a
single entry point:

    1. RECOGNITION: OCR with book-domain vocabulary (raises on failure)
    2. CORRECTION: generative cleanup when a service is available
       (falls back to the recognized text on failure)

ISBN extraction is a separate step layered by callers on the returned text.

Construct one pipeline at startup and pass it to the code that needs it.

Example:
    >>> pipeline = BookScanPipeline.from_config()
    >>> text = await pipeline.recognize_and_normalize("colophon.jpg")
    >>> isbn = pipeline.extract_isbn(text)
"""

import asyncio
import logging
import time
from pathlib import Path
from typing import Optional

from .config_loader import Config, get_default_config, load_config
from .correction_service import try_get_correction_service
from .corrector import TextCorrector
from .engine import try_get_engine
from .image_loader import ImageInput
from .isbn import ISBNExtractor
from .recognizer import TextRecognizer
from .types import PipelineResult

logger = logging.getLogger(__name__)


class BookScanPipeline:
    """Recognize-and-normalize pipeline for book page images.

    Engine access is serialized through one lock per pipeline; correction
    calls for different images may overlap.

    Args:
        recognizer: Recognition adapter.
        corrector: Optional correction stage; None skips correction.
        config: Full configuration (defaults are used when None).

    Attributes:
        recognizer: Recognition adapter.
        corrector: Correction stage, or None when unavailable.
        extractor: ISBN extractor used by ``extract_isbn``.
    """

    def __init__(
        self,
        recognizer: TextRecognizer,
        corrector: Optional[TextCorrector] = None,
        config: Optional[Config] = None,
    ):
        self.config = config or Config()
        self.recognizer = recognizer
        self.corrector = corrector
        self.extractor = ISBNExtractor(self.config.bookscan.extraction)
        self._engine_lock = asyncio.Lock()

        logger.info(
            f"BookScanPipeline initialized: engine={recognizer.engine.name}, "
            f"correction={'on' if corrector is not None else 'off'}"
        )

    @classmethod
    def from_config(
        cls, config_path: Optional[Path] = None, enable_correction: bool = True
    ) -> "BookScanPipeline":
        """Build a pipeline from a YAML configuration file.

        Args:
            config_path: Optional path to config YAML. If None, uses defaults.
            enable_correction: Set False to skip correction regardless of
                configuration.

        Returns:
            Configured pipeline.

        Raises:
            RuntimeError: If the configured OCR engine is not installed or
                cannot run here.
        """
        if config_path is None:
            config = get_default_config()
        else:
            config = load_config(config_path)

        settings = config.bookscan
        engine = try_get_engine(settings.engine)
        if engine is None:
            raise RuntimeError(
                f"OCR engine '{settings.engine.type}' is not available"
            )
        recognizer = TextRecognizer(engine, settings.recognition)

        corrector = None
        if enable_correction:
            service = try_get_correction_service(settings.correction)
            if service is not None:
                corrector = TextCorrector(service, settings.correction)

        return cls(recognizer, corrector, config)

    async def recognize_and_normalize(self, image: ImageInput) -> str:
        """Recognize text in an image and correct it when possible.

        Args:
            image: Image handle accepted by the recognition adapter.

        Returns:
            Corrected text, or the recognized text when no correction
            service is available or correction failed.

        Raises:
            InvalidImageError: If the image cannot be converted.
            RecognitionFailedError: If the OCR engine fails.
        """
        result = await self.recognize_and_normalize_with_details(image)
        return result.text

    async def recognize_and_normalize_with_details(
        self, image: ImageInput
    ) -> PipelineResult:
        """Same as ``recognize_and_normalize`` with raw text and timing."""
        start_time = time.perf_counter()

        # ═══════════════════════════════════════════════════════════════
        # STAGE 1: RECOGNITION
        # ═══════════════════════════════════════════════════════════════
        async with self._engine_lock:
            raw_text = await self.recognizer.recognize(image)

        # ═══════════════════════════════════════════════════════════════
        # STAGE 2: CORRECTION (optional, never raises)
        # ═══════════════════════════════════════════════════════════════
        warnings = []
        if self.corrector is None:
            text, correction_applied = raw_text, False
        else:
            correction = await self.corrector.correct_with_details(raw_text)
            text, correction_applied = correction.corrected_text, correction.correction_applied
            if correction.error:
                warnings.append(f"Correction skipped: {correction.error}")

        processing_time_ms = (time.perf_counter() - start_time) * 1000

        logger.info(
            f"Recognized {len(raw_text)} characters "
            f"(corrected={correction_applied}) in {processing_time_ms:.1f}ms"
        )

        return PipelineResult(
            text=text,
            raw_text=raw_text,
            correction_applied=correction_applied,
            processing_time_ms=processing_time_ms,
            warnings=warnings,
        )

    def extract_isbn(self, text: str) -> Optional[str]:
        """Extract a canonical ISBN-13 from text returned by this pipeline."""
        return self.extractor.extract(text)

    def get_processing_stats(self) -> dict:
        """Get pipeline statistics.

        Returns:
            Dictionary with pipeline configuration and component status
        """
        request = self.recognizer.request
        return {
            "engine_type": self.recognizer.engine.name,
            "engine_available": self.recognizer.engine.is_available(),
            "recognition_level": request.recognition_level.value,
            "languages": list(request.languages),
            "uses_language_correction": request.uses_language_correction,
            "vocabulary_size": len(request.custom_words),
            "correction_available": self.corrector is not None,
            "correction_service": (
                self.corrector.service.name if self.corrector is not None else None
            ),
            "verify_check_digits": self.config.bookscan.extraction.verify_check_digits,
        }
