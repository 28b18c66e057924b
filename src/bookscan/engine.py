"""OCR engine boundary.

An engine receives a pixel buffer and a ``RecognitionRequest`` and returns
the detected text regions in reading order, each with its ranked
transcription candidates. Engines are blocking; the recognition adapter runs
them in a worker thread.

Engines are capability-gated: ``try_get_engine`` returns ``None`` when the
configured backend is not installed instead of raising.

Example:
    >>> from src.bookscan.config_loader import EngineConfig
    >>> from src.bookscan.engine import try_get_engine
    >>> engine = try_get_engine(EngineConfig(type="tesseract"))
    >>> if engine is not None:
    ...     observations = engine.recognize(pixels, RecognitionRequest())
"""

import logging
from typing import List, Optional, Protocol

import numpy as np

from .config_loader import EngineConfig
from .types import RecognitionRequest, TextObservation

logger = logging.getLogger(__name__)


class OCREngine(Protocol):
    """Interface implemented by OCR backends."""

    name: str

    def recognize(
        self, image: np.ndarray, request: RecognitionRequest
    ) -> List[TextObservation]:
        """Recognize text regions in ``image``.

        Raises:
            Exception: Any backend failure; the adapter wraps it.
        """
        ...

    def is_available(self) -> bool:
        ...


def create_engine(config: EngineConfig) -> OCREngine:
    """Build the OCR engine selected by configuration.

    Args:
        config: Engine configuration.

    Returns:
        Engine instance. Unknown types fall back to Tesseract.
    """
    engine_type = config.type.lower()

    if engine_type == "rapidocr":
        from .engine_rapidocr import RapidOCREngine

        logger.info("Initialized with RapidOCR engine")
        return RapidOCREngine(config)

    if engine_type != "tesseract":
        logger.warning(f"Unknown engine type '{engine_type}', defaulting to Tesseract")

    from .engine_tesseract import TesseractEngine

    logger.info("Initialized with Tesseract OCR engine")
    return TesseractEngine(config)


def try_get_engine(config: EngineConfig) -> Optional[OCREngine]:
    """Return the configured engine if its backend is usable here.

    Args:
        config: Engine configuration.

    Returns:
        Engine instance, or None when the backend is missing.
    """
    try:
        engine = create_engine(config)
    except (ImportError, RuntimeError) as e:
        logger.warning(f"OCR engine '{config.type}' unavailable: {e}")
        return None

    if not engine.is_available():
        logger.warning(f"OCR engine '{engine.name}' unavailable")
        return None

    return engine
