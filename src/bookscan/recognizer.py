"""Recognition adapter: page image to recognized text.

The adapter converts the caller's image to a pixel buffer, asks the OCR
engine for text regions using the book-domain request settings, and joins
the top candidate of every region with newlines in engine order.

Example:
    >>> recognizer = TextRecognizer(engine, config.bookscan.recognition)
    >>> text = await recognizer.recognize("colophon.jpg")
"""

import asyncio
import logging
from typing import List, Optional

from .config_loader import RecognitionConfig
from .engine import OCREngine
from .errors import RecognitionFailedError
from .image_loader import ImageInput, load_image
from .types import RecognitionLevel, RecognitionRequest, TextObservation
from .vocabulary import get_vocabulary

logger = logging.getLogger(__name__)


def build_request(config: RecognitionConfig) -> RecognitionRequest:
    """Build the recognition request described by configuration.

    Args:
        config: Recognition configuration.

    Returns:
        RecognitionRequest with vocabulary attached when enabled.
    """
    custom_words = get_vocabulary(config.extra_words) if config.use_custom_words else ()
    return RecognitionRequest(
        recognition_level=RecognitionLevel(config.recognition_level),
        languages=tuple(config.languages),
        uses_language_correction=config.uses_language_correction,
        custom_words=custom_words,
    )


def join_observations(observations: List[TextObservation]) -> str:
    """Join the top candidate of each observation with newlines.

    Observations without any candidate are skipped.
    """
    lines = []
    for observation in observations:
        candidate = observation.top_candidate()
        if candidate is not None:
            lines.append(candidate.text)
    return "\n".join(lines)


class TextRecognizer:
    """Runs an OCR engine over a page image and returns its text.

    Args:
        engine: OCR engine implementation.
        config: Recognition configuration. Defaults to accurate Japanese +
            English recognition with language correction and the book
            vocabulary.

    Attributes:
        engine: OCR engine implementation.
        request: Recognition request sent with every call.
    """

    def __init__(self, engine: OCREngine, config: Optional[RecognitionConfig] = None):
        self.engine = engine
        self.request = build_request(config or RecognitionConfig())

        logger.info(
            f"TextRecognizer initialized: engine={engine.name}, "
            f"level={self.request.recognition_level.value}, "
            f"languages={list(self.request.languages)}, "
            f"custom_words={len(self.request.custom_words)}"
        )

    async def recognize(self, image: ImageInput) -> str:
        """Recognize text in an image.

        Image decoding and the engine call run in a worker thread; the
        coroutine suspends until they complete or fail. No retry is attempted.

        Args:
            image: Image handle accepted by ``load_image``.

        Returns:
            Region texts joined with newlines, or "" if nothing was detected.

        Raises:
            InvalidImageError: If the image cannot be converted.
            RecognitionFailedError: If the engine reports an error.
        """
        pixels = await asyncio.to_thread(load_image, image)

        try:
            observations = await asyncio.to_thread(
                self.engine.recognize, pixels, self.request
            )
        except Exception as e:
            logger.error(f"OCR recognition failed: {e}", exc_info=True)
            raise RecognitionFailedError(
                f"{self.engine.name} recognition failed: {e}", cause=e
            ) from e

        text = join_observations(observations or [])

        logger.debug(
            f"Recognized {len(observations or [])} regions, {len(text)} characters"
        )
        return text

    def recognize_sync(self, image: ImageInput) -> str:
        """Blocking variant of ``recognize`` for synchronous callers."""
        return asyncio.run(self.recognize(image))
