"""RapidOCR engine wrapper for book page recognition.

RapidOCR (PaddleOCR models on ONNX Runtime) detects text boxes and
recognizes each box independently. Its bundled CJK/Latin recognition model
covers the kanji, kana and digits found on colophons, but it has no notion of
language priority, custom words or dictionary correction: those request
fields are accepted and ignored.

Example:
    >>> from src.bookscan.config_loader import EngineConfig
    >>> engine = RapidOCREngine(EngineConfig(type="rapidocr"))
    >>> observations = engine.recognize(image, RecognitionRequest())
"""

import logging
from typing import List, Optional, Tuple

import numpy as np

from .config_loader import EngineConfig
from .types import RecognitionRequest, TextCandidate, TextObservation

logger = logging.getLogger(__name__)


class RapidOCREngine:
    """Wrapper for RapidOCR.

    Args:
        config: OCR engine configuration.

    Attributes:
        config: Engine configuration instance.
        name: Engine identifier.
    """

    name = "rapidocr"

    def __init__(self, config: EngineConfig):
        """Initialize RapidOCR engine wrapper.

        Args:
            config: OCR engine configuration.

        Note:
            The actual RapidOCR engine is lazy-loaded on first use to
            avoid loading ONNX models if not needed.
        """
        self.config = config
        self._engine: Optional[object] = None  # Lazy-loaded

        logger.info(
            f"RapidOCREngine initialized with config: "
            f"use_gpu={config.use_gpu}, text_score={config.text_score}"
        )

    @property
    def engine(self):
        """Lazy-load RapidOCR engine on first access.

        Returns:
            RapidOCR engine instance.

        Raises:
            ImportError: If rapidocr_onnxruntime is not installed.
            RuntimeError: If engine initialization fails.
        """
        if self._engine is None:
            try:
                from rapidocr_onnxruntime import RapidOCR

                self._engine = RapidOCR(
                    text_score=self.config.text_score,
                    det_use_cuda=self.config.use_gpu,
                    cls_use_cuda=self.config.use_gpu,
                    rec_use_cuda=self.config.use_gpu,
                )
                logger.info("RapidOCR engine loaded successfully")

            except ImportError as e:
                logger.error(
                    "Failed to import rapidocr_onnxruntime. "
                    "Install with: pip install rapidocr-onnxruntime"
                )
                raise ImportError(
                    "rapidocr-onnxruntime not installed. "
                    "Run: pip install rapidocr-onnxruntime"
                ) from e

            except Exception as e:
                logger.error(f"Failed to initialize RapidOCR engine: {e}")
                raise RuntimeError(f"RapidOCR initialization failed: {e}") from e

        return self._engine

    def recognize(
        self, image: np.ndarray, request: RecognitionRequest
    ) -> List[TextObservation]:
        """Recognize text boxes in a page image.

        Args:
            image: Grayscale (H, W) or BGR (H, W, 3) uint8 image.
            request: Recognition request (only used for logging).

        Returns:
            One observation per detected box, in RapidOCR order
            (top-to-bottom, left-to-right).
        """
        if request.custom_words:
            logger.debug(
                f"RapidOCR ignores {len(request.custom_words)} custom words "
                f"and languages {list(request.languages)}"
            )

        # RapidOCR returns: (result, elapse); result is None or [[box, text, score], ...]
        result, _ = self.engine(image, use_cls=self.config.use_angle_cls)

        if not result:
            logger.debug("RapidOCR returned no text")
            return []

        observations = []
        for box, text, score in result:
            observations.append(
                TextObservation(
                    candidates=(TextCandidate(text, float(score)),),
                    bounding_box=self._convert_bbox(box),
                )
            )

        logger.debug(f"RapidOCR found {len(observations)} text regions")
        return observations

    def _convert_bbox(self, bbox) -> Optional[Tuple[int, int, int, int]]:
        """Convert 4 corner points to (x_min, y_min, x_max, y_max)."""
        if len(bbox) != 4:
            logger.warning(f"Unexpected bbox format: {bbox}")
            return None

        points = np.array(bbox)
        return (
            int(points[:, 0].min()),
            int(points[:, 1].min()),
            int(points[:, 0].max()),
            int(points[:, 1].max()),
        )

    def is_available(self) -> bool:
        """Check if RapidOCR engine is available.

        Returns:
            True if engine can be initialized.
        """
        try:
            _ = self.engine  # Trigger lazy loading
            return True
        except (ImportError, RuntimeError):
            return False
