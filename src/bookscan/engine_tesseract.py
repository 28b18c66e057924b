"""Tesseract OCR engine wrapper for book page recognition.

This module provides a high-level interface to Tesseract OCR tuned for
covers and colophons of Japanese and English books:

- BCP-47 language tags mapped to Tesseract traineddata codes
- Book-domain vocabulary passed as a ``--user-words`` file
- Word-level output grouped into text lines in reading order

Example:
    >>> from src.bookscan.config_loader import EngineConfig
    >>> from src.bookscan.types import RecognitionRequest
    >>> engine = TesseractEngine(EngineConfig())
    >>> observations = engine.recognize(image, RecognitionRequest())
    >>> print(observations[0].top_candidate().text)
    'ISBN978-4-00-310101-8'
"""

import logging
import os
import tempfile
from typing import Dict, List, Optional, Sequence, Tuple

import cv2
import numpy as np
import pytesseract

from .config_loader import EngineConfig
from .types import RecognitionLevel, RecognitionRequest, TextCandidate, TextObservation

logger = logging.getLogger(__name__)

_LANGUAGE_CODES: Dict[str, str] = {
    "ja": "jpn",
    "ja-JP": "jpn",
    "en": "eng",
    "en-US": "eng",
    "en-GB": "eng",
    "zh-Hans": "chi_sim",
    "zh-Hant": "chi_tra",
    "ko": "kor",
    "ko-KR": "kor",
}


def to_tesseract_languages(languages: Sequence[str]) -> str:
    """Map BCP-47 tags to a Tesseract ``-l`` argument, keeping priority order.

    Args:
        languages: Language tags such as ["ja-JP", "en-US"].

    Returns:
        Tesseract language string such as "jpn+eng".
    """
    codes: List[str] = []
    for tag in languages:
        code = _LANGUAGE_CODES.get(tag) or _LANGUAGE_CODES.get(tag.split("-")[0])
        if code is None:
            logger.warning(f"No Tesseract language for '{tag}', skipping")
            continue
        if code not in codes:
            codes.append(code)
    return "+".join(codes) if codes else "eng"


def _join_words(words: List[str]) -> str:
    """Join words of one line; CJK text is not space separated."""
    line = ""
    for word in words:
        if line and line[-1].isascii() and word[0].isascii():
            line += " "
        line += word
    return line


class TesseractEngine:
    """Wrapper for Tesseract OCR with book-domain hints.

    Args:
        config: OCR engine configuration.

    Attributes:
        config: Engine configuration instance.
        name: Engine identifier.

    Example:
        >>> engine = TesseractEngine(config)
        >>> image = cv2.imread('colophon.jpg')
        >>> for obs in engine.recognize(image, RecognitionRequest()):
        ...     print(obs.top_candidate().text)
    """

    name = "tesseract"

    def __init__(self, config: EngineConfig):
        """Initialize Tesseract engine wrapper.

        Args:
            config: OCR engine configuration.

        Raises:
            RuntimeError: If the tesseract binary cannot be found.
        """
        self.config = config

        if config.tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = config.tesseract_cmd

        # Verify Tesseract is available
        try:
            version = pytesseract.get_tesseract_version()
            logger.info(f"Tesseract engine initialized: version {version}")
        except Exception as e:
            logger.error(f"Tesseract not found or not properly configured: {e}")
            raise RuntimeError(
                "Tesseract not available. Please install Tesseract OCR "
                "with the jpn and eng language data.\n"
                "Linux: sudo apt-get install tesseract-ocr tesseract-ocr-jpn\n"
                "MacOS: brew install tesseract tesseract-lang"
            ) from e

    def build_config(
        self, request: RecognitionRequest, user_words_path: Optional[str] = None
    ) -> str:
        """Build the Tesseract command-line configuration for a request.

        Args:
            request: Recognition request.
            user_words_path: Path of the custom words file, if any.

        Returns:
            Configuration string passed to pytesseract.
        """
        # OEM 1: LSTM only; OEM 3: whatever models are installed
        oem = 1 if request.recognition_level == RecognitionLevel.ACCURATE else 3
        parts = [f"--oem {oem}", f"--psm {self.config.psm}"]

        if user_words_path:
            parts.append(f"--user-words {user_words_path}")

        if not request.uses_language_correction:
            parts.append("-c load_system_dawg=0 -c load_freq_dawg=0")

        return " ".join(parts)

    def recognize(
        self, image: np.ndarray, request: RecognitionRequest
    ) -> List[TextObservation]:
        """Recognize text lines in a page image.

        Args:
            image: Grayscale (H, W) or BGR (H, W, 3) uint8 image.
            request: Recognition request.

        Returns:
            One observation per text line, in Tesseract reading order.

        Raises:
            pytesseract.TesseractError: If Tesseract fails.
        """
        if image.ndim == 3:
            image = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)

        lang = to_tesseract_languages(request.languages)
        user_words_path = self._write_user_words(request.custom_words)

        try:
            tesseract_config = self.build_config(request, user_words_path)
            logger.debug(f"Running Tesseract lang={lang}, config: {tesseract_config}")

            data = pytesseract.image_to_data(
                image,
                lang=lang,
                config=tesseract_config,
                output_type=pytesseract.Output.DICT,
            )
        finally:
            if user_words_path:
                os.unlink(user_words_path)

        observations = self._group_lines(data)

        logger.debug(f"Tesseract found {len(observations)} text lines")
        return observations

    def _write_user_words(self, words: Sequence[str]) -> Optional[str]:
        if not words:
            return None

        with tempfile.NamedTemporaryFile(
            "w", suffix=".user-words", encoding="utf-8", delete=False
        ) as f:
            f.write("\n".join(words) + "\n")
        return f.name

    def _group_lines(self, data: Dict[str, list]) -> List[TextObservation]:
        """Group word detections into lines keyed by (block, paragraph, line)."""
        lines: Dict[Tuple[int, int, int], dict] = {}

        for i in range(len(data["text"])):
            text = str(data["text"][i]).strip()
            conf = float(data["conf"][i])

            # conf < 0 marks layout rows without recognized text
            if not text or conf < 0:
                continue

            key = (data["block_num"][i], data["par_num"][i], data["line_num"][i])
            x, y = data["left"][i], data["top"][i]
            x2, y2 = x + data["width"][i], y + data["height"][i]

            line = lines.setdefault(
                key, {"words": [], "confs": [], "box": [x, y, x2, y2]}
            )
            line["words"].append(text)
            line["confs"].append(conf)
            box = line["box"]
            line["box"] = [min(box[0], x), min(box[1], y), max(box[2], x2), max(box[3], y2)]

        observations = []
        for line in lines.values():
            confidence = float(np.mean(line["confs"])) / 100.0  # Convert to 0-1 range
            observations.append(
                TextObservation(
                    candidates=(TextCandidate(_join_words(line["words"]), confidence),),
                    bounding_box=tuple(int(v) for v in line["box"]),
                )
            )
        return observations

    def is_available(self) -> bool:
        """Check if the tesseract binary can be executed.

        Returns:
            True if Tesseract responds with a version.
        """
        try:
            pytesseract.get_tesseract_version()
            return True
        except Exception:
            return False
