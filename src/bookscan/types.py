"""Type definitions for the book scanning pipeline.

This module defines the data structures passed between the recognition
adapter, the ISBN extractor and the correction stage. Every value here is
created per pipeline invocation and never persisted.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


class RecognitionLevel(Enum):
    """Accuracy/speed trade-off requested from the OCR engine."""

    ACCURATE = "accurate"
    FAST = "fast"


class IdentifierPattern(Enum):
    """Pattern that produced an identifier candidate."""

    ISBN13_SEPARATED = "isbn13_separated"  # 978-4-12-345678-9, 978 4 ...
    ISBN13_COMPACT = "isbn13_compact"  # 9784123456789
    ISBN10 = "isbn10"  # 4-12-345678-X


@dataclass(frozen=True)
class TextCandidate:
    """One transcription candidate for a text region.

    Attributes:
        text: Transcribed text.
        confidence: Engine confidence (0.0-1.0).
    """

    text: str
    confidence: float = 1.0


@dataclass(frozen=True)
class TextObservation:
    """Text region detected by an OCR engine.

    Attributes:
        candidates: Transcriptions ranked by confidence, best first.
        bounding_box: Optional (x1, y1, x2, y2) box of the region.
    """

    candidates: Tuple[TextCandidate, ...]
    bounding_box: Optional[Tuple[int, int, int, int]] = None

    def top_candidate(self) -> Optional[TextCandidate]:
        """Return the highest-ranked candidate, or None if there is none."""
        return self.candidates[0] if self.candidates else None


@dataclass(frozen=True)
class RecognitionRequest:
    """Engine configuration for a single recognition call.

    Attributes:
        recognition_level: Accuracy mode.
        languages: BCP-47 language tags in priority order.
        uses_language_correction: Let the engine apply its language model.
        custom_words: Domain words used as a recognition hint.
    """

    recognition_level: RecognitionLevel = RecognitionLevel.ACCURATE
    languages: Tuple[str, ...] = ("ja-JP", "en-US")
    uses_language_correction: bool = True
    custom_words: Tuple[str, ...] = ()


@dataclass(frozen=True)
class IdentifierCandidate:
    """Regex match location found while scanning for an ISBN.

    Attributes:
        start: Start offset of the match in the scanned text.
        end: End offset (exclusive).
        raw_text: Matched substring including separators.
        pattern: Pattern that produced the match.
    """

    start: int
    end: int
    raw_text: str
    pattern: IdentifierPattern


@dataclass
class CorrectionResult:
    """Outcome of the correction stage.

    Attributes:
        corrected_text: Text returned to the caller (the original on failure).
        original_text: Text before correction.
        correction_applied: Whether the service response was used.
        error: Diagnostic message when the service failed.
    """

    corrected_text: str
    original_text: str
    correction_applied: bool
    error: Optional[str] = None


@dataclass
class PipelineResult:
    """Result of recognize-and-normalize with timing details.

    Attributes:
        text: Final text (corrected when correction succeeded).
        raw_text: Text as recognized by the OCR engine.
        correction_applied: Whether corrected text replaced the raw text.
        processing_time_ms: Total processing time in milliseconds.
        warnings: Diagnostic messages collected along the way.
    """

    text: str
    raw_text: str
    correction_applied: bool
    processing_time_ms: float
    warnings: List[str] = field(default_factory=list)
