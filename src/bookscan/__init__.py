"""Book page recognition and ISBN extraction.

This package runs OCR on photographed book covers and colophons, optionally
cleans the recognized text with a generative correction service, and
extracts a canonical ISBN-13 from the result.

Core Components:
    - vocabulary: Book-domain words used as a recognition hint
    - recognizer: OCR adapter producing newline-joined text
    - isbn: ISBN-13/ISBN-10 extraction, check digits and conversion
    - corrector: Generative text correction with silent fallback
    - pipeline: Recognize-and-normalize orchestration

Example:
    >>> from src.bookscan import BookScanPipeline
    >>> pipeline = BookScanPipeline.from_config()
    >>> text = await pipeline.recognize_and_normalize("colophon.jpg")
    >>> print(pipeline.extract_isbn(text))
    9784003101018
"""

from .config_loader import (
    BookScanConfig,
    Config,
    CorrectionConfig,
    EngineConfig,
    ExtractionConfig,
    RecognitionConfig,
    get_default_config,
    load_config,
)
from .correction_service import (
    CorrectionService,
    OpenAICorrectionService,
    try_get_correction_service,
)
from .corrector import TextCorrector
from .engine import OCREngine, create_engine, try_get_engine
from .errors import BookScanError, InvalidImageError, RecognitionFailedError
from .isbn import (
    ISBNExtractor,
    calculate_isbn10_check_digit,
    calculate_isbn13_check_digit,
    convert_isbn10_to_13,
    extract_isbn,
    find_isbn_candidates,
    format_isbn13,
    normalize_isbn,
    validate_isbn10,
    validate_isbn13,
)
from .pipeline import BookScanPipeline
from .recognizer import TextRecognizer
from .types import (
    CorrectionResult,
    IdentifierCandidate,
    IdentifierPattern,
    PipelineResult,
    RecognitionLevel,
    RecognitionRequest,
    TextCandidate,
    TextObservation,
)
from .vocabulary import BOOK_DOMAIN_WORDS, get_vocabulary

__all__ = [
    # Types
    "RecognitionLevel",
    "IdentifierPattern",
    "TextCandidate",
    "TextObservation",
    "RecognitionRequest",
    "IdentifierCandidate",
    "CorrectionResult",
    "PipelineResult",
    # Errors
    "BookScanError",
    "InvalidImageError",
    "RecognitionFailedError",
    # Configuration
    "Config",
    "BookScanConfig",
    "EngineConfig",
    "RecognitionConfig",
    "ExtractionConfig",
    "CorrectionConfig",
    "load_config",
    "get_default_config",
    # Vocabulary
    "BOOK_DOMAIN_WORDS",
    "get_vocabulary",
    # Recognition
    "OCREngine",
    "create_engine",
    "try_get_engine",
    "TextRecognizer",
    # ISBN
    "ISBNExtractor",
    "extract_isbn",
    "calculate_isbn13_check_digit",
    "calculate_isbn10_check_digit",
    "validate_isbn13",
    "validate_isbn10",
    "convert_isbn10_to_13",
    "normalize_isbn",
    "format_isbn13",
    "find_isbn_candidates",
    # Correction
    "CorrectionService",
    "OpenAICorrectionService",
    "try_get_correction_service",
    "TextCorrector",
    # Pipeline
    "BookScanPipeline",
]
