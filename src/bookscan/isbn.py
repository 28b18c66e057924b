"""ISBN extraction, check digit calculation and ISBN-10 to ISBN-13 conversion.

Recognized text from covers and colophons is noisy: the ISBN may be split by
hyphens or spaces, sit next to prices and dates, or appear only in its
10-digit form on older books. The extractor scans the text with an ordered
list of patterns and commits to the first acceptable match:

1. ISBN-13 with optional separators between the hyphenation groups
   (prefix, registration group, registrant, publication, check digit)
2. ISBN-13 written as 13 consecutive digits
3. ISBN-10, converted to ISBN-13 with a recomputed check digit

This is a heuristic scan, not a parse: candidates are not scored against each
other.

References:
    - ISO 2108:2017 - International Standard Book Number (ISBN)
    - https://www.isbn-international.org/content/isbn-users-manual

Example:
    >>> extract_isbn("ISBN978-4-00-310101-8 C0198 ¥720E")
    '9784003101018'
    >>> extract_isbn("ISBN4-00-310101-4")
    '9784003101018'
    >>> extract_isbn("定価 本体720円+税") is None
    True
"""

import logging
import re
import unicodedata
from typing import List, Optional

from .config_loader import ExtractionConfig
from .types import IdentifierCandidate, IdentifierPattern

logger = logging.getLogger(__name__)

# [0-9] rather than \d: Python's \d also matches non-ASCII digits
ISBN13_SEPARATED_PATTERN = re.compile(
    r"97[89][-\s]?[0-9][-\s]?[0-9]{2,5}[-\s]?[0-9]{2,7}[-\s]?[0-9]"
)
ISBN13_COMPACT_PATTERN = re.compile(r"97[89][0-9]{10}")
ISBN10_PATTERN = re.compile(r"[0-9][-\s]?[0-9]{2,5}[-\s]?[0-9]{2,7}[-\s]?[0-9X]")

ISBN13_PATTERNS = (
    (IdentifierPattern.ISBN13_SEPARATED, ISBN13_SEPARATED_PATTERN),
    (IdentifierPattern.ISBN13_COMPACT, ISBN13_COMPACT_PATTERN),
)

ISBN10_TO_13_PREFIX = "978"


def calculate_isbn13_check_digit(first_twelve: str) -> int:
    """Calculate the ISBN-13 check digit for the first 12 digits.

    Digits are weighted 1, 3, 1, 3, ... starting from the first digit; the
    check digit is ``(10 - (sum mod 10)) mod 10``.

    Args:
        first_twelve: First 12 digits of an ISBN-13.

    Returns:
        Check digit (0-9)

    Raises:
        ValueError: If input is not exactly 12 ASCII digits

    Example:
        >>> calculate_isbn13_check_digit("978400310101")
        8
    """
    if len(first_twelve) != 12:
        raise ValueError(f"Expected 12 digits, got {len(first_twelve)}")
    if not (first_twelve.isascii() and first_twelve.isdigit()):
        raise ValueError(f"Expected only digits, got: {first_twelve}")

    total = sum(
        int(digit) * (1 if pos % 2 == 0 else 3)
        for pos, digit in enumerate(first_twelve)
    )
    return (10 - (total % 10)) % 10


def validate_isbn13(isbn: str) -> bool:
    """Check that a string is a 13-digit ISBN with a correct check digit.

    Example:
        >>> validate_isbn13("9784003101018")
        True
        >>> validate_isbn13("9784003101019")
        False
    """
    if len(isbn) != 13 or not (isbn.isascii() and isbn.isdigit()):
        return False
    if not isbn.startswith(("978", "979")):
        return False
    return calculate_isbn13_check_digit(isbn[:12]) == int(isbn[12])


def calculate_isbn10_check_digit(first_nine: str) -> str:
    """Calculate the ISBN-10 check character for the first 9 digits.

    Digits are weighted 10 down to 2; the check value is
    ``(11 - (sum mod 11)) mod 11`` with 10 written as "X".

    Raises:
        ValueError: If input is not exactly 9 ASCII digits

    Example:
        >>> calculate_isbn10_check_digit("400310101")
        '4'
    """
    if len(first_nine) != 9 or not (first_nine.isascii() and first_nine.isdigit()):
        raise ValueError(f"Expected 9 digits, got: {first_nine!r}")

    total = sum(int(digit) * (10 - pos) for pos, digit in enumerate(first_nine))
    check = (11 - (total % 11)) % 11
    return "X" if check == 10 else str(check)


def validate_isbn10(isbn: str) -> bool:
    """Check that a string is a 10-character ISBN with a correct check character."""
    if len(isbn) != 10:
        return False
    body = isbn[:9]
    if not (body.isascii() and body.isdigit()):
        return False
    return calculate_isbn10_check_digit(body) == isbn[9]


def normalize_isbn(text: str) -> str:
    """Remove separators from an ISBN, keeping digits and the "X" check character.

    Example:
        >>> normalize_isbn("4-00-310101-x")
        '400310101X'
    """
    text = unicodedata.normalize("NFKC", text).upper()
    return "".join(c for c in text if (c.isascii() and c.isdigit()) or c == "X")


def convert_isbn10_to_13(isbn10: str) -> Optional[str]:
    """Convert an ISBN-10 to ISBN-13.

    The "978" prefix is prepended to the first 9 characters and a new ISBN-13
    check digit is computed; the ISBN-10 check character is discarded.

    Args:
        isbn10: 10-character ISBN without separators.

    Returns:
        13-digit ISBN, or None if the input is not 10 characters or its first
        9 characters are not all digits.

    Example:
        >>> convert_isbn10_to_13("412345678X")
        '9784123456784'
    """
    if len(isbn10) != 10:
        return None

    body = isbn10[:9]
    if not (body.isascii() and body.isdigit()):
        return None

    first_twelve = ISBN10_TO_13_PREFIX + body
    return first_twelve + str(calculate_isbn13_check_digit(first_twelve))


def format_isbn13(isbn: str) -> str:
    """Format a 13-digit ISBN for display as prefix-body-check.

    Registration group boundaries depend on range tables, so only the
    fixed-width parts are separated.

    Example:
        >>> format_isbn13("9784003101018")
        '978-400310101-8'
    """
    if len(isbn) != 13:
        raise ValueError(f"Expected 13 digits, got {len(isbn)}")
    return f"{isbn[:3]}-{isbn[3:12]}-{isbn[12]}"


def find_isbn_candidates(text: str) -> List[IdentifierCandidate]:
    """List every pattern match in pattern order, for diagnostics.

    Offsets refer to the NFKC-normalized text.
    """
    text = unicodedata.normalize("NFKC", text)
    patterns = (*ISBN13_PATTERNS, (IdentifierPattern.ISBN10, ISBN10_PATTERN))

    candidates = []
    for kind, pattern in patterns:
        for match in pattern.finditer(text):
            candidates.append(
                IdentifierCandidate(
                    start=match.start(),
                    end=match.end(),
                    raw_text=match.group(),
                    pattern=kind,
                )
            )
    return candidates


def _first_candidate(
    text: str, kind: IdentifierPattern, pattern: "re.Pattern[str]"
) -> Optional[IdentifierCandidate]:
    match = pattern.search(text)
    if match is None:
        return None
    return IdentifierCandidate(
        start=match.start(), end=match.end(), raw_text=match.group(), pattern=kind
    )


def extract_isbn(text: str, verify_check_digits: bool = False) -> Optional[str]:
    """Extract a canonical 13-digit ISBN from recognized text.

    Patterns are tried in order and only the first match of each pattern is
    considered:

    1. Separator-tolerant ISBN-13: accepted if 13 digits remain after
       stripping separators.
    2. Compact ISBN-13 (13 consecutive digits), same acceptance test.
    3. ISBN-10 (final character may be "X"): accepted if 10 characters
       remain, then converted to ISBN-13.

    Full-width digits and hyphens are folded to ASCII before scanning.

    Args:
        text: Recognized (optionally corrected) text.
        verify_check_digits: Also require the matched ISBN-13 or ISBN-10 to
            carry a correct check digit.

    Returns:
        13-digit ISBN string, or None if no identifier was found.
    """
    if not text:
        return None

    text = unicodedata.normalize("NFKC", text)

    for kind, pattern in ISBN13_PATTERNS:
        candidate = _first_candidate(text, kind, pattern)
        if candidate is None:
            continue

        digits = "".join(c for c in candidate.raw_text if c.isdigit())
        if len(digits) != 13:
            logger.debug(
                f"Rejected {kind.value} match '{candidate.raw_text}': "
                f"{len(digits)} digits"
            )
            continue
        if verify_check_digits and not validate_isbn13(digits):
            logger.debug(f"Rejected {kind.value} match '{digits}': bad check digit")
            continue

        return digits

    candidate = _first_candidate(text, IdentifierPattern.ISBN10, ISBN10_PATTERN)
    if candidate is None:
        return None

    isbn10 = "".join(c for c in candidate.raw_text if c.isdigit() or c == "X")
    if len(isbn10) != 10:
        logger.debug(f"Rejected ISBN-10 match '{candidate.raw_text}': {len(isbn10)} chars")
        return None
    if verify_check_digits and not validate_isbn10(isbn10):
        logger.debug(f"Rejected ISBN-10 match '{isbn10}': bad check digit")
        return None

    return convert_isbn10_to_13(isbn10)


class ISBNExtractor:
    """Configured ISBN extractor.

    Args:
        config: Extraction configuration.
    """

    def __init__(self, config: Optional[ExtractionConfig] = None):
        self.config = config or ExtractionConfig()

    def extract(self, text: str) -> Optional[str]:
        """Extract a canonical ISBN-13 from text, or None if there is none."""
        isbn = extract_isbn(text, verify_check_digits=self.config.verify_check_digits)
        if isbn is None:
            logger.info("No ISBN found in recognized text")
        else:
            logger.info(f"Extracted ISBN {isbn}")
        return isbn
