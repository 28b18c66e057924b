"""Generative correction of recognized book text.

OCR on covers and colophons confuses visually similar characters (0/O,
1/I/l), misreads author and publisher names and produces inconsistent date
and price notation. The corrector sends the raw text to a generative
correction service with a fixed instruction prompt and substitutes the
response only when the call succeeds. Failures are logged and the original
text is returned; the corrector never raises.

ISBN extraction is not performed here; callers run the extractor on the
returned text.

Example:
    >>> corrector = TextCorrector(service)
    >>> text = await corrector.correct("ISBN978-4-OO-310101-8\\n岩波書店")
"""

import logging
from typing import Optional

from .config_loader import CorrectionConfig
from .correction_service import CorrectionService
from .types import CorrectionResult

logger = logging.getLogger(__name__)

CORRECTION_PROMPT_TEMPLATE = """\
以下は本の表紙や奥付からOCRで読み取ったテキストです。
OCRの誤認識を修正し、書籍情報として整形してください。

特に注意する点：
- ISBNの数字の誤り（0とO、1とI/lなど）を修正
- 著者名、出版社名の誤字を修正
- 日付形式の正規化（YYYY年MM月DD日）
- 価格表記の正規化

入力テキスト:
{raw_text}

修正後のテキストのみを出力してください（説明不要）:"""


def build_prompt(raw_text: str) -> str:
    """Embed recognized text in the correction instruction."""
    return CORRECTION_PROMPT_TEMPLATE.format(raw_text=raw_text)


class TextCorrector:
    """Corrects recognized text through a generative correction service.

    Args:
        service: Correction service implementation.
        config: Correction configuration (kept for diagnostics).

    Attributes:
        service: Correction service implementation.
    """

    def __init__(
        self, service: CorrectionService, config: Optional[CorrectionConfig] = None
    ):
        self.service = service
        self.config = config or CorrectionConfig()

    async def correct(self, raw_text: str) -> str:
        """Return corrected text, or ``raw_text`` unchanged on any failure.

        Args:
            raw_text: Text produced by the recognition adapter.

        Returns:
            Service response with surrounding whitespace removed.
        """
        result = await self.correct_with_details(raw_text)
        return result.corrected_text

    async def correct_with_details(self, raw_text: str) -> CorrectionResult:
        """Correct text and report whether the service response was used.

        Args:
            raw_text: Text produced by the recognition adapter.

        Returns:
            CorrectionResult; ``error`` is set when the service failed.
        """
        if not raw_text.strip():
            return CorrectionResult(
                corrected_text=raw_text,
                original_text=raw_text,
                correction_applied=False,
            )

        try:
            response = await self.service.respond(build_prompt(raw_text))
            if not isinstance(response, str):
                raise TypeError(f"Expected str response, got {type(response).__name__}")

            corrected = response.strip()
            if not corrected:
                raise ValueError("Empty response")

        except Exception as e:
            logger.warning(
                f"Text correction failed ({self.service.name}), "
                f"using uncorrected text: {e}"
            )
            return CorrectionResult(
                corrected_text=raw_text,
                original_text=raw_text,
                correction_applied=False,
                error=str(e),
            )

        logger.debug(
            f"Text corrected by {self.service.name}: "
            f"{len(raw_text)} -> {len(corrected)} characters"
        )
        return CorrectionResult(
            corrected_text=corrected,
            original_text=raw_text,
            correction_applied=True,
        )
