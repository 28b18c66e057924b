"""Unit tests for generative text correction."""

import asyncio
import logging
from unittest.mock import AsyncMock, Mock

import pytest

from src.bookscan.corrector import CORRECTION_PROMPT_TEMPLATE, TextCorrector, build_prompt

RAW_TEXT = "ISBN978-4-OO-310101-8\n岩波書居\n2021.3.10"


@pytest.fixture
def service():
    """Provide a mock correction service."""
    service = Mock()
    service.name = "mock"
    service.respond = AsyncMock(
        return_value="  ISBN978-4-00-310101-8\n岩波書店\n2021年03月10日\n"
    )
    return service


class TestBuildPrompt:
    """Test correction prompt construction."""

    def test_embeds_text(self):
        prompt = build_prompt(RAW_TEXT)

        assert RAW_TEXT in prompt
        assert prompt == CORRECTION_PROMPT_TEMPLATE.format(raw_text=RAW_TEXT)

    def test_instructions(self):
        prompt = build_prompt("x")

        assert "ISBN" in prompt  # Identifier digit confusions
        assert "出版社名" in prompt  # Name/publisher misspellings
        assert "YYYY年MM月DD日" in prompt  # Canonical date form
        assert "価格" in prompt  # Price notation
        assert "説明不要" in prompt  # Corrected text only

    def test_braces_in_text(self):
        """Test OCR text containing braces does not break formatting."""
        assert "{price}" in build_prompt("{price}")


class TestCorrect:
    """Test TextCorrector.correct."""

    def test_success_trims_whitespace(self, service):
        corrector = TextCorrector(service)

        text = asyncio.run(corrector.correct(RAW_TEXT))

        assert text == "ISBN978-4-00-310101-8\n岩波書店\n2021年03月10日"
        service.respond.assert_awaited_once_with(build_prompt(RAW_TEXT))

    def test_service_exception_returns_original(self, service, caplog):
        """Test a failing service degrades to the uncorrected text."""
        service.respond.side_effect = ConnectionError("service unavailable")
        corrector = TextCorrector(service)

        with caplog.at_level(logging.WARNING):
            text = asyncio.run(corrector.correct(RAW_TEXT))

        assert text == RAW_TEXT
        assert "service unavailable" in caplog.text

    def test_malformed_response_returns_original(self, service):
        service.respond.return_value = None
        corrector = TextCorrector(service)

        assert asyncio.run(corrector.correct(RAW_TEXT)) == RAW_TEXT

    def test_blank_response_returns_original(self, service):
        service.respond.return_value = " \n "
        corrector = TextCorrector(service)

        assert asyncio.run(corrector.correct(RAW_TEXT)) == RAW_TEXT

    def test_empty_input_skips_service(self, service):
        corrector = TextCorrector(service)

        assert asyncio.run(corrector.correct("")) == ""
        service.respond.assert_not_awaited()


class TestCorrectWithDetails:
    """Test detailed correction results."""

    def test_applied(self, service):
        result = asyncio.run(TextCorrector(service).correct_with_details(RAW_TEXT))

        assert result.correction_applied is True
        assert result.original_text == RAW_TEXT
        assert result.error is None

    def test_failed(self, service):
        service.respond.side_effect = TimeoutError("timed out")

        result = asyncio.run(TextCorrector(service).correct_with_details(RAW_TEXT))

        assert result.correction_applied is False
        assert result.corrected_text == RAW_TEXT
        assert result.error == "timed out"
