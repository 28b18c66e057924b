"""Generative text correction service boundary.

A correction service accepts a single prompt and returns a single text
response. Availability depends on the runtime environment (installed SDK,
API credentials, configuration), so services are obtained through
``try_get_correction_service`` which returns ``None`` when correction is not
possible here.
"""

import logging
import os
from typing import Optional, Protocol

from .config_loader import CorrectionConfig

logger = logging.getLogger(__name__)


class CorrectionService(Protocol):
    """Interface implemented by text correction backends."""

    name: str

    async def respond(self, prompt: str) -> str:
        """Return the model response for ``prompt``.

        Raises:
            Exception: Any request or response failure.
        """
        ...


class OpenAICorrectionService:
    """Correction service backed by the OpenAI Responses API.

    Args:
        client: ``openai.AsyncOpenAI`` client.
        model: Model name.
    """

    name = "openai"

    def __init__(self, client, model: str):
        self.client = client
        self.model = model

    @classmethod
    def from_config(cls, config: CorrectionConfig) -> "OpenAICorrectionService":
        """Create a service with an AsyncOpenAI client.

        Raises:
            ImportError: If the openai package is not installed.
            KeyError: If the API key environment variable is not set.
        """
        from openai import AsyncOpenAI

        api_key = os.environ[config.api_key_env]
        client = AsyncOpenAI(api_key=api_key, timeout=config.timeout_s)
        return cls(client, config.model)

    async def respond(self, prompt: str) -> str:
        resp = await self.client.responses.create(model=self.model, input=prompt)
        content = getattr(resp, "output_text", None)
        if not isinstance(content, str):
            raise ValueError(f"Malformed response: output_text={content!r}")
        return content


def try_get_correction_service(config: CorrectionConfig) -> Optional[CorrectionService]:
    """Return a correction service if one is usable in this environment.

    Args:
        config: Correction configuration.

    Returns:
        Service instance, or None when correction is disabled, the provider
        is unknown, its SDK is missing or no API key is configured.
    """
    if not config.enabled:
        logger.info("Text correction disabled by configuration")
        return None

    if config.provider != "openai":
        logger.warning(f"Unknown correction provider '{config.provider}'")
        return None

    if not os.environ.get(config.api_key_env):
        logger.info(f"Text correction unavailable: {config.api_key_env} not set")
        return None

    try:
        service = OpenAICorrectionService.from_config(config)
    except ImportError:
        logger.info("Text correction unavailable: openai package not installed")
        return None

    logger.info(f"Text correction enabled: provider={service.name}, model={config.model}")
    return service
