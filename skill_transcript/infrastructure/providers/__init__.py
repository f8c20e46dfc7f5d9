from __future__ import annotations

from typing import assert_never

import httpx

from ...domain.entities.request import ProviderName
from ...jobs.logger import JobLogger
from ...settings import Settings
from .base import HttpTranscriber
from .elevenlabs_adapter import ElevenLabsTranscriber
from .gemini_adapter import GeminiTranscriber
from .openai_adapter import OpenAITranscriber


def build_transcriber(
    provider: ProviderName,
    settings: Settings,
    *,
    client: httpx.AsyncClient | None = None,
    logger: JobLogger | None = None,
) -> HttpTranscriber:
    match provider:
        case ProviderName.ELEVENLABS:
            return ElevenLabsTranscriber(
                settings.ELEVENLABS_API_KEY,
                base_url=settings.ELEVENLABS_BASE_URL,
                client=client,
                logger=logger,
            )
        case ProviderName.OPENAI:
            return OpenAITranscriber(
                settings.OPENAI_API_KEY,
                base_url=settings.OPENAI_BASE_URL,
                client=client,
                logger=logger,
            )
        case ProviderName.GEMINI:
            return GeminiTranscriber(
                settings.GOOGLE_API_KEY,
                base_url=settings.GEMINI_BASE_URL,
                client=client,
                logger=logger,
            )
        case _:
            assert_never(provider)


__all__ = [
    "ElevenLabsTranscriber",
    "GeminiTranscriber",
    "HttpTranscriber",
    "OpenAITranscriber",
    "build_transcriber",
]
