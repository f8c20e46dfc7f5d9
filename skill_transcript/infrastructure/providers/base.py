from __future__ import annotations

import asyncio
from abc import abstractmethod
from dataclasses import replace
from pathlib import Path
from typing import Any

import aiofiles
import httpx

from ...domain.entities.chunk import ChunkResult
from ...domain.errors import ConfigurationError, ProviderError, TranscriptionTimeoutError
from ...domain.ports.transcriber_port import TranscribeOptions, TranscriberPort
from ...jobs.logger import JobLogger, NullLogger

DEFAULT_TIMEOUT_SECONDS = 300.0


class HttpTranscriber(TranscriberPort):
    """Shared plumbing for providers reached over HTTP.

    The adapter borrows ``client`` when one is given and otherwise owns an
    ``httpx.AsyncClient`` that ``aclose`` releases.
    """

    env_var: str = ""

    def __init__(
        self,
        api_key: str | None,
        *,
        base_url: str,
        client: httpx.AsyncClient | None = None,
        logger: JobLogger | None = None,
    ):
        if not api_key:
            raise ConfigurationError(f"{self.env_var} environment variable is required")
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.logger = logger or NullLogger()
        self._owns_client = client is None
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=DEFAULT_TIMEOUT_SECONDS)
        return self._client

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def transcribe(self, audio: bytes | Path, options: TranscribeOptions) -> ChunkResult:
        if isinstance(audio, Path):
            options = replace(options, filename=audio.name)
            audio = await read_bytes(audio)

        self.logger.write(f"[{self.capability.label}] Transcribing {options.filename} ({len(audio)} bytes)")
        data = await self._post(audio, options)
        result = self.decode(data, options)
        self.logger.write(f"[{self.capability.label}] Transcription complete: {len(result.segments)} segments")
        return result

    async def _post(self, audio: bytes, options: TranscribeOptions) -> dict[str, Any]:
        timeout = self.timeout_for(options)
        request = self.build_request(audio, options)
        try:
            async with asyncio.timeout(timeout):
                response = await self.client.send(request)
        except (httpx.TimeoutException, TimeoutError) as exc:
            raise TranscriptionTimeoutError(
                f"{self.capability.label} did not respond within {timeout:g}s"
            ) from exc
        except httpx.HTTPError as exc:
            raise ProviderError(f"{self.capability.label} request failed: {exc}") from exc

        if response.status_code >= 400:
            raise ProviderError(
                f"{self.capability.label} transcription failed ({response.status_code}): {response.text}",
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as exc:
            raise ProviderError(f"{self.capability.label} returned invalid JSON") from exc

    def timeout_for(self, options: TranscribeOptions) -> float:
        return options.timeout or DEFAULT_TIMEOUT_SECONDS

    def model_for(self, options: TranscribeOptions) -> str:
        return options.model or self.capability.default_model

    @abstractmethod
    def build_request(self, audio: bytes, options: TranscribeOptions) -> httpx.Request:
        raise NotImplementedError

    @abstractmethod
    def decode(self, data: dict[str, Any], options: TranscribeOptions) -> ChunkResult:
        raise NotImplementedError


async def read_bytes(path: Path) -> bytes:
    async with aiofiles.open(path, "rb") as f:
        return await f.read()


def as_float(value: Any, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default
