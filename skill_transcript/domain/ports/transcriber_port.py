from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from pathlib import Path

from ..entities.capability import ProviderCapability
from ..entities.chunk import ChunkResult


@dataclass(frozen=True)
class TranscribeOptions:
    language: str | None = None
    model: str | None = None
    diarize: bool = False
    timestamps: bool = False
    max_speakers: int | None = None
    timeout: float | None = None
    filename: str = "audio.mp3"
    index: int = 0
    duration: float | None = None

    def for_chunk(self, index: int, *, filename: str, duration: float) -> "TranscribeOptions":
        return replace(self, index=index, filename=filename, duration=duration)


class TranscriberPort(ABC):
    capability: ProviderCapability

    @abstractmethod
    async def transcribe(self, audio: bytes | Path, options: TranscribeOptions) -> ChunkResult:
        raise NotImplementedError
