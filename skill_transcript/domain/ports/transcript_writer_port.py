from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path


class TranscriptWriterPort(ABC):
    @abstractmethod
    async def write(self, path: Path, content: str) -> Path:
        raise NotImplementedError
