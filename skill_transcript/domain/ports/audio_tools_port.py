from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path


class AudioToolsPort(ABC):
    @abstractmethod
    def probe_duration(self, path: Path) -> float:
        raise NotImplementedError

    @abstractmethod
    def extract_segment(self, path: Path, start: float, end: float) -> bytes:
        raise NotImplementedError

    @abstractmethod
    def compress(self, path: Path, out_path: Path, *, bitrate: str) -> Path:
        raise NotImplementedError
