from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from pydantic import BaseModel, Field

from .transcript import Segment


@dataclass(frozen=True)
class AudioChunk:
    index: int
    start: float
    end: float
    overlap: float = 0.0

    @property
    def duration(self) -> float:
        return self.end - self.start


class ChunkResult(BaseModel):
    """Segments for one chunk, with times relative to the chunk's own start."""

    index: int = 0
    segments: List[Segment] = Field(default_factory=list)
    text: str = ""
    language: Optional[str] = None
    duration: Optional[float] = None
