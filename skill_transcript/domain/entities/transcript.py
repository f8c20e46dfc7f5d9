from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, computed_field


class Segment(BaseModel):
    start: float
    end: float
    text: str
    speaker: Optional[str] = None

    def shifted(self, offset: float) -> "Segment":
        if not offset:
            return self.model_copy()
        return self.model_copy(update={"start": self.start + offset, "end": self.end + offset})


class Transcript(BaseModel):
    text: str
    segments: List[Segment] = Field(default_factory=list)
    language: Optional[str] = None
    duration: float = 0.0
    provider: Optional[str] = None
    model: Optional[str] = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def speakers(self) -> List[str]:
        seen: list[str] = []
        for seg in self.segments:
            if seg.speaker and seg.speaker not in seen:
                seen.append(seg.speaker)
        return seen

    @property
    def word_count(self) -> int:
        return len(self.text.split())
