from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ProviderName(str, Enum):
    ELEVENLABS = "elevenlabs"
    OPENAI = "openai"
    GEMINI = "gemini"


class OutputFormat(str, Enum):
    TEXT = "text"
    SRT = "srt"
    VTT = "vtt"
    JSON = "json"

    @property
    def extension(self) -> str:
        if self is OutputFormat.TEXT:
            return ".txt"
        return f".{self.value}"


class TranscriptionRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    input_path: Path
    provider: ProviderName
    language: Optional[str] = None
    model: Optional[str] = None
    diarize: bool = False
    timestamps: bool = False
    max_speakers: Optional[int] = Field(default=None, ge=1)
    output_format: OutputFormat = OutputFormat.TEXT
    output_path: Optional[Path] = None

    def resolved_output_path(self) -> Path:
        if self.output_path is not None:
            return self.output_path
        return self.input_path.with_suffix(self.output_format.extension)
