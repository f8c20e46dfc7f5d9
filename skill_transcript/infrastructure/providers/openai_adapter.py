from __future__ import annotations

from typing import Any

import httpx

from ...domain.entities.capability import OPENAI
from ...domain.entities.chunk import ChunkResult
from ...domain.entities.transcript import Segment
from ...domain.ports.transcriber_port import TranscribeOptions
from .base import HttpTranscriber, as_float


class OpenAITranscriber(HttpTranscriber):
    capability = OPENAI
    env_var = "OPENAI_API_KEY"

    def build_request(self, audio: bytes, options: TranscribeOptions) -> httpx.Request:
        data: dict[str, Any] = {
            "model": self.model_for(options),
            "response_format": "verbose_json",
        }
        if options.language:
            data["language"] = options.language
        if options.timestamps:
            data["timestamp_granularities[]"] = ["segment", "word"]

        return self.client.build_request(
            "POST",
            f"{self.base_url}/audio/transcriptions",
            headers={"Authorization": f"Bearer {self.api_key}"},
            data=data,
            files={"file": (options.filename, audio)},
            timeout=self.timeout_for(options),
        )

    def decode(self, data: dict[str, Any], options: TranscribeOptions) -> ChunkResult:
        segments: list[Segment] = []
        for seg in data.get("segments") or []:
            text = (seg.get("text") or "").strip()
            if not text:
                continue
            start = as_float(seg.get("start"))
            end = as_float(seg.get("end"), start)
            segments.append(Segment(start=start, end=max(end, start), text=text))

        text = (data.get("text") or "").strip()
        duration = data.get("duration")
        if not segments and text:
            segments.append(Segment(start=0.0, end=as_float(duration, options.duration or 0.0), text=text))

        return ChunkResult(
            index=options.index,
            segments=segments,
            text=text,
            language=data.get("language"),
            duration=as_float(duration) if duration is not None else options.duration,
        )
