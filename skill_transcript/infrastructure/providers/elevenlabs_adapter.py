from __future__ import annotations

from typing import Any

import httpx

from ...domain.entities.capability import ELEVENLABS
from ...domain.entities.chunk import ChunkResult
from ...domain.entities.transcript import Segment
from ...domain.ports.transcriber_port import TranscribeOptions
from .base import HttpTranscriber, as_float

WORD_GAP_SECONDS = 1.0
_SENTENCE_END = (".", "?", "!")


def group_words(words: list[dict[str, Any]], *, gap: float = WORD_GAP_SECONDS) -> list[Segment]:
    """Group word timings into segments.

    A new segment starts on a speaker change, after a pause longer than
    ``gap`` seconds, or after a word ending a sentence.
    """
    segments: list[Segment] = []
    current: dict[str, Any] | None = None

    for word in words:
        if word.get("type", "word") not in ("word", "audio_event"):
            continue
        token = (word.get("text") or word.get("word") or "").strip()
        if not token:
            continue
        start = as_float(word.get("start"))
        end = as_float(word.get("end"), start)
        speaker = word.get("speaker_id") or word.get("speaker")

        if current is not None and (
            speaker != current["speaker"]
            or start - current["end"] > gap
            or current["text"].endswith(_SENTENCE_END)
        ):
            segments.append(Segment(**current))
            current = None

        if current is None:
            current = {"start": start, "end": end, "text": token, "speaker": speaker}
        else:
            current["end"] = max(current["end"], end)
            current["text"] = f"{current['text']} {token}"

    if current is not None:
        segments.append(Segment(**current))
    return segments


class ElevenLabsTranscriber(HttpTranscriber):
    capability = ELEVENLABS
    env_var = "ELEVENLABS_API_KEY"

    def build_request(self, audio: bytes, options: TranscribeOptions) -> httpx.Request:
        data: dict[str, Any] = {"model_id": self.model_for(options)}
        if options.language:
            data["language_code"] = options.language
        if options.diarize:
            data["diarize"] = "true"
            data["num_speakers"] = str(options.max_speakers or self.capability.max_speakers)
        # Segments are built from word timings, so they are always requested.
        data["timestamps_granularity"] = "word"

        return self.client.build_request(
            "POST",
            f"{self.base_url}/speech-to-text",
            headers={"xi-api-key": self.api_key},
            data=data,
            files={"file": (options.filename, audio)},
            timeout=self.timeout_for(options),
        )

    def decode(self, data: dict[str, Any], options: TranscribeOptions) -> ChunkResult:
        text = (data.get("text") or "").strip()
        segments = group_words(data.get("words") or [])
        if not options.diarize:
            segments = [s.model_copy(update={"speaker": None}) for s in segments]
        if not segments and text:
            segments = [Segment(start=0.0, end=options.duration or 0.0, text=text)]

        return ChunkResult(
            index=options.index,
            segments=segments,
            text=text,
            language=data.get("language_code"),
            duration=options.duration,
        )
