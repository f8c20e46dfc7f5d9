from __future__ import annotations

import base64
import re
from pathlib import PurePath
from typing import Any

import httpx

from ...domain.entities.capability import GEMINI
from ...domain.entities.chunk import ChunkResult
from ...domain.entities.transcript import Segment
from ...domain.errors import ProviderError
from ...domain.ports.transcriber_port import TranscribeOptions
from .base import HttpTranscriber

MIME_TYPES = {
    "mp3": "audio/mpeg",
    "wav": "audio/wav",
    "ogg": "audio/ogg",
    "flac": "audio/flac",
    "m4a": "audio/mp4",
    "aac": "audio/aac",
    "mp4": "video/mp4",
    "webm": "video/webm",
}

MAX_OUTPUT_TOKENS = 8192

_LINE = re.compile(
    r"^\s*\[(?:(?P<h>\d{1,2}):)?(?P<m>\d{1,2}):(?P<s>\d{1,2}(?:\.\d+)?)\]\s*"
    r"(?:(?P<speaker>Speaker\s+[\w-]+)\s*:\s*)?(?P<text>.*)$"
)


def mime_type_for(filename: str) -> str:
    ext = PurePath(filename).suffix.lstrip(".").lower()
    return MIME_TYPES.get(ext, "audio/mpeg")


def build_prompt(options: TranscribeOptions) -> str:
    prompt = "Transcribe this audio accurately. "
    if options.language:
        prompt += f"The audio is in {options.language}. "
    if options.diarize:
        prompt += "Identify and label different speakers (Speaker A, Speaker B, etc.). "
        prompt += "Write one line per utterance as: [HH:MM:SS] Speaker X: text. "
    else:
        prompt += "Write one line per utterance as: [HH:MM:SS] text. "
    prompt += "Timestamps are relative to the start of this audio. "
    if options.timestamps:
        prompt += "Include timestamps for each segment in [HH:MM:SS] format. "
    prompt += "Provide only the transcription without any additional commentary."
    return prompt


def parse_timestamped_lines(raw: str, *, duration: float | None = None) -> list[Segment]:
    """Parse ``[HH:MM:SS] Speaker A: text`` lines into segments.

    Each segment ends where the next begins; the last one ends at
    ``duration`` when known. Lines without a timestamp continue the
    previous segment.
    """
    entries: list[dict[str, Any]] = []
    for line in (raw or "").splitlines():
        line = line.strip()
        if not line:
            continue
        m = _LINE.match(line)
        if m is None:
            if entries:
                entries[-1]["text"] = f"{entries[-1]['text']} {line}".strip()
            continue
        start = int(m.group("h") or 0) * 3600 + int(m.group("m")) * 60 + float(m.group("s"))
        entries.append({"start": start, "text": m.group("text").strip(), "speaker": m.group("speaker")})

    segments: list[Segment] = []
    for i, entry in enumerate(entries):
        if not entry["text"]:
            continue
        if i + 1 < len(entries):
            end = entries[i + 1]["start"]
        else:
            end = duration if duration is not None else entry["start"]
        segments.append(Segment(start=entry["start"], end=max(end, entry["start"]), text=entry["text"], speaker=entry["speaker"]))
    return segments


class GeminiTranscriber(HttpTranscriber):
    capability = GEMINI
    env_var = "GOOGLE_API_KEY"

    def build_request(self, audio: bytes, options: TranscribeOptions) -> httpx.Request:
        body = {
            "contents": [
                {
                    "parts": [
                        {
                            "inline_data": {
                                "mime_type": mime_type_for(options.filename),
                                "data": base64.b64encode(audio).decode("ascii"),
                            }
                        },
                        {"text": build_prompt(options)},
                    ]
                }
            ],
            "generationConfig": {"temperature": 0, "maxOutputTokens": MAX_OUTPUT_TOKENS},
        }
        return self.client.build_request(
            "POST",
            f"{self.base_url}/models/{self.model_for(options)}:generateContent",
            headers={"x-goog-api-key": self.api_key},
            json=body,
            timeout=self.timeout_for(options),
        )

    def decode(self, data: dict[str, Any], options: TranscribeOptions) -> ChunkResult:
        candidates = data.get("candidates") or []
        if not candidates:
            reason = (data.get("promptFeedback") or {}).get("blockReason")
            raise ProviderError(f"Gemini returned no candidates{f' ({reason})' if reason else ''}")

        parts = (candidates[0].get("content") or {}).get("parts") or []
        raw = "".join(p.get("text", "") for p in parts).strip()

        segments = parse_timestamped_lines(raw, duration=options.duration)
        if not segments and raw:
            segments = [Segment(start=0.0, end=options.duration or 0.0, text=raw)]

        return ChunkResult(
            index=options.index,
            segments=segments,
            text=" ".join(s.text for s in segments).strip(),
            language=options.language,
            duration=options.duration,
        )
