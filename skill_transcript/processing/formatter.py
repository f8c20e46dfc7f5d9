from __future__ import annotations

from typing import assert_never

from ..domain.entities.request import OutputFormat
from ..domain.entities.transcript import Segment, Transcript
from ..domain.errors import UnsupportedFormatError


def format_timestamp(seconds: float, *, decimal: str = ".") -> str:
    if seconds < 0:
        seconds = 0
    ms_total = int(round(seconds * 1000.0))
    hours = ms_total // 3_600_000
    minutes = (ms_total % 3_600_000) // 60_000
    secs = (ms_total % 60_000) // 1000
    ms = ms_total % 1000
    return f"{hours:02d}:{minutes:02d}:{secs:02d}{decimal}{ms:03d}"


def _cue_text(seg: Segment) -> str:
    text = seg.text.strip()
    if seg.speaker:
        return f"<v {seg.speaker}>{text}"
    return text


def _printable(segments: list[Segment]) -> list[Segment]:
    return [s for s in segments if s.text.strip()]


def _cues(transcript: Transcript) -> list[Segment]:
    segments = _printable(transcript.segments)
    if segments or not transcript.text.strip():
        return segments
    return [Segment(start=0.0, end=transcript.duration, text=transcript.text)]


def segments_to_text(transcript: Transcript) -> str:
    segments = _printable(transcript.segments)
    if not segments:
        return transcript.text.strip() + "\n"

    parts: list[str] = []
    current_speaker: str | None = None
    for seg in segments:
        if seg.speaker and seg.speaker != current_speaker:
            current_speaker = seg.speaker
            parts.append(f"\n[{current_speaker}]\n")
        elif parts and not parts[-1].endswith("\n"):
            parts.append(" ")
        parts.append(seg.text.strip())
    return "".join(parts).strip() + "\n"


def segments_to_srt(transcript: Transcript) -> str:
    segments = _cues(transcript)

    lines: list[str] = []
    for idx, seg in enumerate(segments, start=1):
        start = format_timestamp(seg.start, decimal=",")
        end = format_timestamp(seg.end, decimal=",")
        lines.append(str(idx))
        lines.append(f"{start} --> {end}")
        lines.append(_cue_text(seg))
        lines.append("")
    return "\n".join(lines).rstrip() + "\n"


def segments_to_vtt(transcript: Transcript) -> str:
    segments = _cues(transcript)

    lines: list[str] = ["WEBVTT", ""]
    for seg in segments:
        start = format_timestamp(seg.start)
        end = format_timestamp(seg.end)
        lines.append(f"{start} --> {end}")
        lines.append(_cue_text(seg))
        lines.append("")
    return "\n".join(lines).rstrip() + "\n"


def transcript_to_json(transcript: Transcript) -> str:
    return transcript.model_dump_json(indent=2) + "\n"


def parse_transcript_json(raw: str) -> Transcript:
    return Transcript.model_validate_json(raw)


def resolve_format(fmt: OutputFormat | str) -> OutputFormat:
    if isinstance(fmt, OutputFormat):
        return fmt
    try:
        return OutputFormat(str(fmt).strip().lower())
    except ValueError:
        raise UnsupportedFormatError(fmt) from None


def format_transcript(transcript: Transcript, fmt: OutputFormat | str) -> str:
    output_format = resolve_format(fmt)
    match output_format:
        case OutputFormat.TEXT:
            return segments_to_text(transcript)
        case OutputFormat.SRT:
            return segments_to_srt(transcript)
        case OutputFormat.VTT:
            return segments_to_vtt(transcript)
        case OutputFormat.JSON:
            return transcript_to_json(transcript)
        case _:
            assert_never(output_format)
