from __future__ import annotations

from pathlib import Path

from ..domain.entities.chunk import AudioChunk
from ..domain.ports.audio_tools_port import AudioToolsPort

DEFAULT_CHUNK_SECONDS = 600.0
DEFAULT_OVERLAP_SECONDS = 5.0

# Float noise from repeated subtraction must not produce a sliver chunk at the end.
_EPSILON = 1e-6


def split(
    source_duration: float,
    target_chunk_seconds: float = DEFAULT_CHUNK_SECONDS,
    overlap_seconds: float = DEFAULT_OVERLAP_SECONDS,
) -> list[AudioChunk]:
    """Tile ``[0, source_duration]`` with windows that overlap by ``overlap_seconds``.

    Each chunk starts ``overlap_seconds`` before the previous one ends and the
    last chunk ends exactly at ``source_duration``. A source no longer than the
    window yields a single chunk.
    """
    if target_chunk_seconds <= 0:
        raise ValueError("target_chunk_seconds must be positive")
    if overlap_seconds < 0:
        raise ValueError("overlap_seconds must not be negative")
    if overlap_seconds >= target_chunk_seconds:
        raise ValueError("overlap_seconds must be smaller than target_chunk_seconds")
    if source_duration < 0:
        raise ValueError("source_duration must not be negative")

    chunks: list[AudioChunk] = []
    start = 0.0
    while True:
        end = min(start + target_chunk_seconds, source_duration)
        if source_duration - end <= _EPSILON:
            end = source_duration
        overlap = chunks[-1].end - start if chunks else 0.0
        chunks.append(AudioChunk(index=len(chunks), start=start, end=end, overlap=overlap))
        if end >= source_duration:
            break
        start = end - overlap_seconds
    return chunks


def plan_chunks(
    path: Path,
    audio_tools: AudioToolsPort,
    *,
    target_chunk_seconds: float = DEFAULT_CHUNK_SECONDS,
    overlap_seconds: float = DEFAULT_OVERLAP_SECONDS,
) -> tuple[float, list[AudioChunk]]:
    duration = audio_tools.probe_duration(path)
    return duration, split(duration, target_chunk_seconds, overlap_seconds)
