from __future__ import annotations

import re
from difflib import SequenceMatcher
from typing import Callable, Optional, Sequence

from ..domain.entities.chunk import AudioChunk, ChunkResult
from ..domain.entities.transcript import Segment, Transcript
from ..domain.errors import IncompleteTranscriptionError

SimilarityFn = Callable[[str, str], float]

DEFAULT_SIMILARITY_THRESHOLD = 0.9

# Providers report boundary timestamps with some jitter; merged segments ending
# this far before the overlap window are still compared.
_WINDOW_SLACK_SECONDS = 1.0

_WS = re.compile(r"\s+")


def normalize_text(text: str) -> str:
    return _WS.sub(" ", (text or "").casefold()).strip()


def sequence_similarity(a: str, b: str) -> float:
    if not a and not b:
        return 1.0
    return SequenceMatcher(None, a, b, autojunk=False).ratio()


def exact_similarity(a: str, b: str) -> float:
    return 1.0 if a == b else 0.0


class TranscriptMerger:
    """Merges chunk results into one transcript, strictly in chunk order.

    Results may be added in any order. A result whose predecessor has not
    been merged yet is buffered until it can be; the buffer belongs to this
    merger alone and lives only as long as the job does.
    """

    def __init__(
        self,
        chunks: Sequence[AudioChunk],
        *,
        similarity: SimilarityFn = sequence_similarity,
        threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
    ):
        if not chunks:
            raise ValueError("at least one chunk is required")
        for expected, chunk in enumerate(chunks):
            if chunk.index != expected:
                raise ValueError(f"chunk indices must be contiguous from 0, got {chunk.index} at {expected}")
        self.chunks = list(chunks)
        self.similarity = similarity
        self.threshold = threshold
        self.duplicates_dropped = 0
        self._pending: dict[int, ChunkResult] = {}
        self._next = 0
        self._segments: list[Segment] = []
        # Position in _segments where the most recently merged chunk begins.
        self._previous_from = 0
        self._language: Optional[str] = None

    @property
    def merged_count(self) -> int:
        return self._next

    def add(self, result: ChunkResult) -> None:
        if not 0 <= result.index < len(self.chunks):
            raise ValueError(f"result for unknown chunk {result.index}")
        if result.index < self._next or result.index in self._pending:
            raise ValueError(f"duplicate result for chunk {result.index}")

        self._pending[result.index] = result
        while self._next in self._pending:
            self._merge_one(self._pending.pop(self._next))
            self._next += 1

    def finish(self, *, duration: float | None = None) -> Transcript:
        if self._next < len(self.chunks):
            missing = [i for i in range(self._next, len(self.chunks)) if i not in self._pending]
            self._pending.clear()
            self._segments.clear()
            raise IncompleteTranscriptionError(missing)

        segments = sorted(self._segments, key=lambda s: s.start)
        total = duration if duration is not None else self.chunks[-1].end
        if not total and segments:
            total = max(s.end for s in segments)
        return Transcript(
            text=" ".join(s.text for s in segments).strip(),
            segments=segments,
            language=self._language,
            duration=total,
        )

    def _merge_one(self, result: ChunkResult) -> None:
        chunk = self.chunks[result.index]
        if self._language is None and result.language:
            self._language = result.language

        segments = result.segments
        if not segments and result.text.strip():
            segments = [Segment(start=0.0, end=chunk.duration, text=result.text.strip())]

        previous = self.chunks[chunk.index - 1] if chunk.index > 0 else None
        earlier = len(self._segments)
        for seg in segments:
            if not seg.text.strip():
                continue
            shifted = seg.shifted(chunk.start)
            if previous is not None and shifted.start < previous.end and self._is_duplicate(shifted, chunk.start, earlier):
                self.duplicates_dropped += 1
                continue
            self._segments.append(shifted)
        self._previous_from = earlier

    def _is_duplicate(self, candidate: Segment, window_start: float, earlier: int) -> bool:
        # Adapter output is not guaranteed to be in time order; check every
        # segment of the previous chunk.
        text = normalize_text(candidate.text)
        for pos in range(self._previous_from, earlier):
            merged = self._segments[pos]
            if merged.end < window_start - _WINDOW_SLACK_SECONDS:
                continue
            if self.similarity(text, normalize_text(merged.text)) >= self.threshold:
                return True
        return False


def merge(
    ordered_results: Sequence[ChunkResult | None],
    chunks: Sequence[AudioChunk],
    *,
    similarity: SimilarityFn = sequence_similarity,
    threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
    duration: float | None = None,
) -> Transcript:
    if len(ordered_results) > len(chunks):
        raise ValueError(f"got {len(ordered_results)} chunk results for {len(chunks)} chunks")
    merger = TranscriptMerger(chunks, similarity=similarity, threshold=threshold)
    missing = [i for i in range(len(chunks)) if i >= len(ordered_results) or ordered_results[i] is None]
    if missing:
        raise IncompleteTranscriptionError(missing)
    for index, result in enumerate(ordered_results):
        if result.index != index:
            result = result.model_copy(update={"index": index})
        merger.add(result)
    return merger.finish(duration=duration)
