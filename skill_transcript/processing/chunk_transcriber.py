from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Sequence

from ..domain.entities.chunk import AudioChunk, ChunkResult
from ..domain.entities.transcript import Transcript
from ..domain.errors import CapabilityError
from ..domain.ports.audio_tools_port import AudioToolsPort
from ..domain.ports.transcriber_port import TranscribeOptions, TranscriberPort
from ..jobs.logger import JobLogger, NullLogger
from ..jobs.paths import JobPaths
from .merge import TranscriptMerger
from .size_guard import fits, fmt_megabytes


class ChunkTranscriber:
    """Sends chunks of one source file to a provider and feeds the merger.

    With ``max_parallel == 1`` chunk N+1 is only extracted and sent once
    chunk N has been merged. Larger values keep up to that many requests in
    flight; the merger reorders the results. Any failure, including caller
    cancellation, cancels the remaining requests and propagates, so no
    partial transcript is ever produced.
    """

    def __init__(
        self,
        transcriber: TranscriberPort,
        audio_tools: AudioToolsPort,
        *,
        max_parallel: int = 1,
        logger: JobLogger | None = None,
    ):
        self.transcriber = transcriber
        self.audio_tools = audio_tools
        self.max_parallel = max(1, int(max_parallel or 1))
        self.logger = logger or NullLogger()

    async def run(
        self,
        source: Path,
        chunks: Sequence[AudioChunk],
        options: TranscribeOptions,
        merger: TranscriptMerger,
        *,
        duration: float | None = None,
    ) -> Transcript:
        if self.max_parallel == 1 or len(chunks) == 1:
            for chunk in chunks:
                merger.add(await self._transcribe_chunk(source, chunk, options, len(chunks)))
        else:
            await self._run_parallel(source, chunks, options, merger)
        return merger.finish(duration=duration)

    async def _run_parallel(
        self,
        source: Path,
        chunks: Sequence[AudioChunk],
        options: TranscribeOptions,
        merger: TranscriptMerger,
    ) -> None:
        semaphore = asyncio.Semaphore(self.max_parallel)

        async def _bounded(chunk: AudioChunk) -> ChunkResult:
            async with semaphore:
                return await self._transcribe_chunk(source, chunk, options, len(chunks))

        tasks = [asyncio.create_task(_bounded(chunk)) for chunk in chunks]
        try:
            for next_done in asyncio.as_completed(tasks):
                merger.add(await next_done)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    async def _transcribe_chunk(
        self,
        source: Path,
        chunk: AudioChunk,
        options: TranscribeOptions,
        total: int,
    ) -> ChunkResult:
        capability = self.transcriber.capability
        audio = await asyncio.to_thread(self.audio_tools.extract_segment, source, chunk.start, chunk.end)
        if not fits(len(audio), capability):
            raise CapabilityError(
                f"Chunk {chunk.index + 1}/{total} is {fmt_megabytes(len(audio))}, "
                f"above the {capability.label} limit of {fmt_megabytes(capability.max_file_size)}; "
                "use a shorter chunk window"
            )

        self.logger.write(
            f"[Chunker] Processing chunk {chunk.index + 1}/{total}: "
            f"{chunk.start:.1f}s - {chunk.end:.1f}s ({fmt_megabytes(len(audio))})"
        )
        chunk_options = options.for_chunk(
            chunk.index,
            filename=JobPaths.chunk_filename(source, chunk.index),
            duration=chunk.duration,
        )
        result = await self.transcriber.transcribe(audio, chunk_options)
        if result.index != chunk.index:
            result = result.model_copy(update={"index": chunk.index})
        return result
