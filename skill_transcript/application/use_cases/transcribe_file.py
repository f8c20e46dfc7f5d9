from __future__ import annotations

import asyncio
import tempfile
import traceback
from dataclasses import replace
from pathlib import Path

from ...domain.entities.capability import ProviderCapability, check_capabilities
from ...domain.entities.chunk import AudioChunk
from ...domain.entities.error_log import ErrorLog
from ...domain.entities.request import TranscriptionRequest
from ...domain.entities.transcript import Transcript
from ...domain.errors import AudioExtractionError, CapabilityError, ProbeError
from ...domain.ports.audio_tools_port import AudioToolsPort
from ...domain.ports.error_monitor_port import ErrorMonitorPort
from ...domain.ports.transcriber_port import TranscribeOptions, TranscriberPort
from ...domain.ports.transcript_writer_port import TranscriptWriterPort
from ...jobs.logger import JobLogger
from ...jobs.paths import JobPaths
from ...processing.chunk_transcriber import ChunkTranscriber
from ...processing.chunker import plan_chunks
from ...processing.formatter import format_transcript
from ...processing.merge import SimilarityFn, TranscriptMerger, sequence_similarity
from ...processing.size_guard import fits, fmt_megabytes
from ...settings import Settings


class TranscribeFileUseCase:
    def __init__(
        self,
        transcriber: TranscriberPort,
        audio_tools: AudioToolsPort,
        writer: TranscriptWriterPort,
        monitor: ErrorMonitorPort,
        logger: JobLogger,
        settings: Settings,
        *,
        similarity: SimilarityFn = sequence_similarity,
    ):
        self.transcriber = transcriber
        self.audio_tools = audio_tools
        self.writer = writer
        self.monitor = monitor
        self.logger = logger
        self.settings = settings
        self.similarity = similarity

    async def execute(self, request: TranscriptionRequest) -> dict:
        try:
            capability = self.transcriber.capability
            if capability.name != request.provider:
                raise ValueError(
                    f"transcriber for {capability.name.value} cannot serve a {request.provider.value} request"
                )
            check_capabilities(request, capability)

            source = request.input_path
            if not source.is_file():
                raise ProbeError(f"Input file not found: {source}")
            size = source.stat().st_size

            options = TranscribeOptions(
                language=request.language,
                model=request.model,
                diarize=request.diarize,
                timestamps=request.timestamps,
                max_speakers=request.max_speakers,
                timeout=self.settings.REQUEST_TIMEOUT_SECONDS,
                filename=source.name,
            )

            self.logger.write(f"[{capability.label}] File size: {fmt_megabytes(size)}")
            if fits(size, capability):
                transcript = await self._transcribe_whole(source, options)
                chunk_count = 1
            else:
                self.logger.write(
                    f"[{capability.label}] File exceeds the {fmt_megabytes(capability.max_file_size)} limit"
                )
                transcript, chunk_count = await self._transcribe_oversized(source, size, capability, options)

            transcript = transcript.model_copy(
                update={
                    "provider": capability.name.value,
                    "model": request.model or capability.default_model,
                }
            )
            output = format_transcript(transcript, request.output_format)
            output_path = await self.writer.write(request.resolved_output_path(), output)
            self.logger.write(f"Transcription written to {output_path}")

            return {
                "status": "success",
                "session_id": self.logger.session_id,
                "output_path": str(output_path),
                "format": request.output_format.value,
                "duration": transcript.duration,
                "language": transcript.language,
                "segments": len(transcript.segments),
                "speakers": len(transcript.speakers),
                "words": transcript.word_count,
                "chunks": chunk_count,
                "transcript": transcript,
            }

        except asyncio.CancelledError:
            self.logger.write("Transcription cancelled; partial results discarded")
            raise
        except Exception as e:
            self.logger.write(f"Transcription failed: {e}")
            await self.monitor.log_error(
                ErrorLog(
                    session_id=self.logger.session_id,
                    error_type=type(e).__name__,
                    message=str(e),
                    stack_trace=traceback.format_exc(),
                    context_data={
                        "input": str(request.input_path),
                        "provider": request.provider.value,
                    },
                )
            )
            raise e

    async def _transcribe_whole(self, source: Path, options: TranscribeOptions) -> Transcript:
        result = await self.transcriber.transcribe(source, options)
        duration = result.duration
        if duration is None:
            duration = max((s.end for s in result.segments), default=0.0)
        merger = TranscriptMerger([AudioChunk(index=0, start=0.0, end=duration)], similarity=self.similarity)
        merger.add(result.model_copy(update={"index": 0}))
        return merger.finish(duration=duration)

    async def _transcribe_oversized(
        self,
        source: Path,
        size: int,
        capability: ProviderCapability,
        options: TranscribeOptions,
    ) -> tuple[Transcript, int]:
        if not self.settings.CHUNKING_ENABLED:
            raise CapabilityError(
                f"{source.name} is {fmt_megabytes(size)}, above the {capability.label} limit of "
                f"{fmt_megabytes(capability.max_file_size)}, and chunking is disabled"
            )

        if self.settings.COMPRESS_OVERSIZED:
            transcript = await self._try_compressed(source, capability, options)
            if transcript is not None:
                return transcript, 1

        duration, chunks = await asyncio.to_thread(
            plan_chunks,
            source,
            self.audio_tools,
            target_chunk_seconds=self.settings.CHUNK_TARGET_SECONDS,
            overlap_seconds=self.settings.CHUNK_OVERLAP_SECONDS,
        )
        self.logger.write(
            f"[Chunker] Total duration: {round(duration)}s, {len(chunks)} chunks of "
            f"{self.settings.CHUNK_TARGET_SECONDS:g}s with {self.settings.CHUNK_OVERLAP_SECONDS:g}s overlap"
        )

        merger = TranscriptMerger(
            chunks,
            similarity=self.similarity,
            threshold=self.settings.MERGE_SIMILARITY_THRESHOLD,
        )
        runner = ChunkTranscriber(
            self.transcriber,
            self.audio_tools,
            max_parallel=self.settings.MAX_PARALLEL_CHUNKS,
            logger=self.logger,
        )
        transcript = await runner.run(source, chunks, options, merger, duration=duration)
        if merger.duplicates_dropped:
            self.logger.write(f"[Chunker] Dropped {merger.duplicates_dropped} duplicated segment(s) in overlaps")
        return transcript, len(chunks)

    async def _try_compressed(
        self,
        source: Path,
        capability: ProviderCapability,
        options: TranscribeOptions,
    ) -> Transcript | None:
        with tempfile.TemporaryDirectory(prefix="skill-transcript-") as work_dir:
            compressed = JobPaths.compressed_path(Path(work_dir), source)
            self.logger.write(f"[Chunker] Compressing audio to {self.settings.COMPRESS_BITRATE} before chunking")
            try:
                await asyncio.to_thread(
                    self.audio_tools.compress,
                    source,
                    compressed,
                    bitrate=self.settings.COMPRESS_BITRATE,
                )
            except AudioExtractionError as exc:
                self.logger.write(f"[Chunker] Compression failed, falling back to chunking: {exc}")
                return None

            compressed_size = compressed.stat().st_size
            self.logger.write(f"[Chunker] Compressed size: {fmt_megabytes(compressed_size)}")
            if not fits(compressed_size, capability):
                return None
            return await self._transcribe_whole(compressed, replace(options, filename=compressed.name))
