import asyncio
from dataclasses import replace
from pathlib import Path

import pytest

from skill_transcript.domain.entities.capability import OPENAI
from skill_transcript.domain.entities.chunk import ChunkResult
from skill_transcript.domain.entities.transcript import Segment
from skill_transcript.domain.errors import CapabilityError, ProviderError
from skill_transcript.domain.ports.audio_tools_port import AudioToolsPort
from skill_transcript.domain.ports.transcriber_port import TranscribeOptions, TranscriberPort
from skill_transcript.processing.chunk_transcriber import ChunkTranscriber
from skill_transcript.processing.chunker import split
from skill_transcript.processing.merge import TranscriptMerger

SOURCE = Path("talk.mp3")


class FakeAudioTools(AudioToolsPort):
    def __init__(self, chunk_bytes=b"audio", events=None):
        self.chunk_bytes = chunk_bytes
        self.events = events if events is not None else []

    def probe_duration(self, path):
        raise NotImplementedError

    def extract_segment(self, path, start, end):
        self.events.append(f"extract {start:g}")
        return self.chunk_bytes

    def compress(self, path, out_path, *, bitrate):
        raise NotImplementedError


class FakeTranscriber(TranscriberPort):
    capability = OPENAI

    def __init__(self, delays=None, fail_on=None, events=None):
        self.delays = delays or {}
        self.fail_on = fail_on
        self.events = events if events is not None else []
        self.options = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.cancelled = []
        self.started = asyncio.Event()

    async def transcribe(self, audio, options):
        self.options.append(options)
        self.events.append(f"transcribe {options.index}")
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        self.started.set()
        try:
            await asyncio.sleep(self.delays.get(options.index, 0))
            if options.index == self.fail_on:
                raise ProviderError("boom", status_code=500)
        except asyncio.CancelledError:
            self.cancelled.append(options.index)
            raise
        finally:
            self.in_flight -= 1
        return ChunkResult(
            index=options.index,
            segments=[Segment(start=1.0, end=2.0, text=f"chunk {options.index}")],
        )


@pytest.mark.asyncio
async def test_sequential_run_waits_for_each_chunk():
    events = []
    chunks = split(30.0, 10.0, 0.0)
    transcriber = FakeTranscriber(events=events)
    runner = ChunkTranscriber(transcriber, FakeAudioTools(events=events))

    transcript = await runner.run(SOURCE, chunks, TranscribeOptions(language="en"), TranscriptMerger(chunks))

    assert events == ["extract 0", "transcribe 0", "extract 10", "transcribe 1", "extract 20", "transcribe 2"]
    assert transcript.text == "chunk 0 chunk 1 chunk 2"
    assert [s.start for s in transcript.segments] == [1.0, 11.0, 21.0]
    assert [o.filename for o in transcriber.options] == [
        "talk_chunk_000.mp3",
        "talk_chunk_001.mp3",
        "talk_chunk_002.mp3",
    ]
    assert all(o.language == "en" for o in transcriber.options)
    assert transcriber.options[2].duration == 10.0


@pytest.mark.asyncio
async def test_parallel_run_merges_in_chunk_order():
    chunks = split(40.0, 10.0, 0.0)
    transcriber = FakeTranscriber(delays={0: 0.05, 1: 0.0, 2: 0.03, 3: 0.01})
    runner = ChunkTranscriber(transcriber, FakeAudioTools(), max_parallel=2)

    transcript = await runner.run(SOURCE, chunks, TranscribeOptions(), TranscriptMerger(chunks))

    assert transcript.text == "chunk 0 chunk 1 chunk 2 chunk 3"
    assert transcriber.max_in_flight <= 2


@pytest.mark.asyncio
async def test_parallel_matches_sequential_output():
    chunks = split(50.0, 12.0, 2.0)
    sequential = await ChunkTranscriber(FakeTranscriber(), FakeAudioTools()).run(
        SOURCE, chunks, TranscribeOptions(), TranscriptMerger(chunks)
    )
    parallel = await ChunkTranscriber(
        FakeTranscriber(delays={0: 0.02, 2: 0.01}), FakeAudioTools(), max_parallel=4
    ).run(SOURCE, chunks, TranscribeOptions(), TranscriptMerger(chunks))

    assert parallel == sequential


@pytest.mark.asyncio
async def test_failed_chunk_cancels_the_rest():
    chunks = split(30.0, 10.0, 0.0)
    transcriber = FakeTranscriber(delays={0: 10, 1: 0.05, 2: 10}, fail_on=1)
    runner = ChunkTranscriber(transcriber, FakeAudioTools(), max_parallel=3)

    with pytest.raises(ProviderError):
        await runner.run(SOURCE, chunks, TranscribeOptions(), TranscriptMerger(chunks))

    assert sorted(transcriber.cancelled) == [0, 2]
    assert transcriber.in_flight == 0


@pytest.mark.asyncio
async def test_sequential_failure_stops_before_next_chunk():
    events = []
    chunks = split(30.0, 10.0, 0.0)
    transcriber = FakeTranscriber(fail_on=1, events=events)
    runner = ChunkTranscriber(transcriber, FakeAudioTools(events=events))

    with pytest.raises(ProviderError):
        await runner.run(SOURCE, chunks, TranscribeOptions(), TranscriptMerger(chunks))

    assert "extract 20" not in events


@pytest.mark.asyncio
@pytest.mark.parametrize("max_parallel", [1, 3])
async def test_caller_cancellation_propagates(max_parallel):
    chunks = split(30.0, 10.0, 0.0)
    transcriber = FakeTranscriber(delays={0: 10, 1: 10, 2: 10})
    runner = ChunkTranscriber(transcriber, FakeAudioTools(), max_parallel=max_parallel)

    job = asyncio.create_task(runner.run(SOURCE, chunks, TranscribeOptions(), TranscriptMerger(chunks)))
    await transcriber.started.wait()
    job.cancel()

    with pytest.raises(asyncio.CancelledError):
        await job
    assert transcriber.cancelled
    assert transcriber.in_flight == 0


@pytest.mark.asyncio
async def test_chunk_over_provider_limit_is_rejected():
    chunks = split(20.0, 10.0, 0.0)
    transcriber = FakeTranscriber()
    transcriber.capability = replace(OPENAI, max_file_size=10)
    runner = ChunkTranscriber(transcriber, FakeAudioTools(chunk_bytes=b"x" * 20))

    with pytest.raises(CapabilityError, match="shorter chunk window"):
        await runner.run(SOURCE, chunks, TranscribeOptions(), TranscriptMerger(chunks))

    assert transcriber.options == []
