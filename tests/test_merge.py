import pytest

from skill_transcript.domain.entities.chunk import AudioChunk, ChunkResult
from skill_transcript.domain.entities.transcript import Segment
from skill_transcript.domain.errors import IncompleteTranscriptionError
from skill_transcript.processing.chunker import split
from skill_transcript.processing.merge import TranscriptMerger, merge, normalize_text


def _result(index, *segments, language=None):
    return ChunkResult(
        index=index,
        segments=[Segment(start=s, end=e, text=t) for s, e, t in segments],
        language=language,
    )


def test_merge_without_overlap_is_concatenation():
    chunks = split(20.0, 10.0, 0.0)
    results = [
        _result(0, (0.0, 4.0, "hello there"), (4.0, 9.5, "general kenobi")),
        _result(1, (0.5, 5.0, "you are a bold one"), (5.0, 10.0, "kill him")),
    ]

    transcript = merge(results, chunks)

    assert [(s.start, s.end, s.text) for s in transcript.segments] == [
        (0.0, 4.0, "hello there"),
        (4.0, 9.5, "general kenobi"),
        (10.5, 15.0, "you are a bold one"),
        (15.0, 20.0, "kill him"),
    ]
    assert transcript.text == "hello there general kenobi you are a bold one kill him"
    assert transcript.duration == 20.0


def test_merge_shifts_segments_to_absolute_time():
    chunks = split(1500.0, 600.0, 5.0)
    results = [
        _result(0, (10.0, 12.0, "first")),
        _result(1, (100.0, 102.0, "second")),
        _result(2, (50.0, 55.0, "third")),
    ]

    transcript = merge(results, chunks)

    assert [s.start for s in transcript.segments] == [10.0, 695.0, 1240.0]
    assert transcript.duration == 1500.0


def test_merge_sorts_out_of_order_segments():
    chunks = split(10.0, 10.0, 0.0)
    transcript = merge([_result(0, (5.0, 6.0, "later"), (1.0, 2.0, "earlier"))], chunks)
    assert [s.text for s in transcript.segments] == ["earlier", "later"]


def test_merge_reports_detected_language_from_first_chunk_that_has_one():
    chunks = split(20.0, 10.0, 0.0)
    transcript = merge([_result(0, (0.0, 1.0, "a")), _result(1, (0.0, 1.0, "b"), language="en")], chunks)
    assert transcript.language == "en"


def test_merge_missing_result_raises_incomplete():
    chunks = split(1500.0, 600.0, 5.0)
    results = [_result(0, (0.0, 1.0, "a")), None, _result(2, (0.0, 1.0, "c"))]

    with pytest.raises(IncompleteTranscriptionError) as excinfo:
        merge(results, chunks)
    assert excinfo.value.missing == [1]


def test_merger_buffers_out_of_order_results():
    chunks = split(30.0, 10.0, 0.0)
    merger = TranscriptMerger(chunks)

    merger.add(_result(2, (0.0, 1.0, "three")))
    merger.add(_result(1, (0.0, 1.0, "two")))
    assert merger.merged_count == 0

    merger.add(_result(0, (0.0, 1.0, "one")))
    assert merger.merged_count == 3
    assert merger.finish().text == "one two three"


def test_merger_finish_with_gap_raises():
    chunks = split(30.0, 10.0, 0.0)
    merger = TranscriptMerger(chunks)
    merger.add(_result(0, (0.0, 1.0, "one")))
    merger.add(_result(2, (0.0, 1.0, "three")))

    with pytest.raises(IncompleteTranscriptionError) as excinfo:
        merger.finish()
    assert excinfo.value.missing == [1]


def test_merger_rejects_duplicate_and_unknown_results():
    merger = TranscriptMerger(split(20.0, 10.0, 0.0))
    merger.add(_result(0))
    with pytest.raises(ValueError):
        merger.add(_result(0))
    with pytest.raises(ValueError):
        merger.add(_result(5))


def test_merger_requires_contiguous_chunks():
    with pytest.raises(ValueError):
        TranscriptMerger([AudioChunk(index=0, start=0, end=1), AudioChunk(index=2, start=1, end=2)])


def test_normalize_text():
    assert normalize_text("  Hello\n  World\t ") == "hello world"


def test_merge_rejects_more_results_than_chunks():
    chunks = split(10.0, 10.0, 0.0)
    with pytest.raises(ValueError, match="2 chunk results for 1 chunks"):
        merge([_result(0), _result(1)], chunks)
