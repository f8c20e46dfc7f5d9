from skill_transcript.domain.entities.chunk import ChunkResult
from skill_transcript.domain.entities.transcript import Segment
from skill_transcript.processing.chunker import split
from skill_transcript.processing.merge import exact_similarity, merge


def _result(index, *segments):
    return ChunkResult(index=index, segments=[Segment(start=s, end=e, text=t) for s, e, t in segments])


def test_duplicated_sentence_in_overlap_appears_once():
    chunks = split(1500.0, 600.0, 5.0)
    results = [
        _result(0, (590.0, 596.5, "Let's move on."), (596.5, 599.5, "See you next week.")),
        # chunk 1 starts at 595s, so 1.6s here is 596.6s in the source
        _result(1, (1.6, 4.4, "see you  next week"), (5.0, 8.0, "Thanks for listening.")),
        _result(2, (1.0, 3.0, "Bye.")),
    ]

    transcript = merge(results, chunks)
    texts = [s.text for s in transcript.segments]

    assert texts == ["Let's move on.", "See you next week.", "Thanks for listening.", "Bye."]
    assert transcript.text.lower().count("see you next week") == 1
    for prev, cur in zip(transcript.segments, transcript.segments[1:]):
        assert cur.start >= prev.start


def test_earlier_chunk_wins_on_duplicate():
    chunks = split(20.0, 12.0, 4.0)
    results = [
        _result(0, (9.0, 11.5, "The quick brown fox.")),
        _result(1, (1.1, 3.4, "the quick brown fox")),
    ]

    transcript = merge(results, chunks)

    assert len(transcript.segments) == 1
    seg = transcript.segments[0]
    assert (seg.start, seg.end, seg.text) == (9.0, 11.5, "The quick brown fox.")


def test_distinct_text_in_overlap_is_kept():
    chunks = split(20.0, 12.0, 4.0)
    results = [
        _result(0, (9.0, 11.5, "The quick brown fox.")),
        _result(1, (1.0, 3.5, "jumps over the lazy dog")),
    ]

    transcript = merge(results, chunks)

    assert [s.text for s in transcript.segments] == ["The quick brown fox.", "jumps over the lazy dog"]


def test_repeated_phrase_outside_overlap_is_kept():
    chunks = split(20.0, 12.0, 4.0)
    results = [
        _result(0, (1.0, 2.0, "yes")),
        _result(1, (6.0, 7.0, "yes")),
    ]

    transcript = merge(results, chunks)

    assert [s.text for s in transcript.segments] == ["yes", "yes"]


def test_similarity_strategy_is_pluggable():
    chunks = split(20.0, 12.0, 4.0)
    results = [
        _result(0, (9.0, 11.5, "the quick brown fox")),
        _result(1, (1.1, 3.4, "the quick brown fax")),
    ]

    fuzzy = merge(results, chunks)
    exact = merge(results, chunks, similarity=exact_similarity)

    assert len(fuzzy.segments) == 1
    assert len(exact.segments) == 2


def test_duplicate_found_when_previous_chunk_is_out_of_order():
    chunks = split(1195.0, 600.0, 5.0)
    results = [
        _result(0, (592.0, 599.5, "the meeting is adjourned"), (585.0, 591.5, "any other business")),
        _result(1, (0.0, 4.5, "The meeting is adjourned"), (10.0, 12.0, "next topic")),
    ]

    transcript = merge(results, chunks)

    assert [s.text for s in transcript.segments] == [
        "any other business",
        "the meeting is adjourned",
        "next topic",
    ]
