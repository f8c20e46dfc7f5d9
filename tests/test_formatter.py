import json

import pytest

from skill_transcript.domain.entities.request import OutputFormat
from skill_transcript.domain.entities.transcript import Segment, Transcript
from skill_transcript.domain.errors import UnsupportedFormatError
from skill_transcript.processing.formatter import (
    format_timestamp,
    format_transcript,
    parse_transcript_json,
    resolve_format,
)


def _transcript():
    return Transcript(
        text="Hello World",
        segments=[
            Segment(start=0.0, end=1.5, text="Hello"),
            Segment(start=1.5, end=3.25, text="World", speaker="S1"),
        ],
        language="en",
        duration=3.25,
    )


def test_format_timestamp():
    assert format_timestamp(0) == "00:00:00.000"
    assert format_timestamp(3661.5) == "01:01:01.500"
    assert format_timestamp(3599.9996) == "01:00:00.000"
    assert format_timestamp(-2) == "00:00:00.000"
    assert format_timestamp(1.25, decimal=",") == "00:00:01,250"


def test_srt_output():
    out = format_transcript(_transcript(), OutputFormat.SRT)
    assert out == (
        "1\n"
        "00:00:00,000 --> 00:00:01,500\n"
        "Hello\n"
        "\n"
        "2\n"
        "00:00:01,500 --> 00:00:03,250\n"
        "<v S1>World\n"
    )


def test_vtt_output():
    out = format_transcript(_transcript(), "vtt")
    assert out == (
        "WEBVTT\n"
        "\n"
        "00:00:00.000 --> 00:00:01.500\n"
        "Hello\n"
        "\n"
        "00:00:01.500 --> 00:00:03.250\n"
        "<v S1>World\n"
    )


def test_text_output_groups_speakers():
    transcript = Transcript(
        text="Hi. How are you? Fine.",
        segments=[
            Segment(start=0.0, end=1.0, text="Hi.", speaker="A"),
            Segment(start=1.0, end=2.0, text="How are you?", speaker="A"),
            Segment(start=2.0, end=3.0, text="Fine.", speaker="B"),
        ],
    )
    assert format_transcript(transcript, "text") == "[A]\nHi. How are you?\n[B]\nFine.\n"


def test_text_output_without_speakers():
    transcript = Transcript(
        text="a b",
        segments=[Segment(start=0.0, end=1.0, text="a"), Segment(start=1.0, end=2.0, text=" b ")],
    )
    assert format_transcript(transcript, OutputFormat.TEXT) == "a b\n"


def test_text_only_transcript_falls_back_to_text():
    transcript = Transcript(text="just text")
    assert format_transcript(transcript, "text") == "just text\n"
    assert format_transcript(transcript, "srt") == "1\n00:00:00,000 --> 00:00:00,000\njust text\n"


def test_json_output_round_trips():
    transcript = _transcript().model_copy(update={"provider": "openai", "model": "whisper-1"})
    out = format_transcript(transcript, "json")

    data = json.loads(out)
    assert data["language"] == "en"
    assert data["speakers"] == ["S1"]
    assert len(data["segments"]) == 2

    assert parse_transcript_json(out) == transcript


def test_resolve_format_is_case_insensitive():
    assert resolve_format(" SRT ") is OutputFormat.SRT
    assert resolve_format(OutputFormat.JSON) is OutputFormat.JSON


def test_unknown_format_is_rejected():
    with pytest.raises(UnsupportedFormatError) as excinfo:
        format_transcript(_transcript(), "docx")
    assert "docx" in excinfo.value.message
    assert "text, srt, vtt, json" in excinfo.value.message


def test_empty_transcript_has_no_cues():
    transcript = Transcript(text="  ")
    assert format_transcript(transcript, "srt") == "\n"
    assert format_transcript(transcript, "vtt") == "WEBVTT\n"
