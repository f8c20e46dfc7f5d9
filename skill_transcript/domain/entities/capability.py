from __future__ import annotations

from dataclasses import dataclass
from typing import assert_never

from ..errors import CapabilityError
from .request import ProviderName, TranscriptionRequest

MB = 1024 * 1024
GB = 1024 * MB


@dataclass(frozen=True)
class ProviderCapability:
    name: ProviderName
    label: str
    max_file_size: int
    supports_diarization: bool
    supports_word_timestamps: bool
    max_speakers: int
    default_model: str
    supported_formats: frozenset[str]


ELEVENLABS = ProviderCapability(
    name=ProviderName.ELEVENLABS,
    label="ElevenLabs Scribe",
    max_file_size=3 * GB,
    supports_diarization=True,
    supports_word_timestamps=True,
    max_speakers=32,
    default_model="scribe_v1",
    supported_formats=frozenset({"mp3", "mp4", "wav", "webm", "m4a", "ogg", "flac"}),
)

OPENAI = ProviderCapability(
    name=ProviderName.OPENAI,
    label="OpenAI Whisper",
    max_file_size=25 * MB,
    supports_diarization=False,
    supports_word_timestamps=True,
    max_speakers=1,
    default_model="whisper-1",
    supported_formats=frozenset({"mp3", "mp4", "mpeg", "mpga", "m4a", "wav", "webm", "ogg"}),
)

GEMINI = ProviderCapability(
    name=ProviderName.GEMINI,
    label="Google Gemini",
    max_file_size=100 * MB,
    supports_diarization=True,
    supports_word_timestamps=False,
    max_speakers=32,
    default_model="gemini-2.0-flash",
    supported_formats=frozenset({"mp3", "wav", "ogg", "flac", "m4a", "aac", "mp4", "webm"}),
)


def capability_for(provider: ProviderName) -> ProviderCapability:
    match provider:
        case ProviderName.ELEVENLABS:
            return ELEVENLABS
        case ProviderName.OPENAI:
            return OPENAI
        case ProviderName.GEMINI:
            return GEMINI
        case _:
            assert_never(provider)


def all_capabilities() -> list[ProviderCapability]:
    return [capability_for(p) for p in ProviderName]


def check_capabilities(request: TranscriptionRequest, capability: ProviderCapability) -> None:
    """Reject requests the provider cannot serve, before anything is sent."""
    if request.diarize and not capability.supports_diarization:
        raise CapabilityError(f"{capability.label} does not support speaker diarization")
    if request.max_speakers is not None and request.max_speakers > capability.max_speakers:
        raise CapabilityError(
            f"{capability.label} distinguishes at most {capability.max_speakers} speakers, "
            f"{request.max_speakers} requested"
        )
    ext = request.input_path.suffix.lstrip(".").lower()
    if ext and ext not in capability.supported_formats:
        supported = ", ".join(sorted(capability.supported_formats))
        raise CapabilityError(f"{capability.label} does not accept .{ext} files (supported: {supported})")
