from .monitoring import JsonErrorMonitorAdapter
from .providers import (
    ElevenLabsTranscriber,
    GeminiTranscriber,
    OpenAITranscriber,
    build_transcriber,
)
from .tools import FfmpegAudioTools, ensure_ffmpeg
from .writer import AiofilesTranscriptWriter

__all__ = [
    "AiofilesTranscriptWriter",
    "ElevenLabsTranscriber",
    "FfmpegAudioTools",
    "GeminiTranscriber",
    "JsonErrorMonitorAdapter",
    "OpenAITranscriber",
    "build_transcriber",
    "ensure_ffmpeg",
]
