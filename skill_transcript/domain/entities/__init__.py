from .capability import ProviderCapability, all_capabilities, capability_for, check_capabilities
from .chunk import AudioChunk, ChunkResult
from .error_log import ErrorLog
from .request import OutputFormat, ProviderName, TranscriptionRequest
from .transcript import Segment, Transcript

__all__ = [
    "AudioChunk",
    "ChunkResult",
    "ErrorLog",
    "OutputFormat",
    "ProviderCapability",
    "ProviderName",
    "Segment",
    "Transcript",
    "TranscriptionRequest",
    "all_capabilities",
    "capability_for",
    "check_capabilities",
]
