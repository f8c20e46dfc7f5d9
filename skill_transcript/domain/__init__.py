from .entities import (
    AudioChunk,
    ChunkResult,
    ErrorLog,
    OutputFormat,
    ProviderCapability,
    ProviderName,
    Segment,
    Transcript,
    TranscriptionRequest,
)
from .errors import (
    AudioExtractionError,
    CapabilityError,
    ConfigurationError,
    IncompleteTranscriptionError,
    ProbeError,
    ProviderError,
    TranscriptionError,
    TranscriptionTimeoutError,
    UnsupportedFormatError,
)
from .ports import (
    AudioToolsPort,
    ErrorMonitorPort,
    TranscribeOptions,
    TranscriberPort,
    TranscriptWriterPort,
)

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
    "AudioExtractionError",
    "CapabilityError",
    "ConfigurationError",
    "IncompleteTranscriptionError",
    "ProbeError",
    "ProviderError",
    "TranscriptionError",
    "TranscriptionTimeoutError",
    "UnsupportedFormatError",
    "AudioToolsPort",
    "ErrorMonitorPort",
    "TranscribeOptions",
    "TranscriberPort",
    "TranscriptWriterPort",
]
