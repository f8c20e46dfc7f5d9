from __future__ import annotations


class TranscriptionError(Exception):
    """Base class for every failure surfaced by a transcription job."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(TranscriptionError):
    """A required credential or tool is missing."""


class CapabilityError(TranscriptionError):
    """The request asks for something the chosen provider cannot do."""


class ProbeError(TranscriptionError):
    """The source duration or format could not be determined."""


class AudioExtractionError(TranscriptionError):
    """A time range could not be cut out of the source audio."""


class ProviderError(TranscriptionError):
    """The provider answered, but rejected the request."""

    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class TranscriptionTimeoutError(TranscriptionError, TimeoutError):
    """The provider did not answer before the deadline."""


class IncompleteTranscriptionError(TranscriptionError):
    def __init__(self, missing: list[int]):
        indices = ", ".join(str(i) for i in missing)
        super().__init__(f"Transcription incomplete: no result for chunk(s) {indices}")
        self.missing = list(missing)


class UnsupportedFormatError(TranscriptionError):
    def __init__(self, fmt: object):
        super().__init__(f"Unsupported output format: {fmt}. Available: text, srt, vtt, json")
        self.format = fmt
