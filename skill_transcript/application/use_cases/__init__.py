from .transcribe_file import TranscribeFileUseCase

__all__ = ["TranscribeFileUseCase"]
