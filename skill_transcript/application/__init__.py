from .use_cases import TranscribeFileUseCase

__all__ = ["TranscribeFileUseCase"]
