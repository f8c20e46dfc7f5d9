from .file_writer import AiofilesTranscriptWriter

__all__ = ["AiofilesTranscriptWriter"]
