from .audio_tools_port import AudioToolsPort
from .error_monitor_port import ErrorMonitorPort
from .transcriber_port import TranscribeOptions, TranscriberPort
from .transcript_writer_port import TranscriptWriterPort

__all__ = [
    "AudioToolsPort",
    "ErrorMonitorPort",
    "TranscribeOptions",
    "TranscriberPort",
    "TranscriptWriterPort",
]
