from .audio_tools import FfmpegAudioTools
from .ffmpeg_provider import ensure_ffmpeg

__all__ = ["FfmpegAudioTools", "ensure_ffmpeg"]
