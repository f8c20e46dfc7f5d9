from __future__ import annotations

from pathlib import Path

from ...domain.errors import ConfigurationError
from ...shared.fs__shared_util import which


def ensure_ffmpeg() -> tuple[Path, Path]:
    ffmpeg = which("ffmpeg")
    ffprobe = which("ffprobe")
    if ffmpeg and ffprobe:
        return Path(ffmpeg), Path(ffprobe)
    raise ConfigurationError(
        "Could not find ffmpeg/ffprobe in PATH. They are required to probe and split large files."
    )
