from __future__ import annotations

import shutil
import subprocess
import tempfile
from pathlib import Path

from ...domain.errors import AudioExtractionError, ProbeError
from ...domain.ports.audio_tools_port import AudioToolsPort
from ...shared.fs__shared_util import run
from .ffmpeg_provider import ensure_ffmpeg


def parse_duration(raw: str) -> float:
    raw = (raw or "").strip()
    try:
        duration = float(raw)
    except ValueError:
        raise ProbeError(f"Could not parse audio duration: {raw!r}") from None
    if duration != duration or duration < 0:
        raise ProbeError(f"Could not parse audio duration: {raw!r}")
    return duration


class FfmpegAudioTools(AudioToolsPort):
    def __init__(self, *, ffmpeg: Path | None = None, ffprobe: Path | None = None):
        self._ffmpeg = ffmpeg
        self._ffprobe = ffprobe

    def _binaries(self) -> tuple[Path, Path]:
        if self._ffmpeg is None or self._ffprobe is None:
            self._ffmpeg, self._ffprobe = ensure_ffmpeg()
        return self._ffmpeg, self._ffprobe

    def probe_duration(self, path: Path) -> float:
        if not path.is_file():
            raise ProbeError(f"Input file not found: {path}")
        _, ffprobe = self._binaries()
        res = run(
            [
                str(ffprobe),
                "-v", "error",
                "-show_entries", "format=duration",
                "-of", "default=noprint_wrappers=1:nokey=1",
                str(path),
            ],
            capture=True,
            check=False,
        )
        if res.returncode != 0:
            raise ProbeError(f"ffprobe failed: {(res.stderr or '').strip()}")
        return parse_duration(res.stdout)

    def extract_segment(self, path: Path, start: float, end: float) -> bytes:
        ffmpeg, _ = self._binaries()
        duration = max(end - start, 0.01)
        suffix = path.suffix or ".mp3"
        tmp_dir = Path(tempfile.mkdtemp(prefix="skill-transcript-chunk-"))
        chunk_path = tmp_dir / f"chunk{suffix}"
        try:
            run(
                [
                    str(ffmpeg),
                    "-hide_banner",
                    "-loglevel", "error",
                    "-y",
                    "-ss", f"{start:.3f}",
                    "-t", f"{duration:.3f}",
                    "-i", str(path),
                    "-vn",
                    "-acodec", "copy",
                    str(chunk_path),
                ],
                capture=True,
                check=True,
            )
            return chunk_path.read_bytes()
        except subprocess.CalledProcessError as exc:
            raise AudioExtractionError(
                f"ffmpeg chunk creation failed for {start:.3f}s-{end:.3f}s: {(exc.stderr or '').strip()}"
            ) from exc
        finally:
            shutil.rmtree(tmp_dir, ignore_errors=True)

    def compress(self, path: Path, out_path: Path, *, bitrate: str) -> Path:
        ffmpeg, _ = self._binaries()
        try:
            run(
                [
                    str(ffmpeg),
                    "-hide_banner",
                    "-loglevel", "error",
                    "-y",
                    "-i", str(path),
                    "-vn",
                    "-map_metadata", "-1",
                    "-ac", "1",
                    "-c:a", "libopus",
                    "-b:a", bitrate,
                    "-application", "voip",
                    str(out_path),
                ],
                capture=True,
                check=True,
            )
        except subprocess.CalledProcessError as exc:
            raise AudioExtractionError(f"ffmpeg compression failed: {(exc.stderr or '').strip()}") from exc
        return out_path
