from __future__ import annotations

from pathlib import Path


class JobPaths:
    def __init__(self, logs_root: Path, session_id: str):
        self.logs_root = logs_root
        self.session_id = session_id

    @property
    def log_path(self) -> Path:
        return self.logs_root / f"{self.session_id}.log"

    @property
    def errors_path(self) -> Path:
        return self.logs_root / "errors.json"

    @staticmethod
    def compressed_path(work_dir: Path, input_path: Path) -> Path:
        return work_dir / f".compressed_{input_path.stem}.ogg"

    @staticmethod
    def chunk_filename(input_path: Path, index: int) -> str:
        suffix = input_path.suffix or ".mp3"
        return f"{input_path.stem}_chunk_{index:03d}{suffix}"
