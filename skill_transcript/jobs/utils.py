from __future__ import annotations

from pathlib import Path

from ..settings import settings


def resolve_path(path_value: str, *, base_dir: Path | None = None) -> Path:
    p = Path(path_value).expanduser()
    if p.is_absolute():
        return p
    return (base_dir or Path.cwd()) / p


def logs_root(logs_dir: str | None = None) -> Path:
    return resolve_path(logs_dir or settings.TRANSCRIPT_LOGS_DIR)
