from __future__ import annotations

import shutil
import subprocess
from pathlib import Path


def ensure_directory(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def which(cmd: str) -> str | None:
    return shutil.which(cmd)


def run(cmd: list[str], *, check: bool = True, capture: bool = False, cwd: Path | None = None):
    if capture:
        return subprocess.run(
            cmd,
            cwd=str(cwd) if cwd else None,
            check=check,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            errors="replace",
        )
    return subprocess.run(cmd, cwd=str(cwd) if cwd else None, check=check)
