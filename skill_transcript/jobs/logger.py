from __future__ import annotations

import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TextIO
from uuid import uuid4


def new_session_id() -> str:
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
    return f"{stamp}_{uuid4().hex[:8]}"


class JobLogger:
    """Log context for one transcription job.

    Created by the caller and handed to every component that reports
    progress, so nothing in the package keeps log state of its own.
    """

    def __init__(
        self,
        log_path: Path | None,
        *,
        session_id: str | None = None,
        echo: bool = False,
        stream: TextIO | None = None,
    ):
        self.log_path = log_path
        self.session_id = session_id or new_session_id()
        self.echo = echo
        self.stream = stream
        if self.log_path is not None:
            self.log_path.parent.mkdir(parents=True, exist_ok=True)

    def write(self, message: str) -> None:
        ts = datetime.now(timezone.utc).isoformat()
        line = f"[{ts}] [{self.session_id}] {message}"
        if self.log_path is not None:
            with self.log_path.open("a", encoding="utf-8") as f:
                f.write(line + "\n")
        if self.echo:
            print(message, file=self.stream or sys.stderr)


class NullLogger(JobLogger):
    def __init__(self) -> None:
        super().__init__(None, session_id="null")

    def write(self, message: str) -> None:
        return None
