from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path

import aiofiles

from ...domain.entities.error_log import ErrorLog
from ...domain.ports.error_monitor_port import ErrorMonitorPort
from ...shared.fs__shared_util import ensure_directory


class JsonErrorMonitorAdapter(ErrorMonitorPort):
    """Keeps failed transcription jobs as a JSON array in the logs directory."""

    def __init__(self, errors_path: str | Path):
        self.errors_path = Path(errors_path)
        self._lock = asyncio.Lock()

    async def _load(self) -> list[dict]:
        if not self.errors_path.exists():
            return []
        async with aiofiles.open(self.errors_path, "r", encoding="utf-8") as f:
            raw = await f.read()
        entries = json.loads(raw) if raw.strip() else []
        return entries if isinstance(entries, list) else []

    async def log_error(self, error: ErrorLog) -> None:
        async with self._lock:
            try:
                ensure_directory(self.errors_path.parent)
                entries = await self._load()
                entries.append(error.model_dump(mode="json"))
                async with aiofiles.open(self.errors_path, "w", encoding="utf-8") as f:
                    await f.write(json.dumps(entries, indent=2, ensure_ascii=False))
            except (OSError, ValueError) as e:
                print(f"Could not record {error.error_type} for session {error.session_id}: {e}", file=sys.stderr)
