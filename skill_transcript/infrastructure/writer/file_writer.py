from __future__ import annotations

from pathlib import Path

import aiofiles

from ...domain.ports.transcript_writer_port import TranscriptWriterPort
from ...shared.fs__shared_util import ensure_directory


class AiofilesTranscriptWriter(TranscriptWriterPort):
    async def write(self, path: Path, content: str) -> Path:
        ensure_directory(path.parent)
        async with aiofiles.open(path, "w", encoding="utf-8") as f:
            await f.write(content)
        return path
