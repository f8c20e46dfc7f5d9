from __future__ import annotations

from ..domain.entities.capability import ProviderCapability


def fits(file_size_bytes: int, capability: ProviderCapability | int) -> bool:
    limit = capability if isinstance(capability, int) else capability.max_file_size
    return file_size_bytes <= limit


def fmt_megabytes(size: int) -> str:
    return f"{size / 1024 / 1024:.2f}MB"
