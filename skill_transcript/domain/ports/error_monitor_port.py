from __future__ import annotations

from abc import ABC, abstractmethod

from ..entities.error_log import ErrorLog


class ErrorMonitorPort(ABC):
    """Sink for failed jobs. Implementations report their own I/O problems
    instead of raising, so the original error is the one that propagates."""

    @abstractmethod
    async def log_error(self, error: ErrorLog) -> None:
        raise NotImplementedError
