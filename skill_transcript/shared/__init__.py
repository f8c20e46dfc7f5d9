from .fs__shared_util import ensure_directory, run, which

__all__ = [
    "ensure_directory",
    "run",
    "which",
]
