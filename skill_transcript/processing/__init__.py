from .chunk_transcriber import ChunkTranscriber
from .chunker import plan_chunks, split
from .formatter import format_transcript, parse_transcript_json
from .merge import TranscriptMerger, exact_similarity, merge, sequence_similarity
from .size_guard import fits

__all__ = [
    "ChunkTranscriber",
    "TranscriptMerger",
    "exact_similarity",
    "fits",
    "format_transcript",
    "merge",
    "parse_transcript_json",
    "plan_chunks",
    "sequence_similarity",
    "split",
]
