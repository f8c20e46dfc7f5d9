from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import TextIO

from .application.use_cases.transcribe_file import TranscribeFileUseCase
from .domain.entities.capability import all_capabilities
from .domain.entities.request import ProviderName, TranscriptionRequest
from .domain.errors import ConfigurationError, TranscriptionError
from .infrastructure.monitoring.json_monitor_adapter import JsonErrorMonitorAdapter
from .infrastructure.providers import build_transcriber
from .infrastructure.tools.audio_tools import FfmpegAudioTools
from .infrastructure.writer.file_writer import AiofilesTranscriptWriter
from .jobs.logger import JobLogger, new_session_id
from .jobs.paths import JobPaths
from .jobs.utils import logs_root
from .processing.formatter import resolve_format
from .settings import Settings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="skill-transcript",
        description="Speech-to-text with ElevenLabs, OpenAI Whisper or Google Gemini, with automatic chunking",
    )
    sub = parser.add_subparsers(dest="command")

    t = sub.add_parser("transcribe", help="Transcribe an audio/video file")
    t.add_argument("--input", type=Path, help="Input audio/video file")
    t.add_argument("--output", type=Path, help="Output path (default: input name + format extension)")
    t.add_argument("--provider", help="Provider: elevenlabs, openai, gemini")
    t.add_argument("--language", help="Language code, e.g. en, es, fr")
    t.add_argument("--model", help="Specific model to use")
    t.add_argument("--diarize", action="store_true", help="Enable speaker diarization (ElevenLabs, Gemini)")
    t.add_argument("--speakers", type=int, help="Maximum number of speakers to distinguish")
    t.add_argument(
        "--timestamps",
        action="store_true",
        help="Include timestamps in output (word-level where the provider supports it)",
    )
    t.add_argument("--format", help="Output format: text, srt, vtt, json")
    t.add_argument("--max-parallel", type=int, help="Chunk requests kept in flight at once")
    t.add_argument("--chunk-seconds", type=float, help="Target chunk window in seconds")
    t.add_argument("--overlap-seconds", type=float, help="Overlap between consecutive chunks in seconds")
    t.add_argument("--timeout", type=float, help="Per-request timeout in seconds")
    t.add_argument("--no-chunking", action="store_true", help="Fail instead of chunking oversized files")
    t.add_argument("--quiet", action="store_true", help="Do not echo progress to stderr")

    sub.add_parser("providers", help="Show available providers and their capabilities")
    sub.add_parser("help", help="Show this help message")
    return parser


def _settings_for(args: argparse.Namespace, base: Settings) -> Settings:
    overrides: dict = {}
    if args.max_parallel is not None:
        overrides["MAX_PARALLEL_CHUNKS"] = args.max_parallel
    if args.chunk_seconds is not None:
        overrides["CHUNK_TARGET_SECONDS"] = args.chunk_seconds
    if args.overlap_seconds is not None:
        overrides["CHUNK_OVERLAP_SECONDS"] = args.overlap_seconds
    if args.timeout is not None:
        overrides["REQUEST_TIMEOUT_SECONDS"] = args.timeout
    if args.no_chunking:
        overrides["CHUNKING_ENABLED"] = False
    if args.quiet:
        overrides["TRANSCRIPT_ECHO_LOGS"] = False
    return base.model_copy(update=overrides) if overrides else base


def _provider(value: str) -> ProviderName:
    try:
        return ProviderName(value.strip().lower())
    except ValueError:
        available = ", ".join(p.value for p in ProviderName)
        raise ConfigurationError(f"Unknown provider: {value}. Available: {available}") from None


def build_request(args: argparse.Namespace, settings: Settings) -> TranscriptionRequest:
    if not args.input:
        raise ConfigurationError("--input is required")
    return TranscriptionRequest(
        input_path=args.input,
        provider=_provider(args.provider or settings.TRANSCRIPT_DEFAULT_PROVIDER),
        language=args.language,
        model=args.model,
        diarize=args.diarize,
        timestamps=args.timestamps,
        max_speakers=args.speakers,
        output_format=resolve_format(args.format or settings.TRANSCRIPT_DEFAULT_FORMAT),
        output_path=args.output,
    )


async def run_transcription(request: TranscriptionRequest, settings: Settings, logger: JobLogger) -> dict:
    paths = JobPaths(logs_root(settings.TRANSCRIPT_LOGS_DIR), logger.session_id)
    async with build_transcriber(request.provider, settings, logger=logger) as transcriber:
        use_case = TranscribeFileUseCase(
            transcriber,
            FfmpegAudioTools(),
            AiofilesTranscriptWriter(),
            JsonErrorMonitorAdapter(paths.errors_path),
            logger,
            settings,
        )
        return await use_case.execute(request)


def print_providers(out: TextIO) -> None:
    print("\nAvailable Transcription Providers:\n", file=out)
    for cap in all_capabilities():
        size = cap.max_file_size / 1024 / 1024
        limit = f"{size / 1024:.0f}GB" if size >= 1024 else f"{size:.0f}MB"
        features = ["segment timestamps"]
        if cap.supports_word_timestamps:
            features.append("word timestamps")
        if cap.supports_diarization:
            features.append(f"speaker diarization (up to {cap.max_speakers} speakers)")
        print(f"{cap.name.value.upper()} ({cap.label})", file=out)
        print(f"  - Max file size: {limit} (auto-chunking for larger files)", file=out)
        print(f"  - Features: {', '.join(features)}", file=out)
        print(f"  - Default model: {cap.default_model}", file=out)
        print("", file=out)


def print_summary(result: dict, out: TextIO) -> None:
    print("\nTranscription complete!", file=out)
    print(f"Output: {result['output_path']}", file=out)
    print(f"Format: {result['format']}", file=out)
    if result.get("duration"):
        print(f"Duration: {round(result['duration'])}s", file=out)
    if result.get("language"):
        print(f"Detected language: {result['language']}", file=out)
    print(f"Segments: {result['segments']}", file=out)
    if result.get("speakers"):
        print(f"Speakers: {result['speakers']}", file=out)
    if result.get("chunks", 1) > 1:
        print(f"Chunks: {result['chunks']}", file=out)
    print(f"Words: {result['words']:,}", file=out)


def main(argv: list[str] | None = None, *, settings: Settings | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command in (None, "help"):
        parser.print_help()
        return 0
    if args.command == "providers":
        print_providers(sys.stdout)
        return 0

    try:
        settings = _settings_for(args, settings or Settings())
        request = build_request(args, settings)
        session_id = new_session_id()
        paths = JobPaths(logs_root(settings.TRANSCRIPT_LOGS_DIR), session_id)
        logger = JobLogger(paths.log_path, session_id=session_id, echo=settings.TRANSCRIPT_ECHO_LOGS)
        result = asyncio.run(run_transcription(request, settings, logger))
    except TranscriptionError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("Error: transcription cancelled", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print_summary(result, sys.stdout)
    return 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
