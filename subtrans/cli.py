"""Command line interface for translating subtitle files."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional, Sequence

from . import config_manager as cfg
from . import logging_manager as log_mgr
from .errors import EmptySubtitle, StoreUnavailable, TranslationNotConfigured
from .jobs import ChunkedJobProcessor, JobRepository, TranslationJobService
from .storage import RedisBlobStore, create_blob_store
from .subtitles import SubtitleProcessingError, parse_srt, read_subtitle_file
from .translation import create_client, translate_srt

logger = log_mgr.get_logger().getChild("cli")

DEFAULT_POLL_INTERVAL = 0.0


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI parser with explicit sub-commands."""

    parser = argparse.ArgumentParser(
        description="subtrans command line interface", allow_abbrev=False
    )
    parser.add_argument(
        "--config",
        dest="config_file",
        help="Path to an alternative JSON configuration file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    translate_parser = subparsers.add_parser(
        "translate", help="Translate an SRT file", allow_abbrev=False
    )
    translate_parser.add_argument("input", help="Path to the SRT file to translate.")
    translate_parser.add_argument(
        "--target-language",
        dest="target_language",
        help="Target language passed to the translator (defaults to the configured language).",
    )
    translate_parser.add_argument("--note", help="Additional context included in every prompt.")
    translate_parser.add_argument(
        "--output",
        help="Where to write the translated SRT (defaults to stdout).",
    )
    translate_parser.add_argument(
        "--poll-interval",
        dest="poll_interval",
        type=float,
        default=DEFAULT_POLL_INTERVAL,
        help="Seconds to wait between job polls (default: %(default)s)",
    )
    translate_parser.add_argument(
        "--one-shot",
        dest="one_shot",
        action="store_true",
        help="Translate the whole track in one pass instead of through a resumable job.",
    )
    translate_parser.set_defaults(command="translate")
    return parser


async def _translate_with_job(
    srt: str,
    settings: cfg.SubtransSettings,
    *,
    target_language: Optional[str],
    note: Optional[str],
    poll_interval: float,
) -> str:
    store = create_blob_store(settings.blob_store_url, namespace=settings.redis_namespace)
    repository = JobRepository(store)
    try:
        async with create_client(
            settings, max_completion_tokens=settings.job_max_completion_tokens
        ) as client:
            processor = ChunkedJobProcessor(
                repository, client, concurrency=settings.translate_concurrency
            )
            service = TranslationJobService(
                repository,
                processor,
                default_target_language=settings.default_target_language,
            )
            job_id = await service.submit(srt, target_language, note)
            while True:
                progress = await service.poll(job_id)
                logger.info(
                    "Translated %s/%s cues",
                    progress.processed,
                    progress.total,
                    extra={"event": "cli.progress", "job_id": job_id},
                )
                if progress.completed:
                    return progress.srt or ""
                if poll_interval > 0:
                    await asyncio.sleep(poll_interval)
    finally:
        if isinstance(store, RedisBlobStore):
            await store.aclose()


async def _translate_one_shot(
    srt: str,
    settings: cfg.SubtransSettings,
    *,
    target_language: Optional[str],
    note: Optional[str],
) -> str:
    language = (target_language or "").strip() or settings.default_target_language
    async with create_client(
        settings, max_completion_tokens=settings.one_shot_max_completion_tokens
    ) as client:
        result = await translate_srt(
            srt, client, language, note, concurrency=settings.one_shot_concurrency
        )
    return result.srt


def _write_output(result: str, output: Optional[str]) -> None:
    if output:
        Path(output).expanduser().write_text(result, encoding="utf-8")
        logger.info("Translated subtitles written to %s", output)
        return
    sys.stdout.write(result + "\n")
    sys.stdout.flush()


def execute_translate(args: argparse.Namespace) -> int:
    """Run the ``translate`` sub-command and return its exit code."""

    try:
        srt = read_subtitle_file(Path(args.input).expanduser())
    except OSError as exc:
        sys.stderr.write(f"Unable to read {args.input}: {exc}\n")
        return 2
    except SubtitleProcessingError as exc:
        sys.stderr.write(f"{exc}\n")
        return 2
    if not parse_srt(srt):
        sys.stderr.write(f"{args.input} contains no subtitle cues\n")
        return 2

    try:
        settings = cfg.load_settings(args.config_file)
    except RuntimeError as exc:
        sys.stderr.write(f"{exc}\n")
        return 1
    log_mgr.configure_logging_level(log_level=settings.log_level)

    try:
        if args.one_shot:
            result = asyncio.run(
                _translate_one_shot(
                    srt, settings, target_language=args.target_language, note=args.note
                )
            )
        else:
            result = asyncio.run(
                _translate_with_job(
                    srt,
                    settings,
                    target_language=args.target_language,
                    note=args.note,
                    poll_interval=args.poll_interval,
                )
            )
    except EmptySubtitle as exc:
        sys.stderr.write(f"{exc}\n")
        return 2
    except (TranslationNotConfigured, StoreUnavailable) as exc:
        sys.stderr.write(f"{exc}\n")
        return 1

    _write_output(result, args.output)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Primary console script entry point."""

    args = build_parser().parse_args(argv)
    if args.command == "translate":
        return execute_translate(args)
    return 2


if __name__ == "__main__":  # pragma: no cover - manual execution
    sys.exit(main())
