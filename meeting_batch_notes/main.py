"""
Command line driver for the batch meeting notes tool.

Finds every work item (audio waiting in the input folder, or a folder already
present in the output folder), and brings each one up to date: transcribe the
audio if there is no transcript yet, then write notes if there are none.
"""

import argparse
import logging
import sys
from typing import List, Optional

from .config import AppConfig, DEFAULT_PROVIDER, SUPPORTED_PROVIDERS
from .error_handling import MissingCredentialError, ProcessingError, handle_processing_error
from .file_manager import ArtifactStore, DirectoryWorkItemSource
from .models import BatchReport
from .notes_generator import NotesGenerator
from .processing_pipeline import ArtifactPipeline
from .transcription import create_transcriber

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="meeting-batch-notes",
        description="Transcribe recorded meetings and generate notes, skipping work already done.",
    )
    parser.add_argument("--openai-api-key", metavar="<key>",
                        help="Set OpenAI API key. Overrides OPENAI_API_KEY env variable.")
    parser.add_argument("--groq-api-key", metavar="<key>",
                        help="Set Groq API key. Overrides GROQ_API_KEY env variable.")
    parser.add_argument("--provider", metavar="<openai|groq>",
                        help=f"Specify the transcription provider (default: {DEFAULT_PROVIDER}).")
    parser.add_argument("--input-dir", help="Folder with recorded audio (default: ./tmp).")
    parser.add_argument("--output-dir", help="Folder with one subfolder per meeting (default: ./data).")
    parser.add_argument("--fail-fast", action="store_true",
                        help="Stop at the first meeting that fails instead of continuing.")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging.")
    return parser


def resolve_provider(value: Optional[str]) -> Optional[str]:
    """Normalize a --provider value; unknown names fall back to the default."""
    if value is None:
        return None
    provider = value.lower()
    if provider not in SUPPORTED_PROVIDERS:
        logger.warning(f"Unknown provider: {value}. Defaulting to {DEFAULT_PROVIDER}.")
        return DEFAULT_PROVIDER
    return provider


def run_batch(pipeline: ArtifactPipeline, source, fail_fast: bool = False) -> BatchReport:
    """
    Run the pipeline over every work item from a source, one at a time.

    A failed item is logged with its name and recorded in the report; the
    remaining items still run unless fail_fast is set, in which case the
    first error is raised.
    """
    report = BatchReport()

    for name in source.list_names():
        try:
            report.results.append(pipeline.process(name))
        except ProcessingError as e:
            logger.error(f"Failed to process {name}: {e.user_message}")
            report.failed[name] = e.message
            if fail_fast:
                raise

    logger.info(
        f"Processed {report.processed} work items, {len(report.failed)} failed"
    )
    return report


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = AppConfig.load_from_env().with_overrides(
        provider=resolve_provider(args.provider),
        openai_api_key=args.openai_api_key,
        groq_api_key=args.groq_api_key,
        input_dir=args.input_dir,
        output_dir=args.output_dir,
    )
    provider = resolve_provider(config.providers.provider)

    try:
        transcriber = create_transcriber(provider, config)
    except MissingCredentialError as e:
        handle_processing_error(e, "main", "create_transcriber")
        print(f"Error: {provider} provider selected but {provider} API key is missing.", file=sys.stderr)
        return 1

    store = ArtifactStore.from_config(config.files)
    pipeline = ArtifactPipeline(store, transcriber, NotesGenerator(config))
    source = DirectoryWorkItemSource.from_config(config.files)

    try:
        report = run_batch(pipeline, source, fail_fast=args.fail_fast)
    except ProcessingError:
        return 1

    return 0 if report.succeeded else 1


if __name__ == "__main__":
    sys.exit(main())
