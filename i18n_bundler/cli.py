"""Generate resource bundle files from an element manifest."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Sequence

from pydantic import ValidationError

from i18n_bundler.core.config import I18nSettings, get_settings
from i18n_bundler.core.errors import I18nProcessingError
from i18n_bundler.schemas.elements import ProcessingRound
from i18n_bundler.services.bundles import FileSystemResourceSink, ResourceLocation
from i18n_bundler.services.processor import I18nProcessor

logger = logging.getLogger("i18n_bundler.cli")

EXIT_OK = 0
EXIT_SKIPPED = 1
EXIT_FAILED = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="i18n-bundler",
        description=(
            "Collect annotated texts and messages from an element manifest, merge "
            "AdditionalTexts.xml and write one .properties bundle per locale."
        ),
    )
    parser.add_argument("manifest", help="JSON manifest describing the annotated elements.")
    parser.add_argument(
        "--source-output",
        help="Directory for the generated sources copy (default: I18N_SOURCE_OUTPUT).",
    )
    parser.add_argument(
        "--class-output",
        help="Directory for the compiled classes copy (default: I18N_CLASS_OUTPUT).",
    )
    parser.add_argument(
        "--source-path",
        action="append",
        default=[],
        help="Source root searched for AdditionalTexts.xml; may be repeated.",
    )
    parser.add_argument(
        "--additional-text-location",
        help="Folder holding AdditionalTexts.xml (default: I18N_ADDITIONAL_TEXT_LOCATION).",
    )
    parser.add_argument(
        "--log-level",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Logging verbosity (default: LOG_LEVEL or INFO).",
    )
    return parser


def load_round(path: Path) -> ProcessingRound:
    return ProcessingRound.model_validate_json(path.read_text(encoding="utf-8"))


def _apply_overrides(settings: I18nSettings, args: argparse.Namespace) -> I18nSettings:
    updates: dict[str, object] = {}
    if args.source_output:
        updates["source_output_dir"] = args.source_output
    if args.class_output:
        updates["class_output_dir"] = args.class_output
    if args.additional_text_location:
        updates["additional_text_location"] = args.additional_text_location
    if args.log_level:
        updates["log_level"] = args.log_level
    return settings.model_copy(update=updates) if updates else settings


def run(args: argparse.Namespace) -> int:
    settings = _apply_overrides(get_settings(), args)
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )

    manifest_path = Path(args.manifest).expanduser()
    try:
        processing_round = load_round(manifest_path)
    except (OSError, ValidationError) as exc:
        logger.error("Unable to load manifest %s: %s", manifest_path, exc)
        return EXIT_FAILED

    sink = FileSystemResourceSink(
        {
            ResourceLocation.SOURCE_OUTPUT: Path(settings.source_output_dir),
            ResourceLocation.CLASS_OUTPUT: Path(settings.class_output_dir),
        }
    )
    processor = I18nProcessor(settings, sink, source_path=args.source_path)
    try:
        processed = processor.process(processing_round)
    except I18nProcessingError as exc:
        logger.error("Resource bundle generation failed: %s", exc)
        return EXIT_FAILED
    return EXIT_OK if processed else EXIT_SKIPPED


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    raise SystemExit(run(args))


if __name__ == "__main__":  # pragma: no cover - script entry point
    main()
