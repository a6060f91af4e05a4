from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from pathlib import Path

from i18n_bundler.core.config import ADDITIONAL_TEXT_FILE, I18nSettings, ProcessingConfig
from i18n_bundler.core.diagnostics import DiagnosticKind, LoggingMessager, Messager
from i18n_bundler.core.errors import (
    AdditionalTextReadError,
    ConfigurationError,
    I18nProcessingError,
    InvalidLocaleError,
    MultipleElementsError,
    ResourceIOError,
)
from i18n_bundler.schemas.elements import ProcessingRound
from i18n_bundler.services.additional_texts import AdditionalTextParser
from i18n_bundler.services.bundles import BundleGenerator, ResourceSink
from i18n_bundler.services.collector import TextCollector
from i18n_bundler.services.locales import resolve_locale
from i18n_bundler.services.store import TextStore

logger = logging.getLogger("i18n_bundler.processor")


class I18nProcessor:
    """Run one processing round: collect texts, merge additional texts, write bundles."""

    def __init__(
        self,
        settings: I18nSettings,
        sink: ResourceSink,
        messager: Messager | None = None,
        *,
        source_path: Sequence[Path | str] = (),
    ) -> None:
        self._settings = settings
        self._sink = sink
        self._messager = messager or LoggingMessager(logger)
        self._source_path = [Path(entry) for entry in source_path]

    def process(self, processing_round: ProcessingRound) -> bool:
        names = processing_round.annotation_names()
        if names:
            plural = "s" if len(names) > 1 else ""
            quoted = "', '".join(names)
            self._note(f"Processing the annotation{plural} '{quoted}'")
        else:
            self._note("No annotations to process")

        result = not processing_round.error_raised and bool(names)
        if not result:
            return result

        config = self.build_config(processing_round)
        store = TextStore()
        collector = TextCollector(config, self._messager)
        annotated = [
            element
            for element in processing_round.elements
            if element.message is not None or element.texts
        ]
        processed = collector.collect_all(annotated, store)
        logger.debug("Collected %s entries from %s elements", len(store), len(processed))

        location = self._provided_location(processing_round)
        self._note("Generate ResourceBundles")
        text_file = self.locate_additional_texts(location)
        if text_file is not None:
            self._merge_additional_texts(text_file, store)

        BundleGenerator(config, self._sink, self._messager).generate(store, processed)
        return result

    def build_config(self, processing_round: ProcessingRound) -> ProcessingConfig:
        prefix = self._settings.message_prefix
        if processing_round.message_prefix:
            prefix = processing_round.message_prefix[0].value
        if not prefix:
            exc = ConfigurationError("Message prefix must not be empty")
            self._error(str(exc))
            raise exc

        base_bundle_name = self._settings.base_bundle_name
        language = self._settings.default_language
        if processing_round.base_bundle_name:
            marker = processing_round.base_bundle_name[0]
            base_bundle_name = marker.value
            language = marker.default_language or language

        try:
            default_locale = resolve_locale(language)
        except InvalidLocaleError as exc:
            self._error(str(exc))
            raise
        return ProcessingConfig(
            message_prefix=prefix,
            base_bundle_name=base_bundle_name,
            default_locale=default_locale,
        )

    def locate_additional_texts(self, provided_location: str | None = None) -> Path | None:
        """Find ``AdditionalTexts.xml``; the first readable candidate wins."""
        if provided_location:
            found = self._search_folder(provided_location, "provided location")
            if found is not None:
                return found
        if self._settings.additional_text_location:
            found = self._search_folder(
                self._settings.additional_text_location, "configured location"
            )
            if found is not None:
                return found
        return self._search_source_path()

    def _provided_location(self, processing_round: ProcessingRound) -> str | None:
        markers = processing_round.use_additional_texts
        if len(markers) > 1:
            exc = MultipleElementsError("UseAdditionalTexts", len(markers))
            self._error(str(exc))
            raise exc
        if not markers:
            return None
        location = markers[0].location
        return location if location.strip() else None

    def _search_folder(self, location: str, label: str) -> Path | None:
        folder = Path(location).expanduser()
        if not folder.is_dir():
            return None
        text_file = folder / ADDITIONAL_TEXT_FILE
        try:
            text_file = text_file.resolve(strict=True)
        except FileNotFoundError:
            return None
        except OSError as exc:
            self._note(f"Cannot open file '{text_file}' with additional texts: {exc}")
            return None
        if text_file.is_file() and os.access(text_file, os.R_OK):
            self._note(f"Reading additional texts from '{text_file.as_uri()}' ({label})")
            return text_file
        self._note(f"Cannot open file '{text_file}' with additional texts")
        return None

    def _search_source_path(self) -> Path | None:
        for root in self._source_path:
            text_file = root / ADDITIONAL_TEXT_FILE
            if not text_file.is_file():
                continue
            if not os.access(text_file, os.R_OK):
                message = f"Unable to read file '{text_file}' with additional texts"
                self._error(message)
                raise AdditionalTextReadError(message)
            self._note(f"Reading additional texts from '{text_file.resolve().as_uri()}' (source tree)")
            return text_file
        return None

    def _merge_additional_texts(self, text_file: Path, store: TextStore) -> None:
        parser = AdditionalTextParser(store)
        try:
            with text_file.open("rb") as stream:
                parser.parse(stream)
        except OSError as exc:
            message = f"Unable to read file '{ADDITIONAL_TEXT_FILE}': {exc}"
            self._error(message)
            raise AdditionalTextReadError(message) from exc
        except ResourceIOError as exc:
            self._error(str(exc))
            raise
        except I18nProcessingError as exc:
            self._error(f"{ADDITIONAL_TEXT_FILE}: {exc}")
            raise

    def _note(self, message: str) -> None:
        self._messager.print_message(DiagnosticKind.NOTE, message)

    def _error(self, message: str) -> None:
        self._messager.print_message(DiagnosticKind.ERROR, message)
