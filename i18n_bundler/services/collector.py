from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import NoReturn

from i18n_bundler.core.config import ProcessingConfig
from i18n_bundler.core.diagnostics import DiagnosticKind, LoggingMessager, Messager
from i18n_bundler.core.errors import (
    ConfigurationError,
    DuplicateKeyError,
    I18nProcessingError,
    IllegalAnnotationUseError,
    UnsupportedElementKindError,
)
from i18n_bundler.schemas.elements import AnnotatedElement, ElementKind, TextAnnotation, Translation
from i18n_bundler.schemas.entries import TextEntry
from i18n_bundler.services.keys import compose_message_key, compose_text_key, derive_key
from i18n_bundler.services.locales import resolve_locale
from i18n_bundler.services.store import TextStore

logger = logging.getLogger("i18n_bundler.collector")


class TextCollector:
    """Turn message and text annotations into store entries."""

    def __init__(self, config: ProcessingConfig, messager: Messager | None = None) -> None:
        if not config.message_prefix:
            raise ConfigurationError("Message prefix must not be empty")
        self._config = config
        self._messager = messager or LoggingMessager(logger)

    def collect_all(self, elements: Iterable[AnnotatedElement], store: TextStore) -> list[AnnotatedElement]:
        processed: list[AnnotatedElement] = []
        for element in elements:
            self.collect(element, store)
            processed.append(element)
        return processed

    def collect(self, element: AnnotatedElement, store: TextStore) -> None:
        kind = element.kind
        if kind in (ElementKind.FIELD, ElementKind.ENUM_CONSTANT):
            self._visit_field(element, store)
        elif kind is ElementKind.METHOD:
            if element.message is not None:
                self._fail(IllegalAnnotationUseError(element.name, "Message"), element)
            self._process_texts(element, store)
        else:
            raise UnsupportedElementKindError(kind)

    def _visit_field(self, element: AnnotatedElement, store: TextStore) -> None:
        if element.message is not None:
            value = element.constant_value
            if isinstance(value, int) and not isinstance(value, bool):
                key = compose_message_key(self._config.message_prefix, value)
            elif value is not None:
                key = compose_message_key(self._config.message_prefix, str(value))
            else:
                key = compose_message_key(self._config.message_prefix, element.name)
            self.add_text_entry(
                store,
                element,
                key=key,
                description=element.message.description,
                is_message=True,
                translations=element.message.translations,
            )
        self._process_texts(element, store)

    def _process_texts(self, element: AnnotatedElement, store: TextStore) -> None:
        for annotation in element.texts:
            self._process_text_annotation(element, annotation, store)

    def _process_text_annotation(
        self,
        element: AnnotatedElement,
        annotation: TextAnnotation,
        store: TextStore,
    ) -> None:
        try:
            derived = derive_key(
                element.kind,
                element.name,
                explicit_id=annotation.id,
                use=annotation.use,
            )
        except I18nProcessingError as exc:
            self._fail(exc, element)
        key = compose_text_key(element.enclosing_type, derived.use, derived.id)
        self.add_text_entry(
            store,
            element,
            key=key,
            description=annotation.description,
            is_message=False,
            translations=annotation.translations,
        )

    def add_text_entry(
        self,
        store: TextStore,
        element: AnnotatedElement,
        *,
        key: str,
        description: str,
        is_message: bool,
        translations: Sequence[Translation],
    ) -> None:
        for translation in translations:
            try:
                locale = resolve_locale(translation.language)
            except I18nProcessingError as exc:
                self._fail(exc, element)
            entry = TextEntry(
                key=key,
                is_message=is_message,
                locale=locale,
                description=description,
                text=translation.text,
                class_name=element.enclosing_type,
            )
            try:
                store.insert(locale, entry)
            except DuplicateKeyError as exc:
                self._fail(exc, element)

    def _fail(self, exc: I18nProcessingError, element: AnnotatedElement) -> NoReturn:
        self._messager.print_message(DiagnosticKind.ERROR, str(exc), element)
        raise exc
