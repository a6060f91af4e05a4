from __future__ import annotations

import logging
from collections.abc import Iterator

from i18n_bundler.core.errors import DuplicateKeyError
from i18n_bundler.schemas.entries import TextEntry

logger = logging.getLogger("i18n_bundler.store")


class TextStore:
    """Text entries grouped by locale; keys are unique within a locale."""

    def __init__(self) -> None:
        self._by_locale: dict[str, dict[str, TextEntry]] = {}

    def insert(self, locale: str, entry: TextEntry) -> None:
        bucket = self._by_locale.setdefault(locale, {})
        if entry.key in bucket:
            raise DuplicateKeyError(entry.key, entry.annotation, entry.class_name)
        bucket[entry.key] = entry
        logger.debug("Stored %s for locale %s", entry.key, locale)

    def entries_for(self, locale: str) -> list[TextEntry]:
        bucket = self._by_locale.get(locale)
        if not bucket:
            return []
        return [bucket[key] for key in sorted(bucket)]

    def locales(self) -> set[str]:
        return {locale for locale, bucket in self._by_locale.items() if bucket}

    def __contains__(self, item: object) -> bool:
        if not isinstance(item, tuple) or len(item) != 2:
            return False
        locale, key = item
        return key in self._by_locale.get(locale, {})

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self._by_locale.values())

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self.locales()))
