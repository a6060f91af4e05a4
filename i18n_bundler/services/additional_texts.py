"""Reader for the ``AdditionalTexts.xml`` file.

The document is validated against ``AdditionalText.dtd`` before anything is
stored; the DTD is always taken from the copy bundled with this package. The
validated tree is then replayed as start/end events through a small state
machine that builds one :class:`TextEntry` per ``translation`` element.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import IO, Final, Union

from lxml import etree

from i18n_bundler.core.config import ADDITIONAL_TEXT_FILE
from i18n_bundler.core.errors import AdditionalTextParseError, AdditionalTextReadError
from i18n_bundler.schemas.entries import TextEntry
from i18n_bundler.services.locales import resolve_locale
from i18n_bundler.services.store import TextStore

logger = logging.getLogger("i18n_bundler.additional_texts")

ADDITIONAL_TEXT_DTD_SYSTEM_ID: Final[str] = "http://dtd.tquadrat.org/AdditionalText.dtd"
ADDITIONAL_TEXT_DTD_RESOURCE: Final[str] = "AdditionalText.dtd"

Source = Union[str, Path, IO[bytes]]


@lru_cache
def load_bundled_dtd() -> bytes:
    return resources.files("i18n_bundler.resources").joinpath(ADDITIONAL_TEXT_DTD_RESOURCE).read_bytes()


class LocalDTDResolver(etree.Resolver):
    """Serve the additional texts DTD from the package instead of the network."""

    def resolve(self, system_url, public_id, context):
        if system_url == ADDITIONAL_TEXT_DTD_SYSTEM_ID:
            logger.debug("Resolving %s from bundled resource", system_url)
            return self.resolve_string(load_bundled_dtd(), context)
        return None


class _State(enum.Enum):
    IDLE = "idle"
    IN_TEXT = "in_text"
    IN_DESCRIPTION = "in_description"
    IN_TRANSLATION = "in_translation"


@dataclass
class _PendingText:
    key: str
    description: list[str] = field(default_factory=list)


@dataclass
class _PendingTranslation:
    locale: str
    text: list[str] = field(default_factory=list)


class AdditionalTextParser:
    def __init__(self, store: TextStore, *, origin: str = ADDITIONAL_TEXT_FILE) -> None:
        self._store = store
        self._origin = origin
        self._state = _State.IDLE
        self._text: _PendingText | None = None
        self._translation: _PendingTranslation | None = None
        self.inserted = 0

    def parse(self, source: Source) -> int:
        """Merge the entries of ``source`` into the store; return how many were added."""
        tree = self._validate(str(source) if isinstance(source, Path) else source)
        self._reset()
        self.inserted = 0
        for event, element in etree.iterwalk(tree, events=("start", "end")):
            if not isinstance(element.tag, str):
                continue
            if event == "start":
                self._start_element(element)
            else:
                self._end_element(element.tag)
        logger.info("Merged %s additional text entries", self.inserted)
        return self.inserted

    def _validate(self, source: Source) -> etree._ElementTree:
        parser = etree.XMLParser(dtd_validation=True, no_network=True)
        parser.resolvers.add(LocalDTDResolver())
        try:
            tree = etree.parse(source, parser)
        except etree.LxmlError as exc:
            raise AdditionalTextParseError(
                f"Unable to parse file '{self._origin}': {exc}"
            ) from exc
        except OSError as exc:
            raise AdditionalTextReadError(f"Unable to read file '{self._origin}': {exc}") from exc

        for text in tree.getroot().iter("text"):
            if not (text.get("key") or "").strip():
                raise AdditionalTextParseError(
                    f"Unable to parse file '{self._origin}': line {text.sourceline}: "
                    "attribute 'key' must not be empty"
                )
        return tree

    def _start_element(self, element: etree._Element) -> None:
        tag = element.tag
        if tag == "texts":
            self._reset()
        elif tag == "text":
            self._reset()
            self._text = _PendingText(key=element.get("key", ""))
            self._state = _State.IN_TEXT
        elif tag == "description":
            self._state = _State.IN_DESCRIPTION
            if self._text is not None:
                self._text.description.clear()
            for chunk in _character_chunks(element):
                self._characters(chunk)
        elif tag == "translation":
            self._translation = _PendingTranslation(locale=resolve_locale(element.get("language")))
            self._state = _State.IN_TRANSLATION
            for chunk in _character_chunks(element):
                self._characters(chunk)

    def _characters(self, chunk: str) -> None:
        folded = "".join(chunk.splitlines())
        if self._state is _State.IN_DESCRIPTION and self._text is not None:
            if folded.strip():
                self._text.description.append(folded.strip())
        elif self._state is _State.IN_TRANSLATION and self._translation is not None:
            self._translation.text.append(folded)

    def _end_element(self, tag: str) -> None:
        if tag in ("texts", "text"):
            self._reset()
        elif tag == "description":
            self._state = _State.IN_TEXT
        elif tag == "translation":
            if self._text is not None and self._translation is not None:
                entry = TextEntry(
                    key=self._text.key,
                    is_message=False,
                    locale=self._translation.locale,
                    description="".join(self._text.description),
                    text="".join(self._translation.text),
                    class_name=self._origin,
                )
                self._store.insert(entry.locale, entry)
                self.inserted += 1
            self._translation = None
            self._state = _State.IN_TEXT

    def _reset(self) -> None:
        self._state = _State.IDLE
        self._text = None
        self._translation = None


def _character_chunks(element: etree._Element) -> list[str]:
    chunks = [element.text] if element.text else []
    chunks.extend(child.tail for child in element if child.tail)
    return chunks
