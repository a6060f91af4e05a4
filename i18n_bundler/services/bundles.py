from __future__ import annotations

import enum
import logging
import os
import tempfile
import unicodedata
from collections.abc import Iterable, Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, ContextManager, Final, Protocol

from i18n_bundler.core.config import ProcessingConfig
from i18n_bundler.core.diagnostics import DiagnosticKind, LoggingMessager, Messager
from i18n_bundler.core.errors import BundleWriteError
from i18n_bundler.schemas.elements import AnnotatedElement
from i18n_bundler.schemas.entries import TextEntry
from i18n_bundler.services.store import TextStore

logger = logging.getLogger("i18n_bundler.bundles")

BUNDLE_ENCODING: Final[str] = "iso-8859-1"
BUNDLE_EXTENSION: Final[str] = ".properties"
FILE_HEADER: Final[str] = '# suppress inspection "TrailingSpacesInProperty" for whole file\n'


class ResourceLocation(str, enum.Enum):
    SOURCE_OUTPUT = "source_output"
    CLASS_OUTPUT = "class_output"


class ResourceHandle(Protocol):
    uri: str

    def open(self) -> ContextManager[BinaryIO]:
        ...


class ResourceSink(Protocol):
    """Creates output resources; the host build decides where they live."""

    def create_resource(
        self,
        location: ResourceLocation,
        relative_path: str,
        originating: Sequence[AnnotatedElement] = (),
    ) -> ResourceHandle:
        ...


@dataclass(frozen=True)
class FileResource:
    path: Path

    @property
    def uri(self) -> str:
        return self.path.resolve().as_uri()

    @contextmanager
    def open(self) -> Iterator[BinaryIO]:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
        )
        try:
            with os.fdopen(fd, "wb") as handle:
                yield handle
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


class FileSystemResourceSink:
    """Write resources below one output directory per location."""

    def __init__(self, roots: dict[ResourceLocation, Path]) -> None:
        self._roots = {location: Path(root) for location, root in roots.items()}

    def create_resource(
        self,
        location: ResourceLocation,
        relative_path: str,
        originating: Sequence[AnnotatedElement] = (),
    ) -> FileResource:
        root = self._roots.get(location)
        if root is None:
            raise OSError(f"No output directory configured for {location.value}")
        return FileResource(root / relative_path)


def bundle_path(base_name: str, locale: str, default_locale: str) -> str:
    """``a.b.Texts`` + ``de`` -> ``a/b/Texts_de.properties``."""
    name = "/".join(base_name.split("."))
    if locale != default_locale:
        name = f"{name}_{locale}"
    return f"{name}{BUNDLE_EXTENSION}"


def can_encode(text: str, encoding: str = BUNDLE_ENCODING) -> bool:
    try:
        text.encode(encoding)
    except UnicodeEncodeError:
        return False
    return True


def convert_unicode_to_ascii(text: str, form: str = "NFKC") -> str:
    """Normalize ``text`` and escape everything outside ASCII as ``\\uXXXX``."""
    escaped: list[str] = []
    for char in unicodedata.normalize(form, text):
        code_point = ord(char)
        if code_point < 0x80:
            escaped.append(char)
        elif code_point <= 0xFFFF:
            escaped.append(f"\\u{code_point:04X}")
        else:
            # UTF-16 surrogate pair, as expected by properties readers.
            offset = code_point - 0x10000
            escaped.append(f"\\u{0xD800 + (offset >> 10):04X}")
            escaped.append(f"\\u{0xDC00 + (offset & 0x3FF):04X}")
    return "".join(escaped)


def render_bundle(entries: Iterable[TextEntry]) -> str:
    lines = [FILE_HEADER]
    for entry in entries:
        text = entry.text
        if not can_encode(text):
            text = convert_unicode_to_ascii(text)
        lines.extend(f"# {line}\n" for line in entry.description.split("\n"))
        if entry.class_name.strip():
            lines.append(f"# Defined in: {entry.class_name}\n")
        lines.append(f"{entry.key}={text}\n\n")
    return "".join(lines)


class BundleGenerator:
    def __init__(
        self,
        config: ProcessingConfig,
        sink: ResourceSink,
        messager: Messager | None = None,
        *,
        locations: Sequence[ResourceLocation] = (
            ResourceLocation.SOURCE_OUTPUT,
            ResourceLocation.CLASS_OUTPUT,
        ),
    ) -> None:
        self._config = config
        self._sink = sink
        self._messager = messager or LoggingMessager(logger)
        self._locations = tuple(locations)

    def generate(self, store: TextStore, elements: Sequence[AnnotatedElement] = ()) -> list[str]:
        """Write one bundle per locale to every location; return the written URIs."""
        written: list[str] = []
        for locale in sorted(store.locales()):
            path = bundle_path(self._config.base_bundle_name, locale, self._config.default_locale)
            payload = render_bundle(store.entries_for(locale)).encode(BUNDLE_ENCODING, errors="replace")
            # identical content for every location
            for location in self._locations:
                written.append(self._write(location, path, payload, elements))
        return written

    def _write(
        self,
        location: ResourceLocation,
        path: str,
        payload: bytes,
        elements: Sequence[AnnotatedElement],
    ) -> str:
        name = path
        try:
            resource = self._sink.create_resource(location, path, elements)
            name = resource.uri
            self._messager.print_message(DiagnosticKind.NOTE, f"Creating Resource File: {name}")
            with resource.open() as stream:
                stream.write(payload)
        except OSError as exc:
            message = f"Unable to write resource bundle file '{name}': {exc}"
            self._messager.print_message(DiagnosticKind.ERROR, message)
            raise BundleWriteError(message) from exc
        return name
