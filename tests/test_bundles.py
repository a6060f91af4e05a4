from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Sequence

import pytest

from i18n_bundler.core.config import ProcessingConfig
from i18n_bundler.core.diagnostics import DiagnosticKind, RecordingMessager
from i18n_bundler.core.errors import BundleWriteError
from i18n_bundler.schemas.entries import TextEntry
from i18n_bundler.services.bundles import (
    FILE_HEADER,
    BundleGenerator,
    FileResource,
    FileSystemResourceSink,
    ResourceLocation,
    bundle_path,
    can_encode,
    convert_unicode_to_ascii,
    render_bundle,
)
from i18n_bundler.services.store import TextStore


def _entry(key: str, locale: str, text: str, *, description: str = "", class_name: str = "org.example.Texts") -> TextEntry:
    return TextEntry(
        key=key,
        is_message=False,
        locale=locale,
        description=description,
        text=text,
        class_name=class_name,
    )


def _sink(tmp_path: Path) -> FileSystemResourceSink:
    return FileSystemResourceSink(
        {
            ResourceLocation.SOURCE_OUTPUT: tmp_path / "generated-sources",
            ResourceLocation.CLASS_OUTPUT: tmp_path / "classes",
        }
    )


def test_bundle_path() -> None:
    assert bundle_path("org.example.Texts", "de", "en") == "org/example/Texts_de.properties"
    assert bundle_path("org.example.Texts", "en", "en") == "org/example/Texts.properties"
    assert bundle_path("Texts", "pt_BR", "en") == "Texts_pt_BR.properties"


def test_render_bundle_layout() -> None:
    entries = [
        _entry("a.TXT_one", "de", "Eins", description="First line\nSecond line"),
        _entry("b.TXT_two", "de", "Zwei", class_name=""),
    ]

    assert render_bundle(entries) == (
        FILE_HEADER
        + "# First line\n# Second line\n# Defined in: org.example.Texts\na.TXT_one=Eins\n\n"
        + "# \nb.TXT_two=Zwei\n\n"
    )


def test_render_bundle_keeps_latin1_text() -> None:
    output = render_bundle([_entry("a.TXT_one", "de", "Grüße")])
    assert "a.TXT_one=Grüße\n" in output


def test_render_bundle_escapes_text_outside_latin1() -> None:
    output = render_bundle([_entry("a.TXT_one", "de", "Preis: 5€ für ﬁ")])
    assert "a.TXT_one=Preis: 5\\u20AC f\\u00FCr fi\n" in output
    assert can_encode(output)


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("plain", "plain"),
        ("Привет", "\\u041F\\u0440\\u0438\\u0432\\u0435\\u0442"),
        ("😀", "\\uD83D\\uDE00"),
        ("Ａ", "A"),
    ],
)
def test_convert_unicode_to_ascii(text: str, expected: str) -> None:
    assert convert_unicode_to_ascii(text) == expected


def test_generate_writes_every_locale_to_both_locations(tmp_path: Path) -> None:
    store = TextStore()
    store.insert("en", _entry("a.TXT_one", "en", "One"))
    store.insert("de", _entry("a.TXT_one", "de", "Eins"))
    store.insert("ru", _entry("a.TXT_one", "ru", "Один"))
    messager = RecordingMessager()
    generator = BundleGenerator(
        ProcessingConfig(base_bundle_name="org.example.Texts", default_locale="en"),
        _sink(tmp_path),
        messager,
    )

    written = generator.generate(store)

    assert len(written) == 6
    for root in ("generated-sources", "classes"):
        folder = tmp_path / root / "org" / "example"
        assert sorted(path.name for path in folder.iterdir()) == [
            "Texts.properties",
            "Texts_de.properties",
            "Texts_ru.properties",
        ]
    source_copy = (tmp_path / "generated-sources/org/example/Texts_ru.properties").read_bytes()
    class_copy = (tmp_path / "classes/org/example/Texts_ru.properties").read_bytes()
    assert source_copy == class_copy
    assert source_copy.decode("ascii").endswith("a.TXT_one=\\u041E\\u0434\\u0438\\u043D\n\n")
    notes = [message for kind, message in messager.messages if kind is DiagnosticKind.NOTE]
    assert len(notes) == 6
    assert all(message.startswith("Creating Resource File: file://") for message in notes)


def test_generate_with_empty_store_writes_nothing(tmp_path: Path) -> None:
    generator = BundleGenerator(ProcessingConfig(), _sink(tmp_path))
    assert generator.generate(TextStore()) == []
    assert not (tmp_path / "classes").exists()


class _BrokenResource:
    uri = "memory://broken"

    @contextmanager
    def open(self) -> Iterator[object]:
        raise OSError("disk full")
        yield  # pragma: no cover


class _BrokenSink:
    def create_resource(self, location: ResourceLocation, relative_path: str, originating: Sequence[object] = ()) -> _BrokenResource:
        return _BrokenResource()


def test_write_failure_is_reported_and_wrapped() -> None:
    store = TextStore()
    store.insert("en", _entry("a.TXT_one", "en", "One"))
    messager = RecordingMessager()

    with pytest.raises(BundleWriteError) as exc:
        BundleGenerator(ProcessingConfig(), _BrokenSink(), messager).generate(store)

    assert "memory://broken" in str(exc.value)
    assert "disk full" in str(exc.value)
    assert messager.errors() == [str(exc.value)]


def test_file_resource_leaves_no_partial_file(tmp_path: Path) -> None:
    resource = FileResource(tmp_path / "out" / "Texts.properties")

    with pytest.raises(RuntimeError):
        with resource.open() as stream:
            stream.write(b"half")
            raise RuntimeError("interrupted")

    assert list((tmp_path / "out").iterdir()) == []


def test_missing_location_is_a_write_error(tmp_path: Path) -> None:
    store = TextStore()
    store.insert("en", _entry("a.TXT_one", "en", "One"))
    sink = FileSystemResourceSink({ResourceLocation.SOURCE_OUTPUT: tmp_path})

    with pytest.raises(BundleWriteError):
        BundleGenerator(ProcessingConfig(), sink).generate(store)
    assert (tmp_path / "TextsAndMessages.properties").exists()
