from __future__ import annotations

import json
from pathlib import Path

import pytest

from i18n_bundler.core.config import I18nSettings
from i18n_bundler.cli import build_parser, main

MANIFEST = {
    "elements": [
        {
            "kind": "enum_constant",
            "name": "RED",
            "enclosing_type": "org.example.Colour",
            "texts": [
                {
                    "description": "Colour name",
                    "translations": [
                        {"language": "en", "text": "Red"},
                        {"language": "ja", "text": "赤"},
                    ],
                }
            ],
        }
    ],
    "base_bundle_name": [{"element": "org.example.Colour.BUNDLE", "value": "org.example.Colours"}],
}


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("i18n_bundler.cli.get_settings", lambda: I18nSettings(_env_file=None))


def _write_manifest(tmp_path: Path, payload: dict[str, object]) -> Path:
    path = tmp_path / "manifest.json"
    path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")
    return path


def _run(argv: list[str]) -> int:
    with pytest.raises(SystemExit) as exc:
        main(argv)
    return exc.value.code


def test_cli_writes_bundles(tmp_path: Path) -> None:
    manifest = _write_manifest(tmp_path, MANIFEST)
    sources = tmp_path / "generated"
    classes = tmp_path / "classes"

    code = _run([str(manifest), "--source-output", str(sources), "--class-output", str(classes)])

    assert code == 0
    japanese = (classes / "org/example/Colours_ja.properties").read_text(encoding="iso-8859-1")
    assert "org.example.Colour.STRING_RED=\\u8D64\n" in japanese
    assert (sources / "org/example/Colours.properties").read_bytes() == (
        classes / "org/example/Colours.properties"
    ).read_bytes()


def test_cli_reads_additional_texts_from_option(tmp_path: Path) -> None:
    texts = tmp_path / "texts"
    texts.mkdir()
    (texts / "AdditionalTexts.xml").write_text(
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<!DOCTYPE texts SYSTEM "http://dtd.tquadrat.org/AdditionalText.dtd">\n'
        '<texts><text key="org.example.Extra"><translation language="en">Extra</translation></text></texts>\n',
        encoding="utf-8",
    )
    manifest = _write_manifest(tmp_path, MANIFEST)

    code = _run(
        [
            str(manifest),
            "--source-output",
            str(tmp_path / "generated"),
            "--class-output",
            str(tmp_path / "classes"),
            "--additional-text-location",
            str(texts),
        ]
    )

    assert code == 0
    english = (tmp_path / "generated/org/example/Colours.properties").read_text(encoding="iso-8859-1")
    assert "org.example.Extra=Extra\n" in english


def test_cli_exit_codes(tmp_path: Path) -> None:
    outputs = ["--source-output", str(tmp_path / "a"), "--class-output", str(tmp_path / "b")]

    assert _run([str(tmp_path / "missing.json"), *outputs]) == 2
    assert _run([str(_write_manifest(tmp_path, {})), *outputs]) == 1

    broken = dict(MANIFEST)
    broken["elements"] = [dict(MANIFEST["elements"][0], kind="method", name="paint")]  # type: ignore[index]
    assert _run([str(_write_manifest(tmp_path, broken)), *outputs]) == 2
    assert not (tmp_path / "a").exists()


def test_cli_rejects_invalid_manifest(tmp_path: Path) -> None:
    manifest = _write_manifest(tmp_path, {"elements": [{"kind": "package", "name": "x", "enclosing_type": "y"}]})
    assert _run([str(manifest)]) == 2


def test_parser_collects_repeated_source_paths() -> None:
    args = build_parser().parse_args(["manifest.json", "--source-path", "a", "--source-path", "b"])
    assert args.source_path == ["a", "b"]
    assert args.additional_text_location is None


def test_cli_rejects_empty_message_prefix(tmp_path: Path) -> None:
    payload = dict(MANIFEST, message_prefix=[{"element": "org.example.Colour.PREFIX", "value": ""}])
    manifest = _write_manifest(tmp_path, payload)

    assert _run([str(manifest), "--source-output", str(tmp_path / "a"), "--class-output", str(tmp_path / "b")]) == 2
    assert not (tmp_path / "a").exists()
