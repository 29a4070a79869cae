"""Tests for the read_caf_metadata command-line tool."""

from __future__ import annotations

import importlib.util
import json
from pathlib import Path
import sys

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from caf_fixtures import build_caf, chunk, info_chunk, midi_file_bytes, tempo  # noqa: E402


def _load_tool_module():
    module_path = REPO_ROOT / "tools" / "read_caf_metadata.py"
    spec = importlib.util.spec_from_file_location("read_caf_metadata_tool", module_path)
    assert spec is not None and spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    sys.modules[spec.name] = module
    spec.loader.exec_module(module)
    return module


def _write_fixtures(tmp_path: Path) -> tuple[Path, Path]:
    caf_path = tmp_path / "loop.caf"
    caf_path.write_bytes(
        build_caf(
            info_chunk([("artist", "Someone")]),
            chunk(b"midi", midi_file_bytes([[(0, tempo(120))]])),
        )
    )
    wav_path = tmp_path / "loop.wav"
    wav_path.write_bytes(b"RIFF\x00\x00\x00\x00WAVE")
    return caf_path, wav_path


def test_json_output(tmp_path: Path, capsys) -> None:
    tool = _load_tool_module()
    caf_path, _ = _write_fixtures(tmp_path)

    assert tool.main([str(caf_path), "--json"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload[0]["recognised"] is True
    assert payload[0]["metadata"]["artist"] == "Someone"
    assert payload[0]["metadata"]["tempo"] == "120"
    assert payload[0]["metadata"]["midiDataBase64"].endswith("base64 chars>")


def test_keys_filter_and_show_midi(tmp_path: Path, capsys) -> None:
    tool = _load_tool_module()
    caf_path, _ = _write_fixtures(tmp_path)

    assert tool.main([str(caf_path), "--json", "--show-midi", "--keys", "midiDataBase64"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert list(payload[0]["metadata"]) == ["midiDataBase64"]
    assert not payload[0]["metadata"]["midiDataBase64"].startswith("<")


def test_table_reports_unrecognised_files(tmp_path: Path, capsys) -> None:
    tool = _load_tool_module()
    _write_fixtures(tmp_path)

    assert tool.main([str(tmp_path / "loop.*")]) == 1
    out = capsys.readouterr().out
    assert "(not a CAF file)" in out
    assert "artist" in out
    assert "Someone" in out


def test_directory_argument_finds_caf_files(tmp_path: Path) -> None:
    tool = _load_tool_module()
    caf_path, wav_path = _write_fixtures(tmp_path)
    nested = tmp_path / "more" / "Other.CAF"
    nested.parent.mkdir()
    nested.write_bytes(caf_path.read_bytes())

    targets = tool.expand_targets([str(tmp_path), str(wav_path), str(caf_path)])
    assert targets == [caf_path, nested, wav_path]
