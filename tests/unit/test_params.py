from __future__ import annotations

from pathlib import Path

import pytest

from param_export.errors import ConfigMissingError, ParamFileNotFoundError, ParamReadError
from param_export.stages.params import load_params, parse_param_lines, resolve_param_path


def test_load_params_keeps_blank_lines_in_order(tmp_path: Path) -> None:
    path = tmp_path / "params.tsv"
    path.write_text("A\tB\n\nC\tD\tE\nF\n", encoding="utf-8")

    params = load_params(path)

    assert params == [("A", "B"), (), ("C", "D", "E"), ("F",)]


def test_load_params_without_trailing_newline(tmp_path: Path) -> None:
    path = tmp_path / "params.tsv"
    path.write_text("A\tB\nC\tD", encoding="utf-8")

    assert load_params(path) == [("A", "B"), ("C", "D")]


def test_load_params_crlf_lines(tmp_path: Path) -> None:
    path = tmp_path / "params.tsv"
    path.write_bytes(b"A\tB\r\nC\tD\r\n")

    assert load_params(path) == [("A", "B"), ("C", "D")]


def test_load_params_preserves_empty_fields(tmp_path: Path) -> None:
    path = tmp_path / "params.tsv"
    path.write_text("A\t\t\n", encoding="utf-8")

    assert load_params(path) == [("A", "", "")]


def test_load_params_falls_back_to_base_dir(tmp_path: Path, monkeypatch) -> None:
    base = tmp_path / "base"
    base.mkdir()
    (base / "params.tsv").write_text("X\tY\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)

    assert load_params("params.tsv", base_dir=base) == [("X", "Y")]


def test_resolve_param_path_prefers_configured_path(tmp_path: Path, monkeypatch) -> None:
    base = tmp_path / "base"
    base.mkdir()
    (base / "params.tsv").write_text("fallback\n", encoding="utf-8")
    (tmp_path / "params.tsv").write_text("direct\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)

    assert resolve_param_path("params.tsv", base) == Path("params.tsv")


def test_missing_param_file_is_a_config_error(tmp_path: Path) -> None:
    with pytest.raises(ParamFileNotFoundError) as excinfo:
        load_params(tmp_path / "nope.tsv", base_dir=tmp_path / "also-nope")

    assert isinstance(excinfo.value, ConfigMissingError)
    assert excinfo.value.details["path"].endswith("nope.tsv")


def test_unreadable_param_file_raises_read_error(tmp_path: Path) -> None:
    directory = tmp_path / "params.tsv"
    directory.mkdir()

    with pytest.raises(ParamReadError):
        load_params(directory)


def test_undecodable_param_file_raises_read_error(tmp_path: Path) -> None:
    path = tmp_path / "params.tsv"
    path.write_bytes(b"\xff\xfe\xfa\n")

    with pytest.raises(ParamReadError):
        load_params(path)


def test_parse_param_lines_field_count_matches_segments() -> None:
    lines = ["a\tb\tc", "", "d"]

    parsed = parse_param_lines(lines)

    assert [len(t) for t in parsed] == [3, 0, 1]
