"""Tests for the static-export CLI."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

from typer.testing import CliRunner

from cli.main import app
from static_export.errors import MissingDependencyError, MissingFetchedRootError

runner = CliRunner()

ORIGIN = "http://project-gorbachev.local"
TARGET = "https://airbornesurfer.com/project-gorbachev"


def _fetched_tree(tmp_path: Path) -> Path:
    root = tmp_path / "static-site-export" / "project-gorbachev.local"
    root.mkdir(parents=True)
    (root / "index.html").write_text(
        f'<a href="{ORIGIN}/about/">About \u00e2\u20ac\u201d us</a>', encoding="utf-8"
    )
    return root


def test_export_success(tmp_path):
    root = _fetched_tree(tmp_path)
    with patch("static_export.pipeline.fetch_site", return_value=root) as mock_fetch:
        result = runner.invoke(app, ["export", ORIGIN, TARGET, str(root.parent), "--no-probe"])

    assert result.exit_code == 0, result.output
    assert f"Static site ready at {root}" in result.output
    assert mock_fetch.call_args.kwargs["probe"] is False
    assert (root / "index.html").read_text(encoding="utf-8") == (
        f'<a href="{TARGET}/about/">About — us</a>'
    )


def test_export_default_output_dir(tmp_path, monkeypatch):
    root = _fetched_tree(tmp_path)
    monkeypatch.setattr("cli.main.settings.output_dir", root.parent)
    with patch("static_export.pipeline.fetch_site", return_value=root) as mock_fetch:
        result = runner.invoke(app, ["export", ORIGIN, TARGET, "--no-probe"])

    assert result.exit_code == 0, result.output
    assert mock_fetch.call_args.args[1] == root.parent


def test_export_missing_wget_exits_nonzero(tmp_path):
    with patch("static_export.pipeline.fetch_site",
               side_effect=MissingDependencyError("wget not found ('wget').")):
        result = runner.invoke(app, ["export", ORIGIN, TARGET, str(tmp_path)])

    assert result.exit_code == 1
    assert "[fetch] error: wget not found" in result.output


def test_export_missing_root_exits_nonzero(tmp_path):
    with patch("static_export.pipeline.fetch_site",
               side_effect=MissingFetchedRootError("fetched site root not found")):
        result = runner.invoke(app, ["export", ORIGIN, TARGET, str(tmp_path)])

    assert result.exit_code == 1
    assert "fetched site root not found" in result.output


def test_export_invalid_origin_is_usage_error(tmp_path):
    result = runner.invoke(app, ["export", "project-gorbachev.local", TARGET, str(tmp_path)])
    assert result.exit_code == 2


def test_rewrite_command(tmp_path):
    root = _fetched_tree(tmp_path)
    result = runner.invoke(app, ["rewrite", str(root), ORIGIN, TARGET, "--verbose"])

    assert result.exit_code == 0, result.output
    assert "index.html: 1 substitution(s)" in result.output
    assert TARGET in (root / "index.html").read_text(encoding="utf-8")


def test_repair_command(tmp_path):
    root = _fetched_tree(tmp_path)
    result = runner.invoke(app, ["repair", str(root)])

    assert result.exit_code == 0, result.output
    assert "[repair] 1 file(s) scanned, 1 changed, 1 substitution(s)" in result.output
    assert "—" in (root / "index.html").read_text(encoding="utf-8")


def test_repair_missing_tree(tmp_path):
    result = runner.invoke(app, ["repair", str(tmp_path / "nope")])
    assert result.exit_code == 1
    assert "[fetch] error: fetched tree not found" in result.output
