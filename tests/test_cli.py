"""Management CLI commands."""

from __future__ import annotations

import json

from typer.testing import CliRunner

from curriculum_mcp.cli import app
from curriculum_mcp.models import Collection
from curriculum_mcp.store import CollectionStore

runner = CliRunner()


def test_init_creates_then_reports_ready(db_path):
    result = runner.invoke(app, ["init", "--db", str(db_path)])
    assert result.exit_code == 0
    assert "Created datastore" in result.stdout
    assert db_path.exists()

    result = runner.invoke(app, ["init", "--db", str(db_path)])
    assert result.exit_code == 0
    assert "Datastore ready" in result.stdout


def test_init_uses_default_path(tmp_path):
    result = runner.invoke(app, ["init"])
    assert result.exit_code == 0
    assert (tmp_path / "data" / "db.json").exists()


def test_stats_counts_records(db_path):
    store = CollectionStore(db_path)
    store.add(Collection.UNITS, {"id": "u1"})
    store.add(Collection.UNITS, {"id": "u2"})

    result = runner.invoke(app, ["stats", "--db", str(db_path)])

    assert result.exit_code == 0
    assert "units" in result.stdout
    assert "style-guide" in result.stdout
    assert "total" in result.stdout


def test_stats_on_corrupt_store_exits_1(db_path):
    db_path.parent.mkdir(parents=True)
    db_path.write_text("{", encoding="utf-8")

    result = runner.invoke(app, ["stats", "--db", str(db_path)])
    assert result.exit_code == 1


def test_tools_lists_catalogue():
    result = runner.invoke(app, ["tools"])
    assert result.exit_code == 0
    assert "52 tools" in result.stdout


def test_show_collection_and_record(db_path):
    store = CollectionStore(db_path)
    store.add(Collection.STYLE_GUIDE, {"id": "s1", "element": "button"})

    result = runner.invoke(app, ["show", "style-guide", "--db", str(db_path)])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == [{"id": "s1", "element": "button"}]

    result = runner.invoke(app, ["show", "style-guide", "--id", "s1", "--db", str(db_path)])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"id": "s1", "element": "button"}


def test_show_unknown_collection_or_id_exits_1(db_path):
    assert runner.invoke(app, ["show", "grades", "--db", str(db_path)]).exit_code == 1
    assert runner.invoke(app, ["show", "units", "--id", "x", "--db", str(db_path)]).exit_code == 1


def test_uncreatable_store_directory_exits_1(tmp_path):
    (tmp_path / "blocker").write_text("a file, not a directory", encoding="utf-8")

    result = runner.invoke(app, ["init", "--db", str(tmp_path / "blocker" / "db.json")])
    assert result.exit_code == 1
    assert not isinstance(result.exception, OSError)


def test_invalid_config_exits_1(tmp_path):
    (tmp_path / "curriculum.toml").write_text("[mcp.store]\nindent = -1\n", encoding="utf-8")

    result = runner.invoke(app, ["stats"])
    assert result.exit_code == 1
    assert not isinstance(result.exception, ValueError)
