"""Tests for CLI commands."""

import pytest
from pathlib import Path
from typer.testing import CliRunner
from prefkit.cli.main import app
from prefkit.core.types import StoredValue
from prefkit.store.sqlite import SQLiteStorage


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Keep config lookup away from the real home and working directory."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setattr(Path, "home", lambda: home)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def db(tmp_path):
    return str(tmp_path / "cli.db")


def test_version(runner):
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert "0.1.0" in result.stdout


def test_set_and_get(runner, db):
    result = runner.invoke(app, ["set", "userAge", "25", "--kind", "int", "--db", db])
    assert result.exit_code == 0

    result = runner.invoke(app, ["get", "userAge", "--db", db])
    assert result.exit_code == 0
    assert "25" in result.stdout
    assert "int" in result.stdout


def test_set_writes_typed_value(runner, db):
    runner.invoke(app, ["set", "isLoggedIn", "yes", "--kind", "bool", "--db", db])
    runner.invoke(app, ["set", "userData", "00ff", "--kind", "bytes", "--db", db])

    store = SQLiteStorage(db)
    assert store.get("isLoggedIn") == StoredValue.boolean(True)
    assert store.get("userData") == StoredValue.data(b"\x00\xff")
    store.close()


def test_set_invalid_value(runner, db):
    result = runner.invoke(app, ["set", "userAge", "old", "--kind", "int", "--db", db])
    assert result.exit_code == 2
    assert "invalid int" in result.stdout.lower()


def test_get_missing(runner, db):
    result = runner.invoke(app, ["get", "nope", "--db", db])
    assert result.exit_code == 1
    assert "not set" in result.stdout


def test_keys_lists_suite(runner, db):
    runner.invoke(app, ["set", "theme", "dark", "--db", db])
    runner.invoke(app, ["set", "premiumFeature", "true", "-k", "bool", "-s", "premium", "--db", db])

    result = runner.invoke(app, ["keys", "--db", db])
    assert result.exit_code == 0
    assert "theme" in result.stdout
    assert "premiumFeature" not in result.stdout

    result = runner.invoke(app, ["keys", "--suite", "premium", "--db", db])
    assert "premiumFeature" in result.stdout


def test_keys_empty(runner, db):
    result = runner.invoke(app, ["keys", "--db", db])
    assert result.exit_code == 0
    assert "empty" in result.stdout


def test_rm(runner, db):
    runner.invoke(app, ["set", "theme", "dark", "--db", db])
    result = runner.invoke(app, ["rm", "theme", "--db", db])
    assert result.exit_code == 0

    result = runner.invoke(app, ["rm", "theme", "--db", db])
    assert result.exit_code == 0

    result = runner.invoke(app, ["get", "theme", "--db", db])
    assert result.exit_code == 1


def test_clear_only_touches_one_suite(runner, db):
    runner.invoke(app, ["set", "a", "1", "--db", db])
    runner.invoke(app, ["set", "b", "2", "--db", db])
    runner.invoke(app, ["set", "a", "1", "-s", "premium", "--db", db])

    result = runner.invoke(app, ["clear", "--yes", "--db", db])
    assert result.exit_code == 0
    assert "Removed 2" in result.stdout

    premium = SQLiteStorage(db, suite="premium")
    assert premium.list_keys() == ["a"]
    premium.close()


def test_clear_aborted(runner, db):
    runner.invoke(app, ["set", "a", "1", "--db", db])
    result = runner.invoke(app, ["clear", "--db", db], input="n\n")
    assert result.exit_code == 1

    store = SQLiteStorage(db)
    assert store.list_keys() == ["a"]
    store.close()


# ━━━ Markup in Names ━━━


def test_markup_like_key_is_printed_literally(runner, db):
    result = runner.invoke(app, ["set", "[/bold]", "x", "--db", db])
    assert result.exit_code == 0
    assert "[/bold]" in result.stdout

    result = runner.invoke(app, ["keys", "--db", db])
    assert result.exit_code == 0
    assert "[/bold]" in result.stdout

    result = runner.invoke(app, ["get", "[red]missing", "--db", db])
    assert result.exit_code == 1
    assert "[red]missing" in result.stdout

    result = runner.invoke(app, ["rm", "[/bold]", "--db", db])
    assert result.exit_code == 0
    assert "[/bold]" in result.stdout


def test_markup_like_suite_is_printed_literally(runner, db):
    result = runner.invoke(app, ["keys", "--suite", "[bold]team", "--db", db])
    assert result.exit_code == 0
    assert "[bold]team" in result.stdout

    runner.invoke(app, ["set", "a", "1", "-s", "[/i]", "--db", db])
    result = runner.invoke(app, ["clear", "--yes", "-s", "[/i]", "--db", db])
    assert result.exit_code == 0
    assert "[/i]" in result.stdout


# ━━━ Storage Failures ━━━


@pytest.fixture
def unusable_db(tmp_path):
    """A database path whose parent is a regular file."""
    blocker = tmp_path / "blocker"
    blocker.write_text("file in the way")
    return str(blocker / "s.db")


@pytest.mark.parametrize(
    "args",
    [
        ["keys"],
        ["get", "k"],
        ["set", "k", "v"],
        ["rm", "k"],
        ["clear", "--yes"],
    ],
    ids=lambda a: a[0],
)
def test_storage_failure_exits_cleanly(runner, unusable_db, args):
    result = runner.invoke(app, [*args, "--db", unusable_db])
    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert "Failed to initialize" in result.stdout
