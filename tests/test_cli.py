import json
from unittest.mock import patch

import pytest

from quotesync.cli import main
from quotesync.config import Settings
from quotesync.database.kv_store import DurableStore
from quotesync.errors import SyncFailed
from quotesync.models.schemas import Quote
from quotesync.remote import RemoteQuoteSource


@pytest.fixture()
def run(tmp_path):
    db_url = f"sqlite:///{tmp_path / 'cli.db'}"

    def _run(*argv):
        return main(["--database-url", db_url, "--log-level", "WARNING", *argv])

    return _run


def test_categories_lists_defaults(run, capsys):
    assert run("categories") == 0
    out = capsys.readouterr().out.splitlines()
    assert out[0] == "* all"
    assert "  Dreams" in out


def test_add_then_show_latest(run, capsys):
    assert run("add", "Simple is better.", "Zen") == 0
    out = capsys.readouterr().out
    assert "Quote added successfully!" in out
    assert '"Simple is better."' in out
    assert "— Zen" in out


def test_add_blank_fails(run, capsys):
    assert run("add", "   ", "Zen") == 1
    assert "Please enter both" in capsys.readouterr().err


def test_filter_persists_between_runs(run, capsys):
    assert run("filter", "Life") == 0
    capsys.readouterr()
    assert run("show") == 0
    assert "— Life" in capsys.readouterr().out


def test_filter_unknown_category(run, capsys):
    assert run("filter", "Nope") == 1


def test_show_empty_category(run, capsys):
    assert run("show", "--category", "Nope") == 0
    assert "No quotes available" in capsys.readouterr().out


def test_export_and_import(run, tmp_path, capsys):
    assert run("export", "--dir", str(tmp_path / "out")) == 0
    exported = json.loads((tmp_path / "out" / "quotes.json").read_text(encoding="utf-8"))
    assert len(exported) == 5

    source = tmp_path / "more.json"
    source.write_text(json.dumps([{"text": "Imported", "category": "File"}]), encoding="utf-8")
    assert run("import", str(source)) == 0
    assert "Successfully imported 1 quotes!" in capsys.readouterr().out


def test_import_missing_file(run, tmp_path, capsys):
    assert run("import", str(tmp_path / "missing.json")) == 1
    assert "Error importing quotes" in capsys.readouterr().err


def test_sync_reports_outcome(run, capsys):
    remote = [Quote(id=1, text="Welcome to Acme!", category="Welcome")]
    with patch.object(RemoteQuoteSource, "fetch_quotes", return_value=remote):
        assert run("sync") == 0
    assert "Synced! 0 new quotes added. 1 conflicts resolved." in capsys.readouterr().out


def test_sync_failure_exit_code(run, capsys):
    with patch.object(RemoteQuoteSource, "fetch_quotes", side_effect=SyncFailed("offline")):
        assert run("sync") == 1
    assert "[error]" in capsys.readouterr().out


def test_watch_stops_after_cycles(run, capsys):
    remote = [Quote(id=50, text="Welcome to Acme!", category="Welcome")]
    with patch.object(RemoteQuoteSource, "fetch_quotes", return_value=remote):
        assert run("watch", "--interval", "0.01", "--cycles", "2") == 0
    lines = [line for line in capsys.readouterr().out.splitlines() if line.startswith("[")]
    assert lines[0] == "[warning] Synced! 1 new quotes added. 0 conflicts resolved."
    assert "[success] Sync completed - No changes detected" in lines[1:]


def test_sync_persist_failure_exit_code(run, capsys):
    remote = [Quote(id=60, text="Welcome to Acme!", category="Welcome")]
    with patch.object(RemoteQuoteSource, "fetch_quotes", return_value=remote), patch.object(
        DurableStore, "set_many", side_effect=RuntimeError("disk full")
    ):
        assert run("sync") == 1
    assert "[error] Sync failed while saving quotes" in capsys.readouterr().out


def test_unknown_merge_policy_exits_cleanly(run, capsys):
    with patch("quotesync.cli.get_settings", return_value=Settings(merge_policy="coin_flip")):
        assert run("sync") == 1
    assert "Invalid sync settings" in capsys.readouterr().err


def test_watch_rejects_non_positive_interval(run, capsys):
    assert run("watch", "--interval", "0", "--cycles", "1") == 1
    assert "interval must be > 0" in capsys.readouterr().err
