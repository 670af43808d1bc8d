"""Tests for the CLI entry point."""
from contextlib import contextmanager
from datetime import date, datetime

import pytest

import bbnotify.main as cli
from bbnotify.errors import StoreError


@pytest.fixture
def env_file(monkeypatch, tmp_path):
    for name in ["SUPABASE_URL", "SUPABASE_SERVICE_ROLE", "SLACK_CHANNEL", "SLACK_WEBHOOK_URL"]:
        monkeypatch.delenv(name, raising=False)
    return str(tmp_path / "missing.env")


@pytest.fixture
def fake_runner(monkeypatch):
    state = {"calls": [], "error": None}

    class Runner:
        def run(self):
            if state["error"]:
                raise state["error"]

    @contextmanager
    def fake_open_runner(config, dry_run=False, now=None):
        state["calls"].append((dry_run, now))
        yield Runner()

    monkeypatch.setattr(cli, "open_runner", fake_open_runner)
    return state


def test_parse_args():
    """Test CLI flags."""
    args = cli.parse_args(["--dry-run", "--today", "2026-03-14"])

    assert args.dry_run is True
    assert args.serve is False
    assert args.today == date(2026, 3, 14)


def test_main_dry_run(env_file, fake_runner):
    """Test a dry run needs no remote configuration."""
    assert cli.main(["--dry-run", "--env-file", env_file]) == 0
    assert fake_runner["calls"] == [(True, None)]


def test_main_today_sets_clock(env_file, fake_runner):
    """Test --today runs as if at noon on that date in JST."""
    assert cli.main(["--dry-run", "--today", "2026-03-14", "--env-file", env_file]) == 0

    _, now = fake_runner["calls"][0]
    assert isinstance(now, datetime)
    assert now.date() == date(2026, 3, 14)
    assert now.utcoffset().total_seconds() == 9 * 3600


def test_main_missing_config_fails(env_file, fake_runner):
    """Test a normal run without Supabase/Slack settings exits with 1."""
    assert cli.main(["--env-file", env_file]) == 1
    assert fake_runner["calls"] == []


def test_main_run_failure_exits_1(env_file, fake_runner):
    """Test a fatal error during the run is reported as exit code 1."""
    fake_runner["error"] = StoreError("upsert failed")

    assert cli.main(["--dry-run", "--env-file", env_file]) == 1


def test_parse_args_rejects_today_with_serve(capsys):
    """Test --today is refused for the HTTP trigger, which always uses the real clock."""
    with pytest.raises(SystemExit) as exc_info:
        cli.parse_args(["--serve", "--today", "2026-03-14"])

    assert exc_info.value.code == 2
    assert "--today cannot be combined with --serve" in capsys.readouterr().err


def test_main_unexpected_error_exits_1(env_file, fake_runner, caplog):
    """Test an unexpected exception during the run is one reported failure."""
    fake_runner["error"] = KeyError("stock_count")

    assert cli.main(["--dry-run", "--env-file", env_file]) == 1
    assert "Unexpected error" in caplog.text
