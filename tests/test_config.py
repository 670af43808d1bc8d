"""Tests for configuration loading and validation."""
from datetime import timedelta
from pathlib import Path

import pytest

from bbnotify.config import Config
from bbnotify.errors import ConfigError

ENV_VARS = [
    "BASE_URL", "SCHEDULE_PATH", "TIMEOUT", "SUPABASE_URL", "SUPABASE_SERVICE_ROLE",
    "SUPABASE_TABLE", "SLACK_CHANNEL", "SLACK_USER_NAME", "SLACK_WEBHOOK_URL",
    "TZ_OFFSET_HOURS", "LOCAL_STORE_PATH", "LOG_LEVEL", "API_KEY",
]


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # A missing file keeps load_dotenv from searching for a real .env
    return str(tmp_path / "missing.env")


def test_defaults(clean_env):
    """Test defaults point at the tokyoipo schedule page in JST."""
    config = Config.from_env(clean_env)

    assert config.schedule_url == "http://www.tokyoipo.com/ipo/schedule.php"
    assert config.supabase_table == "ipo_schedules"
    assert config.tz.utcoffset(None) == timedelta(hours=9)
    assert config.api_key is None


def test_from_env(clean_env, monkeypatch):
    """Test values are read from the environment."""
    monkeypatch.setenv("SUPABASE_URL", "https://abc.supabase.co")
    monkeypatch.setenv("SUPABASE_SERVICE_ROLE", "service-role")
    monkeypatch.setenv("SLACK_CHANNEL", "#ipo")
    monkeypatch.setenv("SLACK_WEBHOOK_URL", "https://hooks.slack.com/services/x")
    monkeypatch.setenv("TZ_OFFSET_HOURS", "0")
    monkeypatch.setenv("TIMEOUT", "5")
    monkeypatch.setenv("LOCAL_STORE_PATH", "/tmp/schedules.json")

    config = Config.from_env(clean_env)

    assert config.supabase_url == "https://abc.supabase.co"
    assert config.slack_channel == "#ipo"
    assert config.timeout == 5.0
    assert config.tz.utcoffset(None) == timedelta(0)
    assert config.local_store_path == Path("/tmp/schedules.json")
    config.validate()


def test_env_file(clean_env, monkeypatch, tmp_path):
    """Test a .env file fills unset variables."""
    env_file = tmp_path / ".env"
    env_file.write_text("SCHEDULE_PATH=ipo/other.php\n")
    # Registered so monkeypatch removes the value load_dotenv sets
    monkeypatch.setenv("SCHEDULE_PATH", "placeholder")
    monkeypatch.delenv("SCHEDULE_PATH")

    config = Config.from_env(str(env_file))

    assert config.schedule_url == "http://www.tokyoipo.com/ipo/other.php"


def test_validate_lists_missing_values(clean_env):
    """Test every missing remote setting is reported."""
    config = Config.from_env(clean_env)

    with pytest.raises(ConfigError) as exc_info:
        config.validate()

    message = str(exc_info.value)
    for name in ["SUPABASE_URL", "SUPABASE_SERVICE_ROLE", "SLACK_CHANNEL", "SLACK_WEBHOOK_URL"]:
        assert name in message


def test_validate_dry_run_needs_no_remote(clean_env):
    """Test dry runs do not require Supabase or Slack."""
    Config.from_env(clean_env).validate(require_remote=False)
