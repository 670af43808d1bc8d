"""Configuration management from environment variables."""
import os
from dataclasses import dataclass
from datetime import timedelta, timezone
from pathlib import Path
from urllib.parse import urljoin

from dotenv import load_dotenv

from bbnotify.errors import ConfigError

# Project root
PROJECT_ROOT = Path(__file__).parent.parent
DATA_DIR = PROJECT_ROOT / "data"


@dataclass(frozen=True)
class Config:
    """Application configuration, built once at startup."""

    # Schedule page
    base_url: str = "http://www.tokyoipo.com"
    schedule_path: str = "ipo/schedule.php"
    timeout: float = 20.0

    # Supabase
    supabase_url: str | None = None
    supabase_service_role: str | None = None
    supabase_table: str = "ipo_schedules"

    # Slack
    slack_channel: str | None = None
    slack_user_name: str = "book-building-notify"
    slack_webhook_url: str | None = None

    # Milestone dates are compared in this fixed offset (JST)
    tz_offset_hours: int = 9

    # Dry runs
    local_store_path: Path = DATA_DIR / "schedules.json"

    # Logging
    log_level: str = "INFO"

    # API Security
    api_key: str | None = None

    @classmethod
    def from_env(cls, env_file: str | None = None) -> "Config":
        """Load .env (if any) and read configuration from the environment."""
        load_dotenv(env_file)
        defaults = cls()
        return cls(
            base_url=os.getenv("BASE_URL", defaults.base_url),
            schedule_path=os.getenv("SCHEDULE_PATH", defaults.schedule_path),
            timeout=float(os.getenv("TIMEOUT", str(defaults.timeout))),
            supabase_url=os.getenv("SUPABASE_URL") or None,
            supabase_service_role=os.getenv("SUPABASE_SERVICE_ROLE") or None,
            supabase_table=os.getenv("SUPABASE_TABLE", defaults.supabase_table),
            slack_channel=os.getenv("SLACK_CHANNEL") or None,
            slack_user_name=os.getenv("SLACK_USER_NAME", defaults.slack_user_name),
            slack_webhook_url=os.getenv("SLACK_WEBHOOK_URL") or None,
            tz_offset_hours=int(os.getenv("TZ_OFFSET_HOURS", str(defaults.tz_offset_hours))),
            local_store_path=Path(os.getenv("LOCAL_STORE_PATH", str(defaults.local_store_path))),
            log_level=os.getenv("LOG_LEVEL", defaults.log_level),
            api_key=os.getenv("API_KEY") or None,
        )

    @property
    def schedule_url(self) -> str:
        """Absolute URL of the schedule page."""
        return urljoin(self.base_url.rstrip("/") + "/", self.schedule_path.lstrip("/"))

    @property
    def tz(self) -> timezone:
        """Fixed-offset timezone used to compute "tomorrow"."""
        return timezone(timedelta(hours=self.tz_offset_hours))

    def validate(self, require_remote: bool = True) -> None:
        """Validate required configuration."""
        errors = []
        if not self.base_url:
            errors.append("BASE_URL is required")
        if require_remote:
            if not self.supabase_url:
                errors.append("SUPABASE_URL is required")
            if not self.supabase_service_role:
                errors.append("SUPABASE_SERVICE_ROLE is required")
            if not self.slack_channel:
                errors.append("SLACK_CHANNEL is required")
            if not self.slack_webhook_url:
                errors.append("SLACK_WEBHOOK_URL is required")
        if errors:
            raise ConfigError(f"Configuration errors: {', '.join(errors)}")
