"""Slack incoming-webhook notifier."""
import logging
from typing import Any, Optional

import httpx
import orjson

from bbnotify.config import Config
from bbnotify.errors import NotificationError
from bbnotify.notify.base import render_details
from bbnotify.parse.models import ScheduleRecord

logger = logging.getLogger(__name__)


class SlackNotifier:
    """Posts record notifications to a Slack incoming webhook."""

    def __init__(self, config: Config, client: Optional[httpx.Client] = None):
        if not config.slack_webhook_url:
            raise ValueError("Slack configuration missing")
        self.webhook_url = config.slack_webhook_url
        self.channel = config.slack_channel or ""
        self.user_name = config.slack_user_name
        self.client = client or httpx.Client(timeout=config.timeout)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self) -> None:
        self.client.close()

    def build_payload(self, title: str, record: ScheduleRecord) -> dict[str, Any]:
        """Build the webhook payload: a title section and a code-block section."""
        return {
            "channel": self.channel,
            "username": self.user_name,
            "blocks": [
                {"type": "section", "text": {"type": "mrkdwn", "text": title}},
                {
                    "type": "section",
                    "text": {"type": "mrkdwn", "text": f"```\n{render_details(record)}```"},
                },
            ],
            "text": title,
            "mrkdwn": True,
        }

    def send(self, title: str, record: ScheduleRecord) -> None:
        """Post one notification. Raises NotificationError on any failure."""
        payload = self.build_payload(title, record)
        try:
            response = self.client.post(
                self.webhook_url,
                content=orjson.dumps(payload),
                headers={"Content-Type": "application/json"},
            )
        except httpx.HTTPError as e:
            raise NotificationError(f"Slack webhook request failed: {e}") from e

        if response.is_error:
            raise NotificationError(
                f"Slack webhook returned {response.status_code}: {response.text[:200]}"
            )
        logger.info(f"Sent Slack notification for code={record.code}: {title}")
        logger.debug(f"Slack response: {response.text}")


class LogNotifier:
    """Notifier for dry runs: logs messages instead of delivering them."""

    def __init__(self):
        self.sent: list[tuple[str, str]] = []

    def send(self, title: str, record: ScheduleRecord) -> None:
        self.sent.append((title, record.code))
        logger.info(f"[DRY-RUN] {title}\n{render_details(record)}")
