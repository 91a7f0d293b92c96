# app/services/notification_client.py
import requests

from app.utils.retry import http_retry
from app.utils.settings import NOTIFICATION_WEBHOOK_URL
from app.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationClient:
    """
    Wysylka gotowych wiadomosci (email/SMS) do zewnetrznej bramki przez webhook.
    Bez skonfigurowanego URL tylko loguje wiadomosc.
    """

    def __init__(self, webhook_url: str | None = None, timeout: int = 5):
        url = NOTIFICATION_WEBHOOK_URL if webhook_url is None else webhook_url
        self.webhook_url = url.rstrip("/")
        self.timeout = timeout

    def deliver(self, channel: str, to: str, subject: str, body: str) -> bool:
        if not self.webhook_url:
            logger.info(f"[NOTIFICATION] {channel} to {to}: {subject}")
            return False

        self._post({"channel": channel, "to": to, "subject": subject, "body": body})
        logger.info(f"{channel} notification sent to {to}")
        return True

    @http_retry()
    def _post(self, payload: dict) -> None:
        logger.info(f"NotificationClient POST {self.webhook_url}")
        resp = requests.post(self.webhook_url, json=payload, timeout=self.timeout)
        resp.raise_for_status()
