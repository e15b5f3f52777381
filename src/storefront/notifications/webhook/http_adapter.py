"""requests-based webhook adapter."""

import requests
import structlog

from storefront.notifications.webhook.port import WebhookPort

logger = structlog.get_logger(__name__)


class RequestsWebhookAdapter(WebhookPort):
    def __init__(self, url: str | None, timeout: float = 10.0, session: requests.Session | None = None):
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def configured(self) -> bool:
        return bool(self.url)

    def post(self, payload: dict) -> dict:
        try:
            response = self.session.post(
                self.url,
                json=payload,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            status_code = exc.response.status_code if exc.response is not None else None
            return {"status": "failed", "status_code": status_code, "error": str(exc)}

        logger.debug("Webhook delivered", url=self.url, status_code=response.status_code)
        return {"status": "sent", "status_code": response.status_code}
