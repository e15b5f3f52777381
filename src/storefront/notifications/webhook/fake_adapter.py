"""Fake webhook adapter — records posted payloads for testing."""

from storefront.notifications.webhook.port import WebhookPort


class FakeWebhookAdapter(WebhookPort):
    def __init__(self, url: str | None = "https://hooks.example.test/orders"):
        self.url = url
        self.posted: list[dict] = []
        self.should_succeed = True
        self.failure_reason = "Webhook endpoint unavailable"

    def configure(self, should_succeed: bool = True, failure_reason: str = "Webhook endpoint unavailable"):
        """Configure the fake adapter behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    @property
    def configured(self) -> bool:
        return bool(self.url)

    def post(self, payload: dict) -> dict:
        if not self.should_succeed:
            return {"status": "failed", "error": self.failure_reason}

        self.posted.append(payload)
        return {"status": "sent", "status_code": 200}

    def events(self) -> list[str]:
        return [payload["event"] for payload in self.posted]

    def reset(self):
        self.posted.clear()
        self.should_succeed = True
        self.failure_reason = "Webhook endpoint unavailable"
