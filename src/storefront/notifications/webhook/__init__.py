"""Webhook adapter registry — where order snapshots are posted.

Uses the ``requests`` adapter by default; ``WEBHOOK_ADAPTER=fake`` records
payloads in memory instead. The endpoint comes from ``WEBHOOK_URL``.
"""

import os

from storefront.notifications.webhook.port import WebhookPort

_current_webhook: WebhookPort | None = None


def get_webhook() -> WebhookPort:
    """Return the configured webhook adapter (singleton)."""
    global _current_webhook
    if _current_webhook is None:
        adapter = os.environ.get("WEBHOOK_ADAPTER", "http")
        if adapter == "http":
            from storefront.notifications.webhook.http_adapter import RequestsWebhookAdapter

            _current_webhook = RequestsWebhookAdapter(
                url=os.environ.get("WEBHOOK_URL") or None,
                timeout=float(os.environ.get("WEBHOOK_TIMEOUT", "10")),
            )
        elif adapter == "fake":
            from storefront.notifications.webhook.fake_adapter import FakeWebhookAdapter

            _current_webhook = FakeWebhookAdapter()
        else:
            raise ValueError(f"Unknown webhook adapter: {adapter}")
    return _current_webhook


def set_webhook(webhook: WebhookPort) -> None:
    """Override the active webhook adapter (useful for tests)."""
    global _current_webhook
    _current_webhook = webhook


def reset_webhook() -> None:
    global _current_webhook
    _current_webhook = None
