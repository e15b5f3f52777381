"""Webhook port — abstract interface for posting order snapshots."""

from abc import ABC, abstractmethod


class WebhookPort(ABC):
    """Abstract interface for webhook adapters."""

    @property
    @abstractmethod
    def configured(self) -> bool:
        """False when there is nowhere to post; callers skip silently."""
        ...

    @abstractmethod
    def post(self, payload: dict) -> dict:
        """Post a JSON payload to the configured endpoint.

        Returns:
            dict with keys: status ("sent" or "failed"), status_code (optional), error (optional)
        """
        ...
