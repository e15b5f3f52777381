"""Retention offer — commands and handler for the close / accept / decline flow.

Closing an open checkout for the first time does not close it: the shopper
is offered a one-time discount instead. Accepting keeps the form open with
the discount applied; declining closes it for good.

``ExpireIdleCheckouts`` is meant for a periodic scheduler: it closes open
checkouts the shopper has not touched for a while, without an offer.
"""

from datetime import UTC, datetime

import structlog
from protean import handle
from protean.fields import DateTime, Identifier, Integer
from protean.utils.globals import current_domain

from storefront.checkout.session import IDLE_CHECKOUT_HOURS, CheckoutSession, CheckoutState, idle_cutoff
from storefront.domain import storefront

logger = structlog.get_logger(__name__)


@storefront.command(part_of="CheckoutSession")
class RequestClose:
    session_id = Identifier(required=True)


@storefront.command(part_of="CheckoutSession")
class AcceptDiscount:
    session_id = Identifier(required=True)


@storefront.command(part_of="CheckoutSession")
class DeclineDiscount:
    session_id = Identifier(required=True)


@storefront.command(part_of="CheckoutSession")
class ExpireIdleCheckouts:
    """Close open checkouts idle beyond the threshold."""

    idle_threshold_hours = Integer(default=IDLE_CHECKOUT_HOURS)
    as_of = DateTime()  # Optional: defaults to now


@storefront.command_handler(part_of=CheckoutSession)
class RetentionHandler:
    @handle(RequestClose)
    def request_close(self, command):
        repo = current_domain.repository_for(CheckoutSession)
        session = repo.get(command.session_id)
        session.request_close()
        repo.add(session)
        logger.info("Close requested", session_id=str(session.id), state=session.state)
        return session.state

    @handle(AcceptDiscount)
    def accept_discount(self, command):
        repo = current_domain.repository_for(CheckoutSession)
        session = repo.get(command.session_id)
        session.accept_discount()
        repo.add(session)
        return session.state

    @handle(DeclineDiscount)
    def decline_discount(self, command):
        repo = current_domain.repository_for(CheckoutSession)
        session = repo.get(command.session_id)
        session.decline_discount()
        repo.add(session)
        return session.state

    @handle(ExpireIdleCheckouts)
    def expire_idle_checkouts(self, command):
        as_of = command.as_of or datetime.now(UTC)
        cutoff = idle_cutoff(as_of, command.idle_threshold_hours or IDLE_CHECKOUT_HOURS)

        repo = current_domain.repository_for(CheckoutSession)
        open_sessions = repo._dao.query.filter(state=CheckoutState.EDITING.value).all().items
        idle = [session for session in open_sessions if session.is_idle(cutoff)]

        for session in idle:
            session.expire()
            repo.add(session)

        logger.info("Idle checkouts expired", cutoff=cutoff.isoformat(), expired_count=len(idle))
        return len(idle)
