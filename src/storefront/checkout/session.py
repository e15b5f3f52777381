"""CheckoutSession aggregate — one open purchase form and its retention offer.

The session owns the cart lines; quantity, line colors and pricing are all
derived from it. Lines are recomposed against a stock snapshot passed in
by the command handlers, never read here.

State machine:
    EDITING → SUBMITTING → SUCCESS → CLOSED
    EDITING → DISCOUNT_OFFER → EDITING (accepted) | CLOSED (declined)
    EDITING (discount already accepted) → CLOSED
"""

import json
from datetime import UTC, datetime, timedelta
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, Integer, String, Text

from storefront.catalogue.availability import StockTable
from storefront.checkout.composer import (
    DEFAULT_COLOR,
    CartLine,
    color_counts,
    compose_lines,
    max_quantity,
    update_item_color,
)
from storefront.checkout.events import (
    CheckoutAbandoned,
    CheckoutCompleted,
    CheckoutStarted,
    DiscountAccepted,
    DiscountOffered,
)
from storefront.checkout.pricing import DEFAULT_SCHEDULE, PricingResult, price_quote
from storefront.domain import storefront


class CheckoutState(Enum):
    EDITING = "Editing"
    DISCOUNT_OFFER = "DiscountOffer"
    SUBMITTING = "Submitting"
    SUCCESS = "Success"
    CLOSED = "Closed"


def clamp_quantity(quantity: int, stock: StockTable) -> int:
    return max(1, min(quantity, max_quantity(stock)))


# Editing sessions untouched by the shopper for longer than this are idle
IDLE_CHECKOUT_HOURS = 2


def idle_cutoff(as_of: datetime | None = None, hours: int = IDLE_CHECKOUT_HOURS) -> datetime:
    """Naive UTC instant before which a checkout counts as idle."""
    as_of = as_of or datetime.now(UTC)
    return (as_of - timedelta(hours=hours)).replace(tzinfo=None)


@storefront.aggregate
class CheckoutSession:
    preferred_color = String(required=True, max_length=50, default=DEFAULT_COLOR)
    quantity = Integer(required=True, min_value=1, default=1)
    lines = Text()  # JSON array of CartLine dicts
    discount_accepted = Boolean(default=False)
    discount_offered = Boolean(default=False)
    state = String(choices=CheckoutState, default=CheckoutState.EDITING.value)
    order_id = Identifier()
    created_at = DateTime()
    updated_at = DateTime()
    last_active_at = DateTime()  # shopper actions only, not stock refreshes

    @invariant.post
    def one_line_per_unit(self):
        if self.lines is not None and len(self.cart_lines) != self.quantity:
            raise ValidationError({"lines": ["Cart must hold exactly one line per unit"]})

    @invariant.post
    def completed_session_must_reference_order(self):
        if self.state == CheckoutState.SUCCESS.value and not self.order_id:
            raise ValidationError({"order_id": ["A completed checkout must reference its order"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def start(cls, preferred_color, quantity, stock: StockTable):
        quantity = clamp_quantity(quantity or 1, stock)
        unit_price = price_quote(quantity).unit_price
        lines = compose_lines(quantity, preferred_color, stock, unit_price=unit_price)

        now = datetime.now(UTC)
        session = cls(
            preferred_color=preferred_color,
            quantity=quantity,
            lines=json.dumps([line.to_dict() for line in lines]),
            state=CheckoutState.EDITING.value,
            created_at=now,
            updated_at=now,
            last_active_at=now,
        )
        session.raise_(
            CheckoutStarted(
                session_id=str(session.id),
                preferred_color=preferred_color,
                quantity=quantity,
            )
        )
        return session

    # -------------------------------------------------------------------
    # Derived views
    # -------------------------------------------------------------------
    @property
    def cart_lines(self) -> list[CartLine]:
        raw = json.loads(self.lines) if isinstance(self.lines, str) else (self.lines or [])
        return [CartLine.from_dict(item) for item in raw]

    def color_summary(self) -> dict[str, int]:
        return dict(color_counts(self.cart_lines))

    def pricing(self) -> PricingResult:
        return price_quote(self.quantity, self.discount_accepted)

    def is_idle(self, cutoff: datetime) -> bool:
        last_active = self.last_active_at or self.created_at
        return last_active is None or last_active.replace(tzinfo=None) < cutoff

    # -------------------------------------------------------------------
    # Cart editing
    # -------------------------------------------------------------------
    def change_quantity(self, quantity, stock: StockTable):
        """Set a new quantity (clamped to what can be sold) and recompose."""
        self._ensure_state(CheckoutState.EDITING, "Quantity can only be changed while editing")
        with atomic_change(self):
            self.quantity = clamp_quantity(quantity, stock)
            self._recompose(stock)
            self.last_active_at = datetime.now(UTC)

    def change_line_color(self, position, color, stock: StockTable):
        """Recolor one unit. Position 1 also becomes the preferred color."""
        self._ensure_state(CheckoutState.EDITING, "Colors can only be changed while editing")
        lines = update_item_color(self.cart_lines, position - 1, color, stock)
        if position == 1:
            self.preferred_color = color
        self._write_lines(lines)
        self.last_active_at = datetime.now(UTC)

    def refresh_stock(self, stock: StockTable):
        """Recompose the current quantity against fresh stock."""
        if self.state not in (CheckoutState.EDITING.value, CheckoutState.DISCOUNT_OFFER.value):
            return
        self._recompose(stock)

    def _recompose(self, stock: StockTable):
        unit_price = price_quote(self.quantity).unit_price
        lines = compose_lines(self.quantity, self.preferred_color, stock, self.cart_lines, unit_price)
        self._write_lines(lines)

    def _write_lines(self, lines: list[CartLine]):
        self.lines = json.dumps([line.to_dict() for line in lines])
        self.updated_at = datetime.now(UTC)

    # -------------------------------------------------------------------
    # Retention offer
    # -------------------------------------------------------------------
    def request_close(self):
        """Try to close the form; the first attempt turns into the retention offer."""
        state = CheckoutState(self.state)

        if state == CheckoutState.SUCCESS:
            self._transition(CheckoutState.CLOSED)
            return

        self._ensure_state(CheckoutState.EDITING, f"Cannot close a checkout in {state.value} state")

        if not self.discount_accepted:
            self.discount_offered = True
            self._transition(CheckoutState.DISCOUNT_OFFER)
            self.raise_(
                DiscountOffered(
                    session_id=str(self.id),
                    quantity=self.quantity,
                    total=self.pricing().total,
                )
            )
            return

        self._abandon()

    def accept_discount(self):
        self._ensure_state(CheckoutState.DISCOUNT_OFFER, "No discount offer is pending")
        self.discount_accepted = True
        self._transition(CheckoutState.EDITING)
        self.raise_(
            DiscountAccepted(
                session_id=str(self.id),
                discount_percentage=DEFAULT_SCHEDULE.discount_percentage,
                total=self.pricing().total,
            )
        )

    def decline_discount(self):
        self._ensure_state(CheckoutState.DISCOUNT_OFFER, "No discount offer is pending")
        self._abandon()

    def expire(self):
        """Close an open checkout the shopper walked away from. No offer is made."""
        self._ensure_state(CheckoutState.EDITING, "Only an open checkout can expire")
        self._abandon()

    def _abandon(self):
        self._transition(CheckoutState.CLOSED)
        self.raise_(
            CheckoutAbandoned(
                session_id=str(self.id),
                quantity=self.quantity,
                discount_offered=bool(self.discount_offered),
            )
        )

    # -------------------------------------------------------------------
    # Submission
    # -------------------------------------------------------------------
    def begin_submission(self):
        self._ensure_state(CheckoutState.EDITING, "Only an open checkout can be submitted")
        self._transition(CheckoutState.SUBMITTING)

    def complete(self, order_id):
        self._ensure_state(CheckoutState.SUBMITTING, "Checkout is not being submitted")
        self.order_id = order_id
        self._transition(CheckoutState.SUCCESS)
        self.raise_(
            CheckoutCompleted(
                session_id=str(self.id),
                order_id=str(order_id),
                quantity=self.quantity,
                total=self.pricing().total,
                discount_accepted=bool(self.discount_accepted),
            )
        )

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    def _ensure_state(self, expected: CheckoutState, message: str):
        if CheckoutState(self.state) != expected:
            raise ValidationError({"state": [message]})

    def _transition(self, new_state: CheckoutState):
        now = datetime.now(UTC)
        self.state = new_state.value
        self.updated_at = now
        self.last_active_at = now
