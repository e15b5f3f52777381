"""Pricing engine — quantity and retention discount to a price breakdown.

Two tiers only: one unit sells at the base price, two or more at the tier
price. The retention discount is a flat percentage off the tiered total and
applies only once the shopper has accepted the retention offer.

All amounts are kept at full float precision; ``PricingResult.rounded()``
is the only place rounding happens.
"""

from dataclasses import dataclass, fields
from decimal import ROUND_HALF_UP, Decimal


@dataclass(frozen=True)
class PriceSchedule:
    base_price: float = 159.90
    tier_price: float = 149.90
    tier_min_quantity: int = 2
    reference_price: float = 239.85
    discount_percentage: float = 8.0
    currency: str = "PEN"

    @property
    def discount_rate(self) -> float:
        return self.discount_percentage / 100

    def unit_price_for(self, quantity: int) -> float:
        if quantity >= self.tier_min_quantity:
            return self.tier_price
        return self.base_price


DEFAULT_SCHEDULE = PriceSchedule()


def round_money(amount: float) -> float:
    """Two decimals, half away from zero (``413.724 → 413.72``, ``65.975 → 65.98``)."""
    return float(Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class PricingResult:
    quantity: int
    discount_accepted: bool
    unit_price: float
    subtotal: float
    base_total: float
    special_discount_amount: float
    total: float
    total_savings: float
    reference_total: float
    currency: str = "PEN"

    def rounded(self) -> "PricingResult":
        values = {}
        for f in fields(self):
            value = getattr(self, f.name)
            values[f.name] = round_money(value) if isinstance(value, float) else value
        return PricingResult(**values)

    def to_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def price_quote(quantity: int, discount_accepted: bool = False, schedule: PriceSchedule = DEFAULT_SCHEDULE) -> PricingResult:
    if quantity < 1:
        raise ValueError(f"Quantity must be at least 1, got {quantity}")

    unit_price = schedule.unit_price_for(quantity)
    subtotal = schedule.base_price * quantity
    base_total = unit_price * quantity

    special_discount_amount = base_total * schedule.discount_rate if discount_accepted else 0.0
    total = base_total - special_discount_amount
    total_savings = (schedule.base_price - unit_price) * quantity + special_discount_amount

    return PricingResult(
        quantity=quantity,
        discount_accepted=discount_accepted,
        unit_price=unit_price,
        subtotal=subtotal,
        base_total=base_total,
        special_discount_amount=special_discount_amount,
        total=total,
        total_savings=total_savings,
        reference_total=schedule.reference_price * quantity,
        currency=schedule.currency,
    )


def discounted_unit_price(unit_price: float, discount_accepted: bool, schedule: PriceSchedule = DEFAULT_SCHEDULE) -> float:
    """Per-line price persisted on order items."""
    if discount_accepted:
        return unit_price * (1 - schedule.discount_rate)
    return unit_price
