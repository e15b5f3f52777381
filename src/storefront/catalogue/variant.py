"""ProductVariant aggregate — one color of the single product and its stock counter.

Stock is a flat counter: restocks set it, sales decrement it (never below
zero). A variant can be deactivated to hide it from the storefront without
losing its counter.
"""

import os
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import Boolean, Integer, String

from storefront.catalogue.availability import StockLevel
from storefront.catalogue.events import VariantRegistered, VariantStockChanged
from storefront.domain import storefront

PRODUCT_ID = os.environ.get("STOREFRONT_PRODUCT_ID", "charger_typec_lightning")


class StockChangeReason(Enum):
    RESTOCK = "Restock"
    SALE = "Sale"
    ACTIVATED = "Activated"
    DEACTIVATED = "Deactivated"


# Display labels used on labels and outgoing webhooks
COLOR_LABELS = {
    "Black": "Negro",
    "White": "Blanco",
    "Gray": "Gris",
    "Silvery": "Plateado",
}


def color_label(color: str) -> str:
    return COLOR_LABELS.get(color, color)


@storefront.aggregate
class ProductVariant:
    product_id = String(required=True, max_length=100, default=PRODUCT_ID)
    color = String(required=True, max_length=50)
    stock = Integer(required=True, min_value=0, default=0)
    active = Boolean(default=True)
    position = Integer(default=0)

    @classmethod
    def register(cls, color, stock=0, position=0, active=True, product_id=None):
        if stock < 0:
            raise ValidationError({"stock": ["Stock cannot be negative"]})

        variant = cls(
            product_id=product_id or PRODUCT_ID,
            color=color,
            stock=stock,
            active=active,
            position=position,
        )
        variant.raise_(
            VariantRegistered(
                variant_id=str(variant.id),
                product_id=variant.product_id,
                color=color,
                stock=stock,
                position=position,
            )
        )
        return variant

    def to_stock_level(self) -> StockLevel:
        return StockLevel(color=self.color, stock=self.stock, active=self.active)

    def set_stock(self, stock):
        """Overwrite the counter (admin restock or correction)."""
        if stock < 0:
            raise ValidationError({"stock": ["Stock cannot be negative"]})
        self._change_stock(stock, StockChangeReason.RESTOCK)

    def decrement(self, quantity):
        """Take sold units off the counter, clamping at zero."""
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})
        self._change_stock(max(0, self.stock - quantity), StockChangeReason.SALE)

    def activate(self):
        if self.active:
            raise ValidationError({"active": ["Variant is already active"]})
        self.active = True
        self._change_stock(self.stock, StockChangeReason.ACTIVATED)

    def deactivate(self):
        if not self.active:
            raise ValidationError({"active": ["Variant is already inactive"]})
        self.active = False
        self._change_stock(self.stock, StockChangeReason.DEACTIVATED)

    def _change_stock(self, new_stock, reason):
        previous_stock = self.stock
        self.stock = new_stock
        self.raise_(
            VariantStockChanged(
                variant_id=str(self.id),
                product_id=self.product_id,
                color=self.color,
                previous_stock=previous_stock,
                new_stock=new_stock,
                active=self.active,
                reason=reason.value,
            )
        )
