"""Read-through cache of the product's stock table.

The composer and the checkout handlers read stock from ``catalog.snapshot()``.
The snapshot is rebuilt from the repository on the first read after
``invalidate()``; every ``VariantStockChanged`` event invalidates it.
"""

import structlog
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from storefront.catalogue.availability import StockTable
from storefront.catalogue.events import VariantStockChanged
from storefront.catalogue.variant import PRODUCT_ID, ProductVariant
from storefront.domain import storefront

logger = structlog.get_logger(__name__)


def list_variants(product_id: str = PRODUCT_ID) -> list[ProductVariant]:
    """All variants of the product in catalog order."""
    repo = current_domain.repository_for(ProductVariant)
    return repo._dao.query.filter(product_id=product_id).order_by("position").all().items


def find_variant(color: str, product_id: str = PRODUCT_ID) -> ProductVariant | None:
    repo = current_domain.repository_for(ProductVariant)
    results = repo._dao.query.filter(product_id=product_id, color=color).all().items
    return results[0] if results else None


class VariantCatalog:
    def __init__(self, product_id: str = PRODUCT_ID):
        self.product_id = product_id
        self._snapshot: StockTable | None = None

    def snapshot(self) -> StockTable:
        if self._snapshot is None:
            variants = list_variants(self.product_id)
            self._snapshot = StockTable(levels=tuple(v.to_stock_level() for v in variants))
            logger.debug(
                "Stock table loaded",
                product_id=self.product_id,
                stock=self._snapshot.as_dict(),
            )
        return self._snapshot

    def invalidate(self) -> None:
        self._snapshot = None


catalog = VariantCatalog()


@storefront.event_handler(part_of=ProductVariant)
class StockCacheInvalidator:
    """Drops the cached stock table whenever a variant's stock changes."""

    @handle(VariantStockChanged)
    def on_stock_changed(self, event: VariantStockChanged) -> None:
        catalog.invalidate()
        logger.info(
            "Stock changed, catalog cache invalidated",
            color=event.color,
            previous_stock=event.previous_stock,
            new_stock=event.new_stock,
            reason=event.reason,
        )
