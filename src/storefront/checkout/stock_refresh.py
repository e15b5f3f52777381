"""Open checkouts follow stock changes.

When a variant's stock or activity changes, every checkout the shopper is
still working on is recomposed against the new stock table so lines never
point at colors that ran out. Idle checkouts are left alone; submission
re-checks their stock anyway, and ``ExpireIdleCheckouts`` closes them.
"""

import structlog
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from storefront.catalogue.cache import catalog
from storefront.catalogue.events import VariantStockChanged
from storefront.catalogue.variant import ProductVariant
from storefront.checkout.session import CheckoutSession, CheckoutState, idle_cutoff
from storefront.domain import storefront

logger = structlog.get_logger(__name__)


@storefront.event_handler(part_of=ProductVariant)
class OpenCheckoutStockRefresher:
    @handle(VariantStockChanged)
    def on_stock_changed(self, event: VariantStockChanged) -> None:
        repo = current_domain.repository_for(CheckoutSession)
        cutoff = idle_cutoff()
        open_sessions = [
            session
            for session in repo._dao.query.filter(state=CheckoutState.EDITING.value).all().items
            if not session.is_idle(cutoff)
        ]
        if not open_sessions:
            return

        # Handler order is not guaranteed; never trust a table cached before this change
        catalog.invalidate()
        stock = catalog.snapshot()

        for session in open_sessions:
            session.refresh_stock(stock)
            repo.add(session)

        logger.info(
            "Open checkouts recomposed after stock change",
            color=event.color,
            new_stock=event.new_stock,
            sessions=len(open_sessions),
        )
