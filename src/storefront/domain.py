"""Storefront bounded context — single-product cash-on-delivery shop.

Covers the variant catalog, the checkout flow that composes and prices the
cart, order placement, and the admin workflow over shipment and payment
status. Order snapshots are pushed to an external webhook after each
committed change.
"""

from protean.domain import Domain

from storefront.utils.logging import configure_logging

configure_logging()

storefront = Domain(name="storefront")
