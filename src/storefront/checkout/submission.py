"""Checkout submission — command and handler that turn a session into an order.

Steps, in order: validate the delivery details, re-check every color's
line count against current stock, then create the Customer, create the
Order with its items, take the sold units off each variant, and mark the
session complete. The order webhook is sent afterwards by
``storefront.notifications.dispatch``; it cannot fail a submission.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.catalogue.cache import catalog, find_variant
from storefront.catalogue.variant import ProductVariant
from storefront.checkout.composer import StockConflict, color_counts, find_stock_conflicts
from storefront.checkout.session import CheckoutSession
from storefront.checkout.validation import validate_customer_details
from storefront.customer.customer import Customer
from storefront.domain import storefront
from storefront.geography.ubigeo import is_metro
from storefront.order.order import Order

logger = structlog.get_logger(__name__)


@storefront.command(part_of="CheckoutSession")
class SubmitOrder:
    session_id = Identifier(required=True)
    first_name = String(max_length=100)
    last_name = String(max_length=100)
    phone = String(max_length=20)
    address = String(max_length=255)
    reference = String(max_length=255)
    department = String(max_length=100)
    province = String(max_length=100)
    district = String(max_length=100)
    national_id = String(max_length=20)


@storefront.command_handler(part_of=CheckoutSession)
class SubmitOrderHandler:
    @handle(SubmitOrder)
    def submit_order(self, command):
        session_repo = current_domain.repository_for(CheckoutSession)
        session = session_repo.get(command.session_id)
        session.begin_submission()

        details = validate_customer_details(command.to_dict())

        lines = session.cart_lines
        conflicts = find_stock_conflicts(lines, catalog.snapshot())
        if conflicts:
            logger.warning(
                "Submission blocked by stock conflict",
                session_id=str(session.id),
                conflicts=conflicts,
            )
            raise StockConflict(conflicts)

        customer = Customer.register(details)
        current_domain.repository_for(Customer).add(customer)

        order = Order.place(
            customer_id=customer.id,
            lines=lines,
            discount_accepted=bool(session.discount_accepted),
            is_out_of_capital=not is_metro(details["department"], details["province"]),
        )
        current_domain.repository_for(Order).add(order)

        variant_repo = current_domain.repository_for(ProductVariant)
        for color, quantity in color_counts(lines).items():
            variant = find_variant(color)
            if variant is None:
                logger.error("Sold color has no variant", color=color, order_id=str(order.id))
                continue
            variant.decrement(quantity)
            variant_repo.add(variant)
        catalog.invalidate()

        session.complete(order.id)
        session_repo.add(session)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            session_id=str(session.id),
            total=order.total,
            units=order.unit_count,
            is_out_of_capital=order.is_out_of_capital,
        )
        return str(order.id)
