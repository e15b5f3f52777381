"""Shipping workflow — command and handler for admin shipping transitions."""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.order import Order
from storefront.order.status import ShippingStatus

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class ChangeShippingStatus:
    """Move an order to a new shipping status.

    Without ``confirmed`` the handler only reports the confirmation form the
    status needs; ``pendiente`` never needs one.
    """

    order_id = Identifier(required=True)
    status = String(required=True, choices=ShippingStatus)
    confirmed = Boolean(default=False)
    shipping_address = String(max_length=500)
    order_number = String(max_length=100)
    order_code = String(max_length=100)


def parse_shipping_status(value) -> ShippingStatus:
    try:
        return value if isinstance(value, ShippingStatus) else ShippingStatus(value)
    except ValueError:
        raise ValidationError({"status": [f"Unknown shipping status {value!r}"]})


@storefront.command_handler(part_of=Order)
class ShippingWorkflowHandler:
    @handle(ChangeShippingStatus)
    def change_shipping_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)

        order.change_shipping_status(
            parse_shipping_status(command.status),
            confirmed=bool(command.confirmed),
            shipping_address=command.shipping_address,
            order_number=command.order_number,
            order_code=command.order_code,
        )
        repo.add(order)

        logger.info(
            "Shipping status changed",
            order_id=str(order.id),
            shipping_status=order.shipping_status,
        )
        return order.shipping_status
