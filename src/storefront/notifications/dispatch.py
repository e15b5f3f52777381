"""Order webhook dispatch — posts the order snapshot after each committed change.

Runs as an event handler, so it only sees changes that were persisted.
Delivery is best effort: a missing endpoint is skipped, and any failure is
logged and swallowed so it can never undo an order or a status change.
"""

import structlog
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from storefront.customer.customer import Customer
from storefront.domain import storefront
from storefront.notifications.webhook import get_webhook
from storefront.order.events import OrderPlaced, PaymentRegistered, ShippingStatusChanged
from storefront.order.order import Order
from storefront.order.snapshot import order_snapshot
from storefront.order.status import ShippingStatus

logger = structlog.get_logger(__name__)

ORDER_CREATED = "order.created"
SHIPPING_STATUS_CHANGED = "order.shipping_status_changed"
PAYMENT_REGISTERED = "order.payment_registered"


@storefront.event_handler(part_of=Order)
class OrderNotifier:
    @handle(OrderPlaced)
    def on_order_placed(self, event: OrderPlaced) -> None:
        notify_order(str(event.order_id), ORDER_CREATED)

    @handle(ShippingStatusChanged)
    def on_shipping_status_changed(self, event: ShippingStatusChanged) -> None:
        # A reset to pendiente is an undo, not news
        if event.new_status == ShippingStatus.PENDING.value:
            return
        notify_order(str(event.order_id), SHIPPING_STATUS_CHANGED)

    @handle(PaymentRegistered)
    def on_payment_registered(self, event: PaymentRegistered) -> None:
        notify_order(str(event.order_id), PAYMENT_REGISTERED)


def notify_order(order_id: str, event_name: str) -> dict | None:
    """Post the current snapshot of an order. Never raises."""
    try:
        webhook = get_webhook()
        if not webhook.configured:
            logger.info("Webhook not configured, skipping", order_id=order_id, webhook_event=event_name)
            return None

        order = current_domain.repository_for(Order).get(order_id)
        customer = current_domain.repository_for(Customer).get(order.customer_id)
        result = webhook.post(order_snapshot(order, customer, event_name))
    except Exception as e:
        logger.error("Order webhook failed", order_id=order_id, webhook_event=event_name, error=str(e))
        return None

    if result.get("status") != "sent":
        logger.error(
            "Order webhook rejected",
            order_id=order_id,
            webhook_event=event_name,
            error=result.get("error", "Unknown webhook error"),
        )
    else:
        logger.info("Order webhook sent", order_id=order_id, webhook_event=event_name)
    return result
