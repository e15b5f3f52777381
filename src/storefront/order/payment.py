"""Payment workflow — commands and handler for collected payments.

Payments are cash or transfer collected outside the system; the admin only
records the amount and the reference the courier or agency reports.
"""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Float, Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.order import Order
from storefront.order.status import PaymentStatus

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class RegisterPayment:
    order_id = Identifier(required=True)
    payment_type = String(required=True, choices=PaymentStatus)
    amount = Float()  # Defaults to the full amount due for "pagado"
    payment_code = String(required=True, max_length=100)


@storefront.command(part_of="Order")
class ResetPaymentStatus:
    order_id = Identifier(required=True)


@storefront.command_handler(part_of=Order)
class PaymentWorkflowHandler:
    @handle(RegisterPayment)
    def register_payment(self, command):
        try:
            payment_type = PaymentStatus(command.payment_type)
        except ValueError:
            raise ValidationError({"payment_type": [f"Unknown payment type {command.payment_type!r}"]})

        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.register_payment(payment_type, command.payment_code, amount=command.amount)
        repo.add(order)

        logger.info(
            "Payment registered",
            order_id=str(order.id),
            payment_type=payment_type.value,
            amount_paid=order.amount_paid,
            amount_due=order.amount_due,
            payment_status=order.payment_status,
        )
        return order.payment_status

    @handle(ResetPaymentStatus)
    def reset_payment_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.reset_payment_status()
        repo.add(order)
        return order.payment_status
