"""Order aggregate — a placed cash-on-delivery order and its admin workflow.

An order moves along two independent axes:

    Shipping: pendiente → preparado → en_ruta → en_agencia → entregado
    Payment:  pendiente → adelanto | pagado   (pago_restante only from accounting)

The admin board may jump to any offered shipping status; which statuses are
offered, and what a confirmation collects, come from the order's
``Destination`` (metro or province), fixed when the order is placed.
"""

from datetime import UTC, datetime

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, Identifier, Integer, String

from storefront.catalogue.variant import PRODUCT_ID
from storefront.checkout.composer import CartLine
from storefront.checkout.pricing import discounted_unit_price
from storefront.domain import storefront
from storefront.order.destination import ConfirmationRequired, Destination, destination_for
from storefront.order.events import OrderPlaced, PaymentRegistered, PaymentStatusReset, ShippingStatusChanged
from storefront.order.status import PaymentStatus, ShippingStatus

# Amounts below half a cent count as settled
_SETTLED_EPSILON = 0.005


@storefront.entity(part_of="Order")
class OrderItem:
    product_id = String(max_length=100, default=PRODUCT_ID)
    color = String(required=True, max_length=50)
    quantity = Integer(required=True, min_value=1, default=1)
    unit_price = Float(required=True, min_value=0.0)

    @property
    def line_total(self) -> float:
        return self.quantity * self.unit_price


@storefront.entity(part_of="Order")
class OrderPayment:
    amount = Float(required=True, min_value=0.0)
    payment_code = String(required=True, max_length=100)
    payment_type = String(required=True, choices=PaymentStatus)
    created_at = DateTime()


@storefront.aggregate
class Order:
    customer_id = Identifier(required=True)
    items = HasMany(OrderItem)
    payments = HasMany(OrderPayment)
    total = Float(required=True, min_value=0.0)
    amount_paid = Float(default=0.0)
    amount_due = Float(default=0.0)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    shipping_status = String(choices=ShippingStatus, default=ShippingStatus.PENDING.value)
    is_out_of_capital = Boolean(default=False)
    discount_accepted = Boolean(default=False)
    shipping_address = String(max_length=500)
    order_number = String(max_length=100)
    order_code = String(max_length=100)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def amount_due_follows_payments(self):
        if self.total is None or self.amount_paid is None or self.amount_due is None:
            return
        if abs((self.total - self.amount_paid) - self.amount_due) > _SETTLED_EPSILON:
            raise ValidationError({"amount_due": ["Amount due must equal total minus amount paid"]})

    @invariant.post
    def at_agency_only_outside_metro(self):
        if self.shipping_status == ShippingStatus.AT_AGENCY.value and not self.is_out_of_capital:
            raise ValidationError({"shipping_status": ["Metro orders are never held at an agency"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, customer_id, lines: list[CartLine], discount_accepted: bool, is_out_of_capital: bool):
        """One order item per cart line, priced with the retention discount when accepted."""
        if not lines:
            raise ValidationError({"items": ["An order needs at least one item"]})

        items = [
            OrderItem(
                color=line.color,
                quantity=line.quantity,
                unit_price=discounted_unit_price(line.unit_price, discount_accepted),
            )
            for line in lines
        ]
        total = sum(item.line_total for item in items)
        now = datetime.now(UTC)

        order = cls(
            customer_id=customer_id,
            items=items,
            total=total,
            amount_paid=0.0,
            amount_due=total,
            payment_status=PaymentStatus.PENDING.value,
            shipping_status=ShippingStatus.PENDING.value,
            is_out_of_capital=is_out_of_capital,
            discount_accepted=discount_accepted,
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                customer_id=str(customer_id),
                total=total,
                unit_count=order.unit_count,
                is_out_of_capital=is_out_of_capital,
                discount_accepted=discount_accepted,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Derived views
    # -------------------------------------------------------------------
    @property
    def destination(self) -> Destination:
        return destination_for(bool(self.is_out_of_capital))

    @property
    def unit_count(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def short_code(self) -> str:
        return str(self.id)[:8].upper()

    def color_quantities(self) -> dict[str, int]:
        """Units per color, in first-seen order."""
        counts: dict[str, int] = {}
        for item in self.items:
            counts[item.color] = counts.get(item.color, 0) + item.quantity
        return counts

    def shipping_options(self) -> list[ShippingStatus]:
        return self.destination.shipping_options()

    def payment_options(self) -> list[PaymentStatus]:
        return self.destination.payment_options()

    def confirmation_for(self, status: ShippingStatus):
        return self.destination.confirmation_for(status)

    # -------------------------------------------------------------------
    # Shipping axis
    # -------------------------------------------------------------------
    def change_shipping_status(
        self,
        status: ShippingStatus,
        confirmed: bool = False,
        shipping_address=None,
        order_number=None,
        order_code=None,
    ):
        """Move to an offered shipping status.

        Anything but ``pendiente`` needs ``confirmed=True``; without it
        ``ConfirmationRequired`` carries the form to show the admin.
        """
        if status not in self.shipping_options():
            raise ValidationError({"shipping_status": [f"{status.label} is not available for this order"]})

        previous = ShippingStatus(self.shipping_status)
        if status == previous:
            raise ValidationError({"shipping_status": [f"Order is already {status.label}"]})

        form = self.confirmation_for(status)
        values = {
            "shipping_address": shipping_address,
            "order_number": order_number,
            "order_code": order_code,
        }
        if form is not None:
            if not confirmed:
                raise ConfirmationRequired(form)
            missing = form.missing_fields(values)
            if missing:
                raise ValidationError({name: ["This field is required"] for name in missing})

        now = datetime.now(UTC)
        with atomic_change(self):
            self.shipping_status = status.value
            if form is not None:
                for f in form.fields:
                    value = (values.get(f.name) or "").strip()
                    if value:
                        setattr(self, f.name, value)
            self.updated_at = now

        self.raise_(
            ShippingStatusChanged(
                order_id=str(self.id),
                previous_status=previous.value,
                new_status=status.value,
                shipping_address=self.shipping_address,
                order_number=self.order_number,
                order_code=self.order_code,
                changed_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Payment axis
    # -------------------------------------------------------------------
    def register_payment(self, payment_type: PaymentStatus, payment_code, amount=None):
        """Record money collected. ``amount`` defaults to the full balance for ``pagado``."""
        if payment_type not in (PaymentStatus.PARTIAL, PaymentStatus.PAID):
            raise ValidationError({"payment_type": [f"{payment_type.label} cannot be registered as a payment"]})
        if payment_type not in self.payment_options():
            raise ValidationError({"payment_type": [f"{payment_type.label} is not available for this order"]})

        payment_code = (payment_code or "").strip()
        if not payment_code:
            raise ValidationError({"payment_code": ["Payment reference is required"]})

        if amount is None:
            if payment_type != PaymentStatus.PAID:
                raise ValidationError({"amount": ["Amount is required for an advance payment"]})
            amount = self.amount_due

        if amount > self.amount_due + _SETTLED_EPSILON:
            raise ValidationError({"amount": [f"Amount cannot exceed the amount due ({self.amount_due:.2f})"]})
        # Rounding slack within half a cent settles the balance exactly
        amount = min(amount, self.amount_due)
        if amount <= 0:
            raise ValidationError({"amount": ["Amount must be greater than zero"]})

        now = datetime.now(UTC)
        payment = OrderPayment(
            amount=amount,
            payment_code=payment_code,
            payment_type=payment_type.value,
            created_at=now,
        )

        with atomic_change(self):
            self.amount_paid = (self.amount_paid or 0.0) + amount
            self.amount_due = self.total - self.amount_paid
            if self.amount_due <= _SETTLED_EPSILON:
                self.payment_status = PaymentStatus.PAID.value
            elif payment_type == PaymentStatus.PARTIAL:
                self.payment_status = PaymentStatus.PARTIAL.value
            self.add_payments(payment)
            self.updated_at = now

        self.raise_(
            PaymentRegistered(
                order_id=str(self.id),
                payment_id=str(payment.id),
                payment_type=payment_type.value,
                amount=amount,
                payment_code=payment_code,
                amount_paid=self.amount_paid,
                amount_due=self.amount_due,
                payment_status=self.payment_status,
                registered_at=now,
            )
        )

    def reset_payment_status(self):
        """Back to ``pendiente`` without touching collected amounts."""
        previous = PaymentStatus(self.payment_status)
        if previous == PaymentStatus.PENDING:
            raise ValidationError({"payment_status": ["Payment is already pending"]})

        now = datetime.now(UTC)
        self.payment_status = PaymentStatus.PENDING.value
        self.updated_at = now
        self.raise_(
            PaymentStatusReset(
                order_id=str(self.id),
                previous_status=previous.value,
                reset_at=now,
            )
        )
