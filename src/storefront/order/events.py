"""Domain events for the Order aggregate."""

from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Order")
class OrderPlaced:
    """A cash-on-delivery order was created from a checkout."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    total = Float(required=True)
    unit_count = Integer(required=True)
    is_out_of_capital = Boolean(required=True)
    discount_accepted = Boolean(required=True)
    placed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class ShippingStatusChanged:
    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    shipping_address = String()
    order_number = String()
    order_code = String()
    changed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class PaymentRegistered:
    """Money was collected against the order (advance or full payment)."""

    __version__ = 1

    order_id = Identifier(required=True)
    payment_id = Identifier(required=True)
    payment_type = String(required=True)
    amount = Float(required=True)
    payment_code = String(required=True)
    amount_paid = Float(required=True)
    amount_due = Float(required=True)
    payment_status = String(required=True)
    registered_at = DateTime(required=True)


@storefront.event(part_of="Order")
class PaymentStatusReset:
    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    reset_at = DateTime(required=True)
