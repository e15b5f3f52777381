"""Domain events for the CheckoutSession aggregate."""

from protean.fields import Boolean, Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="CheckoutSession")
class CheckoutStarted:
    """A shopper opened the purchase form."""

    __version__ = 1

    session_id = Identifier(required=True)
    preferred_color = String(required=True)
    quantity = Integer(required=True)


@storefront.event(part_of="CheckoutSession")
class DiscountOffered:
    """The shopper tried to leave and was shown the retention offer."""

    __version__ = 1

    session_id = Identifier(required=True)
    quantity = Integer(required=True)
    total = Float(required=True)


@storefront.event(part_of="CheckoutSession")
class DiscountAccepted:
    """The shopper took the retention offer and stayed."""

    __version__ = 1

    session_id = Identifier(required=True)
    discount_percentage = Float(required=True)
    total = Float(required=True)


@storefront.event(part_of="CheckoutSession")
class CheckoutAbandoned:
    """The purchase form was closed without an order."""

    __version__ = 1

    session_id = Identifier(required=True)
    quantity = Integer(required=True)
    discount_offered = Boolean(required=True)


@storefront.event(part_of="CheckoutSession")
class CheckoutCompleted:
    """The shopper's order was persisted."""

    __version__ = 1

    session_id = Identifier(required=True)
    order_id = Identifier(required=True)
    quantity = Integer(required=True)
    total = Float(required=True)
    discount_accepted = Boolean(required=True)
