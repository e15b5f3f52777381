"""Domain events for the Customer aggregate."""

from protean.fields import Boolean, DateTime, Identifier, String

from storefront.domain import storefront


@storefront.event(part_of="Customer")
class CustomerRegistered:
    """A shopper's delivery details were recorded at checkout."""

    __version__ = 1

    customer_id = Identifier(required=True)
    first_name = String(required=True)
    last_name = String(required=True)
    department = String(required=True)
    province = String(required=True)
    district = String()
    is_metro = Boolean(required=True)
    registered_at = DateTime(required=True)
