"""Order board reads."""

from protean.utils.globals import current_domain

from storefront.customer.customer import Customer
from storefront.order.order import Order


def list_orders(shipping_status=None, limit=100, offset=0) -> list[Order]:
    """Newest first, optionally narrowed to one shipping status."""
    query = current_domain.repository_for(Order)._dao.query
    if shipping_status:
        query = query.filter(shipping_status=shipping_status)
    return query.order_by("-created_at").offset(offset).limit(limit).all().items


def order_with_customer(order_id) -> tuple[Order, Customer]:
    order = current_domain.repository_for(Order).get(order_id)
    customer = current_domain.repository_for(Customer).get(order.customer_id)
    return order, customer
