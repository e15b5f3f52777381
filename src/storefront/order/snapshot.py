"""Order snapshot — the JSON document posted to the order webhook.

Keys follow the order store's column names so downstream automations can
read webhook payloads and database rows the same way.
"""

from storefront.catalogue.variant import color_label


def order_snapshot(order, customer, event: str) -> dict:
    return {
        "event": event,
        "order_id": str(order.id),
        "customer": customer.to_snapshot() if customer is not None else None,
        "order_items": [
            {
                "id": str(item.id),
                "color": color_label(item.color),
                "cantidad": item.quantity,
                "precio_unitario": item.unit_price,
                "product_id": item.product_id,
            }
            for item in order.items
        ],
        "estado_pago": order.payment_status,
        "estado_envio": order.shipping_status,
        "envio_provincia": bool(order.is_out_of_capital),
        "total": order.total,
        "amount_paid": order.amount_paid,
        "amount_due": order.amount_due,
        "shipping_address": order.shipping_address,
        "order_number": order.order_number,
        "order_code": order.order_code,
        "created_at": order.created_at.isoformat() if order.created_at else None,
    }
