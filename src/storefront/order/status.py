"""Shipping and payment statuses.

Member names are what the code speaks; values are the codes persisted in
the order store and sent to the webhook.
"""

from enum import Enum


class ShippingStatus(Enum):
    PENDING = "pendiente"
    PREPARED = "preparado"
    IN_TRANSIT = "en_ruta"
    AT_AGENCY = "en_agencia"
    DELIVERED = "entregado"

    @property
    def label(self) -> str:
        return _SHIPPING_LABELS[self]


class PaymentStatus(Enum):
    PENDING = "pendiente"
    PARTIAL = "adelanto"
    REMAINING = "pago_restante"
    PAID = "pagado"

    @property
    def label(self) -> str:
        return _PAYMENT_LABELS[self]


_SHIPPING_LABELS = {
    ShippingStatus.PENDING: "Pendiente",
    ShippingStatus.PREPARED: "Preparado",
    ShippingStatus.IN_TRANSIT: "En ruta",
    ShippingStatus.AT_AGENCY: "En agencia",
    ShippingStatus.DELIVERED: "Entregado",
}

_PAYMENT_LABELS = {
    PaymentStatus.PENDING: "Pendiente",
    PaymentStatus.PARTIAL: "Adelanto",
    PaymentStatus.REMAINING: "Pago restante",
    PaymentStatus.PAID: "Pagado",
}
