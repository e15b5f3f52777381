"""Destination capabilities — what the admin board may do with an order.

Whether an order ships inside the metro area or out to an agency is fixed
when it is placed (``Order.is_out_of_capital``). Everything that depends on
it goes through one of the two capability objects below instead of ad hoc
checks: the statuses offered, the fields a confirmation collects, and the
label layout.
"""

from dataclasses import dataclass, field

from protean.exceptions import ValidationError

from storefront.order.status import PaymentStatus, ShippingStatus


@dataclass(frozen=True)
class ConfirmationField:
    name: str
    label: str
    required: bool = False


@dataclass(frozen=True)
class ConfirmationForm:
    """What the admin must confirm (and optionally fill in) before a status change."""

    status: ShippingStatus
    title: str
    fields: tuple[ConfirmationField, ...] = field(default_factory=tuple)

    def missing_fields(self, values: dict) -> list[str]:
        return [f.name for f in self.fields if f.required and not (values.get(f.name) or "").strip()]

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "title": self.title,
            "fields": [{"name": f.name, "label": f.label, "required": f.required} for f in self.fields],
        }


class ConfirmationRequired(ValidationError):
    """A status change needs explicit confirmation with the attached form."""

    def __init__(self, form: ConfirmationForm):
        self.form = form
        super().__init__({"confirmation": [f"Confirm the change to {form.status.label}"]})


class Destination:
    is_metro: bool
    label_layout: str

    def shipping_options(self) -> list[ShippingStatus]:
        raise NotImplementedError

    def payment_options(self) -> list[PaymentStatus]:
        raise NotImplementedError

    def confirmation_for(self, status: ShippingStatus) -> ConfirmationForm | None:
        """None when the status applies without confirmation."""
        if status == ShippingStatus.PENDING:
            return None
        return ConfirmationForm(status=status, title=f"Mark order as {status.label}?")


class MetroDestination(Destination):
    """Lima and Callao: courier delivery to the door, paid in full on delivery."""

    is_metro = True
    label_layout = "metro"

    def shipping_options(self):
        return [s for s in ShippingStatus if s != ShippingStatus.AT_AGENCY]

    def payment_options(self):
        return [PaymentStatus.PENDING, PaymentStatus.PAID]


class ProvinceDestination(Destination):
    """Everywhere else: shipped through an agency, usually against an advance."""

    is_metro = False
    label_layout = "province"

    def shipping_options(self):
        return list(ShippingStatus)

    def payment_options(self):
        return [PaymentStatus.PENDING, PaymentStatus.PARTIAL, PaymentStatus.PAID]

    def confirmation_for(self, status):
        if status == ShippingStatus.PREPARED:
            return ConfirmationForm(
                status=status,
                title="Agency shipping address",
                fields=(ConfirmationField("shipping_address", "Shipping address", required=True),),
            )
        if status == ShippingStatus.IN_TRANSIT:
            return ConfirmationForm(
                status=status,
                title="Agency tracking",
                fields=(
                    ConfirmationField("order_number", "Tracking number"),
                    ConfirmationField("order_code", "Tracking code"),
                ),
            )
        return super().confirmation_for(status)


METRO = MetroDestination()
PROVINCE = ProvinceDestination()


def destination_for(is_out_of_capital: bool) -> Destination:
    return PROVINCE if is_out_of_capital else METRO
