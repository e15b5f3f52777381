"""Customer aggregate — the recipient of one cash-on-delivery order.

A customer record is written once per checkout with the delivery details
the shopper typed in. National ID is kept only for destinations outside
the metro area, where the agency asks for it at pickup.
"""

from datetime import UTC, datetime

from protean.fields import DateTime, String

from storefront.customer.events import CustomerRegistered
from storefront.domain import storefront
from storefront.geography.ubigeo import is_metro


@storefront.aggregate
class Customer:
    first_name = String(required=True, max_length=100)
    last_name = String(required=True, max_length=100)
    phone = String(required=True, max_length=20)
    address = String(required=True, max_length=255)
    reference = String(max_length=255)
    district = String(max_length=100)
    province = String(required=True, max_length=100)
    department = String(required=True, max_length=100)
    national_id = String(max_length=8)
    created_at = DateTime()

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def is_metro(self) -> bool:
        return is_metro(self.department, self.province)

    @classmethod
    def register(cls, details: dict):
        """Create a customer from already-validated checkout details."""
        now = datetime.now(UTC)
        metro = is_metro(details["department"], details["province"])
        customer = cls(
            first_name=details["first_name"].strip(),
            last_name=details["last_name"].strip(),
            phone=details["phone"].strip(),
            address=details["address"].strip(),
            reference=(details.get("reference") or "").strip() or None,
            district=details.get("district") or None,
            province=details["province"],
            department=details["department"],
            national_id=None if metro else details["national_id"].strip(),
            created_at=now,
        )
        customer.raise_(
            CustomerRegistered(
                customer_id=str(customer.id),
                first_name=customer.first_name,
                last_name=customer.last_name,
                department=customer.department,
                province=customer.province,
                district=customer.district,
                is_metro=metro,
                registered_at=now,
            )
        )
        return customer

    def to_snapshot(self) -> dict:
        return {
            "id": str(self.id),
            "nombre": self.first_name,
            "apellido": self.last_name,
            "numero": self.phone,
            "direccion": self.address,
            "referencia": self.reference,
            "distrito": self.district,
            "provincia": self.province,
            "departamento": self.department,
            "dni": self.national_id,
        }
