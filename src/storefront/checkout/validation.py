"""Checkout form rules for the customer's delivery details.

All field errors are collected and raised together so the form can show
every problem at once.
"""

from protean.exceptions import ValidationError

from storefront.geography.ubigeo import districts, is_metro, provinces

NAME_MIN_LENGTH = 2
PHONE_MIN_LENGTH = 9
ADDRESS_MIN_LENGTH = 5
NATIONAL_ID_LENGTH = 8


def _text(details: dict, key: str) -> str:
    return (details.get(key) or "").strip()


def validate_customer_details(details: dict) -> dict:
    """Return the cleaned details or raise ``ValidationError`` keyed by field."""
    errors: dict[str, list[str]] = {}
    cleaned = {key: _text(details, key) for key in (
        "first_name",
        "last_name",
        "phone",
        "address",
        "reference",
        "department",
        "province",
        "district",
        "national_id",
    )}

    if len(cleaned["first_name"]) < NAME_MIN_LENGTH:
        errors["first_name"] = [f"First name must be at least {NAME_MIN_LENGTH} characters"]
    if len(cleaned["last_name"]) < NAME_MIN_LENGTH:
        errors["last_name"] = [f"Last name must be at least {NAME_MIN_LENGTH} characters"]

    phone = cleaned["phone"]
    if len(phone) < PHONE_MIN_LENGTH:
        errors["phone"] = [f"Phone must be at least {PHONE_MIN_LENGTH} digits"]
    elif not phone.isdigit():
        errors["phone"] = ["Phone must contain digits only"]

    if len(cleaned["address"]) < ADDRESS_MIN_LENGTH:
        errors["address"] = [f"Address must be at least {ADDRESS_MIN_LENGTH} characters"]

    department, province = cleaned["department"], cleaned["province"]
    if not department:
        errors["department"] = ["Select a department"]
    if not province:
        errors["province"] = ["Select a province"]
    elif department and province not in provinces(department):
        errors["province"] = [f"Unknown province {province} in {department}"]

    if department and province and "province" not in errors:
        options = districts(department, province)
        if options and not cleaned["district"]:
            errors["district"] = ["Select a district"]
        elif cleaned["district"] and cleaned["district"] not in options:
            errors["district"] = [f"Unknown district {cleaned['district']}"]

        national_id = cleaned["national_id"]
        if not is_metro(department, province) and (len(national_id) != NATIONAL_ID_LENGTH or not national_id.isdigit()):
            errors["national_id"] = [f"National ID must be exactly {NATIONAL_ID_LENGTH} digits"]

    if errors:
        raise ValidationError(errors)

    return cleaned
