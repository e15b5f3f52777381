"""Tests for checkout delivery-detail rules and the geography they depend on."""

import pytest
from protean.exceptions import ValidationError
from storefront.checkout.validation import validate_customer_details
from storefront.geography import ubigeo


def _errors(details):
    with pytest.raises(ValidationError) as exc:
        validate_customer_details(details)
    return exc.value.messages


class TestGeography:
    def test_departments_sorted(self):
        departments = ubigeo.departments()
        assert departments == sorted(departments)
        assert {"LIMA", "CALLAO", "AREQUIPA"} <= set(departments)

    def test_provinces_and_districts(self):
        assert "LIMA" in ubigeo.provinces("LIMA")
        assert "MIRAFLORES" in ubigeo.districts("LIMA", "LIMA")

    def test_unknown_places_are_empty(self):
        assert ubigeo.provinces("ATLANTIS") == []
        assert ubigeo.districts("LIMA", "ATLANTIS") == []

    def test_province_without_districts(self):
        assert ubigeo.has_districts("LORETO", "PUTUMAYO") is False

    @pytest.mark.parametrize(
        "department,province,expected",
        [
            ("LIMA", "LIMA", True),
            ("CALLAO", "CALLAO", True),
            ("LIMA", "HUAURA", False),
            ("AREQUIPA", "AREQUIPA", False),
        ],
    )
    def test_metro(self, department, province, expected):
        assert ubigeo.is_metro(department, province) is expected


class TestValidDetails:
    def test_metro_details_need_no_national_id(self, metro_details):
        cleaned = validate_customer_details(metro_details)
        assert cleaned["national_id"] == ""
        assert cleaned["district"] == "MIRAFLORES"

    def test_province_details(self, province_details):
        cleaned = validate_customer_details(province_details)
        assert cleaned["national_id"] == "45678912"

    def test_values_are_trimmed(self, metro_details):
        metro_details["first_name"] = "  Lucía  "
        assert validate_customer_details(metro_details)["first_name"] == "Lucía"

    def test_district_optional_when_province_has_none(self, province_details):
        province_details.update(department="LORETO", province="PUTUMAYO", district=None)
        cleaned = validate_customer_details(province_details)
        assert cleaned["district"] == ""


class TestInvalidDetails:
    def test_all_errors_reported_together(self):
        errors = _errors({})
        assert {"first_name", "last_name", "phone", "address", "department", "province"} <= set(errors)

    def test_short_names(self, metro_details):
        metro_details.update(first_name="L", last_name="Q")
        errors = _errors(metro_details)
        assert set(errors) == {"first_name", "last_name"}

    def test_phone_too_short(self, metro_details):
        metro_details["phone"] = "98765"
        assert "phone" in _errors(metro_details)

    def test_phone_with_letters(self, metro_details):
        metro_details["phone"] = "98765432a"
        assert _errors(metro_details)["phone"] == ["Phone must contain digits only"]

    def test_short_address(self, metro_details):
        metro_details["address"] = "Av 1"
        assert "address" in _errors(metro_details)

    def test_district_required_when_province_has_districts(self, metro_details):
        metro_details["district"] = ""
        assert _errors(metro_details) == {"district": ["Select a district"]}

    def test_unknown_district(self, metro_details):
        metro_details["district"] = "NARNIA"
        assert "district" in _errors(metro_details)

    def test_unknown_province(self, metro_details):
        metro_details["province"] = "NARNIA"
        assert "province" in _errors(metro_details)

    def test_national_id_required_outside_metro(self, province_details):
        province_details["national_id"] = ""
        assert _errors(province_details) == {"national_id": ["National ID must be exactly 8 digits"]}

    @pytest.mark.parametrize("national_id", ["1234567", "123456789", "1234567a"])
    def test_national_id_must_be_eight_digits(self, province_details, national_id):
        province_details["national_id"] = national_id
        assert "national_id" in _errors(province_details)

    def test_callao_needs_no_national_id(self, metro_details):
        metro_details.update(department="CALLAO", province="CALLAO", district="BELLAVISTA")
        assert validate_customer_details(metro_details)["national_id"] == ""

    def test_lima_region_outside_lima_province_needs_national_id(self, metro_details):
        metro_details.update(province="HUAURA", district="HUACHO")
        assert "national_id" in _errors(metro_details)
