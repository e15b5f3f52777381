"""Application tests for order submission."""

import pytest
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain
from storefront.catalogue.cache import find_variant
from storefront.catalogue.management import SetVariantStock
from storefront.checkout.composer import StockConflict
from storefront.checkout.management import ChangeLineColor, StartCheckout
from storefront.checkout.session import CheckoutSession, CheckoutState
from storefront.checkout.submission import SubmitOrder
from storefront.customer.customer import Customer
from storefront.order.order import Order
from storefront.order.status import PaymentStatus, ShippingStatus


def _start(quantity=1, preferred_color="Silvery"):
    return current_domain.process(
        StartCheckout(preferred_color=preferred_color, quantity=quantity),
        asynchronous=False,
    )


def _submit(session_id, details):
    return current_domain.process(SubmitOrder(session_id=session_id, **details), asynchronous=False)


class TestSuccessfulSubmission:
    def test_creates_customer_and_order(self, default_stock, metro_details):
        session_id = _start(quantity=2)

        order_id = _submit(session_id, metro_details)

        order = current_domain.repository_for(Order).get(order_id)
        customer = current_domain.repository_for(Customer).get(order.customer_id)
        assert customer.first_name == "Lucía"
        assert customer.national_id is None
        assert order.unit_count == 2
        assert order.total == pytest.approx(299.80)
        assert order.amount_due == pytest.approx(299.80)
        assert order.amount_paid == 0.0
        assert order.payment_status == PaymentStatus.PENDING.value
        assert order.shipping_status == ShippingStatus.PENDING.value
        assert order.is_out_of_capital is False

    def test_session_moves_to_success(self, default_stock, metro_details):
        session_id = _start()

        order_id = _submit(session_id, metro_details)

        session = current_domain.repository_for(CheckoutSession).get(session_id)
        assert session.state == CheckoutState.SUCCESS.value
        assert str(session.order_id) == order_id

    def test_province_order_flagged_out_of_capital(self, default_stock, province_details):
        order_id = _submit(_start(), province_details)

        order = current_domain.repository_for(Order).get(order_id)
        customer = current_domain.repository_for(Customer).get(order.customer_id)
        assert order.is_out_of_capital is True
        assert customer.national_id == "45678912"

    def test_stock_decremented_per_color(self, seed_variants, metro_details):
        seed_variants({"Black": 3, "White": 3, "Gray": 3, "Silvery": 3})
        session_id = _start(quantity=3)
        current_domain.process(ChangeLineColor(session_id=session_id, position=2, color="Black"), asynchronous=False)
        current_domain.process(ChangeLineColor(session_id=session_id, position=3, color="Black"), asynchronous=False)

        _submit(session_id, metro_details)

        assert find_variant("Silvery").stock == 2
        assert find_variant("Black").stock == 1
        assert find_variant("Gray").stock == 3

    def test_discount_applied_to_item_prices(self, place_order, metro_details):
        order_id = place_order(metro_details, quantity=3, discount=True)

        order = current_domain.repository_for(Order).get(order_id)
        assert {round(item.unit_price, 3) for item in order.items} == {137.908}
        assert order.total == pytest.approx(413.724)
        assert order.discount_accepted is True


class TestRejectedSubmission:
    def test_invalid_details_leave_session_editing(self, default_stock, metro_details):
        session_id = _start()
        metro_details["phone"] = "123"

        with pytest.raises(ValidationError) as exc:
            _submit(session_id, metro_details)

        assert "phone" in exc.value.messages
        session = current_domain.repository_for(CheckoutSession).get(session_id)
        assert session.state == CheckoutState.EDITING.value
        assert current_domain.repository_for(Order)._dao.query.all().items == []

    def test_stock_conflict_blocks_submission(self, seed_variants, metro_details):
        from storefront.checkout.retention import AcceptDiscount, RequestClose

        seed_variants({"Black": 2, "Silvery": 2})
        session_id = _start(quantity=2)
        session = current_domain.repository_for(CheckoutSession).get(session_id)
        assert [line.color for line in session.cart_lines] == ["Silvery", "Black"]
        # Stock drops while the retention offer is on screen
        current_domain.process(RequestClose(session_id=session_id), asynchronous=False)
        current_domain.process(SetVariantStock(color="Black", stock=0), asynchronous=False)
        current_domain.process(AcceptDiscount(session_id=session_id), asynchronous=False)

        with pytest.raises(StockConflict) as exc:
            _submit(session_id, metro_details)

        assert "Black" in exc.value.messages
        assert find_variant("Black").stock == 0
        assert find_variant("Silvery").stock == 2
        assert current_domain.repository_for(Order)._dao.query.all().items == []
        session = current_domain.repository_for(CheckoutSession).get(session_id)
        assert session.state == CheckoutState.EDITING.value

    def test_closed_session_cannot_submit(self, default_stock, metro_details):
        from storefront.checkout.retention import DeclineDiscount, RequestClose

        session_id = _start()
        current_domain.process(RequestClose(session_id=session_id), asynchronous=False)
        current_domain.process(DeclineDiscount(session_id=session_id), asynchronous=False)

        with pytest.raises(ValidationError):
            _submit(session_id, metro_details)

