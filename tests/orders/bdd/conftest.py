"""Shared BDD fixtures and step definitions for the admin order workflow."""

import pytest
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then
from storefront.checkout.composer import CartLine
from storefront.order.destination import ConfirmationRequired
from storefront.order.events import OrderPlaced, PaymentRegistered, PaymentStatusReset, ShippingStatusChanged
from storefront.order.order import Order
from storefront.order.status import ShippingStatus

_ORDER_EVENT_CLASSES = {
    "OrderPlaced": OrderPlaced,
    "ShippingStatusChanged": ShippingStatusChanged,
    "PaymentRegistered": PaymentRegistered,
    "PaymentStatusReset": PaymentStatusReset,
}


def _place(is_out_of_capital: bool, units: int) -> Order:
    lines = [CartLine(position, "Silvery", 149.90 if units > 1 else 159.90) for position in range(1, units + 1)]
    order = Order.place("cust-001", lines, discount_accepted=False, is_out_of_capital=is_out_of_capital)
    order._events.clear()
    return order


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse("a metro order for {units:d} units"), target_fixture="order")
def metro_order(units):
    return _place(False, units)


@given(parsers.cfparse("a province order for {units:d} units"), target_fixture="order")
def province_order(units):
    return _place(True, units)


@given(parsers.cfparse('the order is "{status}"'), target_fixture="order")
def order_in_status(order, status):
    order.change_shipping_status(
        ShippingStatus(status),
        confirmed=True,
        shipping_address="Agencia Shalom, Av. Ejército 101",
    )
    order._events.clear()
    return order


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then("the action fails with a validation error")
def action_fails_with_validation_error(error):
    assert error["exc"] is not None, "Expected a validation error but none was raised"
    assert isinstance(error["exc"], ValidationError)


@then("a confirmation is required")
def confirmation_required(error):
    assert isinstance(error["exc"], ConfirmationRequired)


@then(parsers.cfparse('the confirmation asks for "{field_name}"'))
def confirmation_asks_for(error, field_name):
    assert field_name in [f.name for f in error["exc"].form.fields]


@then(parsers.cfparse('the shipping status is "{status}"'))
def shipping_status_is(order, status):
    assert order.shipping_status == status


@then(parsers.cfparse('the payment status is "{status}"'))
def payment_status_is(order, status):
    assert order.payment_status == status


@then(parsers.cfparse("the amount due is {amount:f}"))
def amount_due_is(order, amount):
    assert order.amount_due == pytest.approx(amount)


@then(parsers.cfparse("a {event_type} order event is raised"))
def order_event_raised(order, event_type):
    event_cls = _ORDER_EVENT_CLASSES[event_type]
    assert any(
        isinstance(e, event_cls) for e in order._events
    ), f"No {event_type} event found. Events: {[type(e).__name__ for e in order._events]}"


@then("no order event is raised")
def no_order_event(order):
    assert order._events == []
