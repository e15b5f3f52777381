"""Shared BDD fixtures and step definitions for the checkout retention offer."""

import pytest
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then
from storefront.catalogue.availability import StockTable
from storefront.checkout.events import (
    CheckoutAbandoned,
    CheckoutCompleted,
    CheckoutStarted,
    DiscountAccepted,
    DiscountOffered,
)
from storefront.checkout.session import CheckoutSession

_CHECKOUT_EVENT_CLASSES = {
    "CheckoutStarted": CheckoutStarted,
    "DiscountOffered": DiscountOffered,
    "DiscountAccepted": DiscountAccepted,
    "CheckoutAbandoned": CheckoutAbandoned,
    "CheckoutCompleted": CheckoutCompleted,
}


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


@pytest.fixture()
def stock():
    return StockTable.of({"Black": 5, "White": 5, "Gray": 5, "Silvery": 5})


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse("an open checkout for {quantity:d} units"), target_fixture="session")
def open_checkout(stock, quantity):
    session = CheckoutSession.start("Silvery", quantity, stock)
    session._events.clear()
    return session


@given("the discount was offered", target_fixture="session")
def discount_offered(session):
    session.request_close()
    session._events.clear()
    return session


@given("the discount was accepted", target_fixture="session")
def discount_accepted(session):
    session.request_close()
    session.accept_discount()
    session._events.clear()
    return session


@given("the order was submitted", target_fixture="session")
def order_submitted(session):
    session.begin_submission()
    session.complete("order-001")
    session._events.clear()
    return session


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then("the action fails with a validation error")
def action_fails_with_validation_error(error):
    assert error["exc"] is not None, "Expected a validation error but none was raised"
    assert isinstance(error["exc"], ValidationError)


@then(parsers.cfparse('the checkout state is "{state}"'))
def checkout_state_is(session, state):
    assert session.state == state


@then(parsers.cfparse("the checkout total is {total:f}"))
def checkout_total_is(session, total):
    assert session.pricing().rounded().total == total


@then(parsers.cfparse("a {event_type} checkout event is raised"))
def checkout_event_raised(session, event_type):
    event_cls = _CHECKOUT_EVENT_CLASSES[event_type]
    assert any(
        isinstance(e, event_cls) for e in session._events
    ), f"No {event_type} event found. Events: {[type(e).__name__ for e in session._events]}"


@then("no checkout event is raised")
def no_checkout_event(session):
    assert session._events == []
