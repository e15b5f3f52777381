"""Application tests for checkout editing and retention handlers."""

from datetime import UTC, datetime, timedelta

import pytest
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain
from storefront.catalogue.management import DeactivateVariant, SetVariantStock
from storefront.checkout.composer import StockConflict
from storefront.checkout.management import ChangeLineColor, ChangeQuantity, RefreshStock, StartCheckout
from storefront.checkout.retention import AcceptDiscount, DeclineDiscount, ExpireIdleCheckouts, RequestClose
from storefront.checkout.session import CheckoutSession, CheckoutState


def _start(**overrides):
    defaults = {"preferred_color": "Silvery", "quantity": 1}
    defaults.update(overrides)
    return current_domain.process(StartCheckout(**defaults), asynchronous=False)


def _session(session_id):
    return current_domain.repository_for(CheckoutSession).get(session_id)


def _colors(session_id):
    return [line.color for line in _session(session_id).cart_lines]


def _backdate(session_id, hours=3):
    repo = current_domain.repository_for(CheckoutSession)
    session = repo.get(session_id)
    session.last_active_at = datetime.now(UTC) - timedelta(hours=hours)
    repo.add(session)


@pytest.fixture()
def spec_stock(seed_variants):
    seed_variants({"Black": 1, "White": 0, "Gray": 2, "Silvery": 1})


class TestStartCheckout:
    def test_creates_session(self, default_stock):
        session_id = _start()

        session = _session(session_id)
        assert session.state == CheckoutState.EDITING.value
        assert _colors(session_id) == ["Silvery"]

    def test_uses_catalog_stock(self, spec_stock):
        session_id = _start(quantity=4)
        assert _colors(session_id) == ["Silvery", "Black", "Gray", "Gray"]

    def test_sold_out_catalog_still_opens(self, seed_variants):
        seed_variants({"Black": 0, "Silvery": 0})

        session_id = _start()

        assert _session(session_id).quantity == 1


class TestChangeQuantity:
    def test_change_quantity(self, spec_stock):
        session_id = _start()

        result = current_domain.process(ChangeQuantity(session_id=session_id, quantity=3), asynchronous=False)

        assert result == 3
        assert _colors(session_id) == ["Silvery", "Black", "Gray"]

    def test_quantity_clamped_to_stock(self, spec_stock):
        session_id = _start()
        current_domain.process(ChangeQuantity(session_id=session_id, quantity=50), asynchronous=False)
        assert _session(session_id).quantity == 4

    def test_unknown_session(self, default_stock):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(ChangeQuantity(session_id="missing", quantity=2), asynchronous=False)


class TestChangeLineColor:
    def test_recolor(self, default_stock):
        session_id = _start(quantity=2)
        current_domain.process(
            ChangeLineColor(session_id=session_id, position=2, color="White"),
            asynchronous=False,
        )
        assert _colors(session_id) == ["Silvery", "White"]

    def test_stock_conflict_not_persisted(self, spec_stock):
        session_id = _start(quantity=2)

        with pytest.raises(StockConflict):
            current_domain.process(
                ChangeLineColor(session_id=session_id, position=2, color="Silvery"),
                asynchronous=False,
            )

        assert _colors(session_id) == ["Silvery", "Black"]


class TestStockChangesReachOpenCheckouts:
    def test_restock_to_zero_recomposes_open_session(self, spec_stock):
        session_id = _start(quantity=3)
        assert _colors(session_id) == ["Silvery", "Black", "Gray"]

        current_domain.process(SetVariantStock(color="Black", stock=0), asynchronous=False)

        assert _colors(session_id) == ["Silvery", "Gray", "Gray"]

    def test_deactivated_color_leaves_the_cart(self, spec_stock):
        session_id = _start(quantity=2)

        current_domain.process(DeactivateVariant(color="Black"), asynchronous=False)

        assert "Black" not in _colors(session_id)

    def test_idle_session_left_alone(self, spec_stock):
        active_id = _start(quantity=3)
        idle_id = _start(quantity=3)
        _backdate(idle_id)

        current_domain.process(SetVariantStock(color="Black", stock=0), asynchronous=False)

        assert _colors(active_id) == ["Silvery", "Gray", "Gray"]
        assert _colors(idle_id) == ["Silvery", "Black", "Gray"]

    def test_explicit_refresh(self, spec_stock):
        session_id = _start(quantity=2)
        current_domain.process(RefreshStock(session_id=session_id), asynchronous=False)
        assert len(_colors(session_id)) == 2


class TestRetentionHandlers:
    def test_close_offers_discount(self, default_stock):
        session_id = _start()

        state = current_domain.process(RequestClose(session_id=session_id), asynchronous=False)

        assert state == CheckoutState.DISCOUNT_OFFER.value

    def test_accept_keeps_session_open(self, default_stock):
        session_id = _start(quantity=3)
        current_domain.process(RequestClose(session_id=session_id), asynchronous=False)

        state = current_domain.process(AcceptDiscount(session_id=session_id), asynchronous=False)

        assert state == CheckoutState.EDITING.value
        assert _session(session_id).pricing().rounded().total == 413.72

    def test_decline_closes(self, default_stock):
        session_id = _start()
        current_domain.process(RequestClose(session_id=session_id), asynchronous=False)

        state = current_domain.process(DeclineDiscount(session_id=session_id), asynchronous=False)

        assert state == CheckoutState.CLOSED.value

    def test_decline_without_offer_rejected(self, default_stock):
        session_id = _start()
        with pytest.raises(ValidationError):
            current_domain.process(DeclineDiscount(session_id=session_id), asynchronous=False)


class TestExpireIdleCheckouts:
    def test_closes_only_idle_open_sessions(self, default_stock):
        active_id = _start()
        idle_id = _start()
        offered_id = _start()
        _backdate(idle_id)
        current_domain.process(RequestClose(session_id=offered_id), asynchronous=False)
        _backdate(offered_id)

        expired = current_domain.process(ExpireIdleCheckouts(), asynchronous=False)

        assert expired == 1
        assert _session(idle_id).state == CheckoutState.CLOSED.value
        assert _session(active_id).state == CheckoutState.EDITING.value
        assert _session(offered_id).state == CheckoutState.DISCOUNT_OFFER.value

    def test_threshold_and_as_of(self, default_stock):
        session_id = _start()

        later = datetime.now(UTC) + timedelta(hours=5)
        expired = current_domain.process(
            ExpireIdleCheckouts(idle_threshold_hours=6, as_of=later),
            asynchronous=False,
        )
        assert expired == 0

        expired = current_domain.process(
            ExpireIdleCheckouts(idle_threshold_hours=4, as_of=later),
            asynchronous=False,
        )
        assert expired == 1
        assert _session(session_id).state == CheckoutState.CLOSED.value
