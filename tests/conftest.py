import os
from pathlib import Path

import pytest
from protean.integrations.pytest import DomainFixture


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pytest hook to run before collecting tests.

    Selects the config overlay and routes webhooks to the in-memory fake
    before the storefront domain is imported anywhere.
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env
    os.environ.setdefault("WEBHOOK_ADAPTER", "fake")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = Path(item.fspath)

        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path) or "/bdd/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session")
def storefront_bed():
    from storefront.domain import storefront

    bed = DomainFixture(storefront)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(scope="session", autouse=True)
def setup_db(storefront_bed):
    from storefront.domain import storefront
    from storefront.utils.db import drop_db, setup_db

    setup_db(storefront)

    yield

    drop_db(storefront)


@pytest.fixture(autouse=True)
def _ctx(storefront_bed):
    with storefront_bed.domain_context():
        yield


@pytest.fixture(autouse=True)
def run_around_tests(_ctx):
    """Fixture to automatically cleanup infrastructure after every test"""
    yield

    from protean import current_domain

    from storefront.catalogue.cache import catalog
    from storefront.notifications.webhook import reset_webhook

    # Clear all databases
    for _, provider in current_domain.providers.items():
        provider._data_reset()

    # Drain event stores
    current_domain.event_store.store._data_reset()

    catalog.invalidate()
    reset_webhook()


@pytest.fixture()
def webhook():
    """The in-memory webhook adapter that records every posted snapshot."""
    from storefront.notifications.webhook import set_webhook
    from storefront.notifications.webhook.fake_adapter import FakeWebhookAdapter

    adapter = FakeWebhookAdapter()
    set_webhook(adapter)
    return adapter


@pytest.fixture()
def seed_variants():
    """Register variants in catalog order: ``seed_variants({"Black": 1, "White": 0})``."""
    from protean.utils.globals import current_domain

    from storefront.catalogue.management import RegisterVariant

    def _seed(stock: dict[str, int]):
        for position, (color, units) in enumerate(stock.items()):
            current_domain.process(
                RegisterVariant(color=color, stock=units, position=position),
                asynchronous=False,
            )

    return _seed


@pytest.fixture()
def default_stock(seed_variants):
    stock = {"Black": 5, "White": 5, "Gray": 5, "Silvery": 5}
    seed_variants(stock)
    return stock


@pytest.fixture()
def metro_details():
    return {
        "first_name": "Lucía",
        "last_name": "Quispe",
        "phone": "987654321",
        "address": "Av. Larco 345",
        "reference": "Frente al parque",
        "department": "LIMA",
        "province": "LIMA",
        "district": "MIRAFLORES",
    }


@pytest.fixture()
def province_details():
    return {
        "first_name": "Jorge",
        "last_name": "Mamani",
        "phone": "951753852",
        "address": "Calle Mercaderes 210",
        "department": "AREQUIPA",
        "province": "AREQUIPA",
        "district": "YANAHUARA",
        "national_id": "45678912",
    }


@pytest.fixture()
def place_order(default_stock):
    """Run a whole checkout and return the new order id."""
    from protean.utils.globals import current_domain

    from storefront.checkout.management import StartCheckout
    from storefront.checkout.retention import AcceptDiscount, RequestClose
    from storefront.checkout.submission import SubmitOrder

    def _place(details: dict, quantity: int = 1, preferred_color: str = "Silvery", discount: bool = False) -> str:
        session_id = current_domain.process(
            StartCheckout(preferred_color=preferred_color, quantity=quantity),
            asynchronous=False,
        )
        if discount:
            current_domain.process(RequestClose(session_id=session_id), asynchronous=False)
            current_domain.process(AcceptDiscount(session_id=session_id), asynchronous=False)
        return current_domain.process(SubmitOrder(session_id=session_id, **details), asynchronous=False)

    return _place
