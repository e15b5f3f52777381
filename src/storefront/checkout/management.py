"""Checkout editing — commands and handler for opening a checkout and shaping its cart."""

from protean import handle
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from storefront.catalogue.cache import catalog
from storefront.checkout.composer import DEFAULT_COLOR
from storefront.checkout.session import CheckoutSession
from storefront.domain import storefront


@storefront.command(part_of="CheckoutSession")
class StartCheckout:
    """Open a purchase form with the shopper's preferred color."""

    preferred_color = String(max_length=50, default=DEFAULT_COLOR)
    quantity = Integer(min_value=1, default=1)


@storefront.command(part_of="CheckoutSession")
class ChangeQuantity:
    session_id = Identifier(required=True)
    quantity = Integer(required=True)


@storefront.command(part_of="CheckoutSession")
class ChangeLineColor:
    """Recolor the unit at ``position`` (1-based)."""

    session_id = Identifier(required=True)
    position = Integer(required=True, min_value=1)
    color = String(required=True, max_length=50)


@storefront.command(part_of="CheckoutSession")
class RefreshStock:
    session_id = Identifier(required=True)


@storefront.command_handler(part_of=CheckoutSession)
class ManageCheckoutHandler:
    @handle(StartCheckout)
    def start_checkout(self, command):
        session = CheckoutSession.start(
            preferred_color=command.preferred_color or DEFAULT_COLOR,
            quantity=command.quantity or 1,
            stock=catalog.snapshot(),
        )
        current_domain.repository_for(CheckoutSession).add(session)
        return str(session.id)

    @handle(ChangeQuantity)
    def change_quantity(self, command):
        repo = current_domain.repository_for(CheckoutSession)
        session = repo.get(command.session_id)
        session.change_quantity(command.quantity, catalog.snapshot())
        repo.add(session)
        return session.quantity

    @handle(ChangeLineColor)
    def change_line_color(self, command):
        repo = current_domain.repository_for(CheckoutSession)
        session = repo.get(command.session_id)
        session.change_line_color(command.position, command.color, catalog.snapshot())
        repo.add(session)

    @handle(RefreshStock)
    def refresh_stock(self, command):
        repo = current_domain.repository_for(CheckoutSession)
        session = repo.get(command.session_id)
        session.refresh_stock(catalog.snapshot())
        repo.add(session)
