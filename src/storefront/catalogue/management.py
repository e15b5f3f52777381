"""Variant management — commands and handler."""

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Integer, String
from protean.utils.globals import current_domain

from storefront.catalogue.cache import catalog, find_variant, list_variants
from storefront.catalogue.variant import ProductVariant
from storefront.domain import storefront


@storefront.command(part_of="ProductVariant")
class RegisterVariant:
    color = String(required=True, max_length=50)
    stock = Integer(required=True, min_value=0)
    position = Integer()


@storefront.command(part_of="ProductVariant")
class SetVariantStock:
    color = String(required=True, max_length=50)
    stock = Integer(required=True, min_value=0)


@storefront.command(part_of="ProductVariant")
class ActivateVariant:
    color = String(required=True, max_length=50)


@storefront.command(part_of="ProductVariant")
class DeactivateVariant:
    color = String(required=True, max_length=50)


def _variant_or_404(color):
    variant = find_variant(color)
    if variant is None:
        raise ObjectNotFoundError(f"Variant with color `{color}` does not exist")
    return variant


@storefront.command_handler(part_of=ProductVariant)
class ManageVariantsHandler:
    @handle(RegisterVariant)
    def register_variant(self, command):
        if find_variant(command.color) is not None:
            raise ValidationError({"color": [f"Variant {command.color} already exists"]})

        position = command.position
        if position is None:
            position = len(list_variants())

        variant = ProductVariant.register(
            color=command.color,
            stock=command.stock,
            position=position,
        )
        current_domain.repository_for(ProductVariant).add(variant)
        catalog.invalidate()
        return str(variant.id)

    @handle(SetVariantStock)
    def set_variant_stock(self, command):
        variant = _variant_or_404(command.color)
        variant.set_stock(command.stock)
        current_domain.repository_for(ProductVariant).add(variant)
        catalog.invalidate()

    @handle(ActivateVariant)
    def activate_variant(self, command):
        variant = _variant_or_404(command.color)
        variant.activate()
        current_domain.repository_for(ProductVariant).add(variant)
        catalog.invalidate()

    @handle(DeactivateVariant)
    def deactivate_variant(self, command):
        variant = _variant_or_404(command.color)
        variant.deactivate()
        current_domain.repository_for(ProductVariant).add(variant)
        catalog.invalidate()
