"""Domain events for the ProductVariant aggregate."""

from protean.fields import Boolean, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="ProductVariant")
class VariantRegistered:
    """A color variant of the product was added to the catalog."""

    __version__ = 1

    variant_id = Identifier(required=True)
    product_id = String(required=True)
    color = String(required=True)
    stock = Integer(required=True)
    position = Integer(required=True)


@storefront.event(part_of="ProductVariant")
class VariantStockChanged:
    """Sellable stock of a variant changed (restock, sale, or (de)activation)."""

    __version__ = 1

    variant_id = Identifier(required=True)
    product_id = String(required=True)
    color = String(required=True)
    previous_stock = Integer(required=True)
    new_stock = Integer(required=True)
    active = Boolean(required=True)
    reason = String(required=True)
