"""Order composer — assigns a color to every unit of the cart.

A cart of N units is N ``CartLine``s, one unit each. Lines are regenerated
whenever the quantity or the stock table changes; a line keeps its color
as long as that color still has capacity after the lines before it, and
otherwise takes the first color (in catalog order) that does. Position 1
always carries the shopper's preferred color while it has stock.

Everything here is pure: stock comes in as a ``StockTable`` argument and
new lists are returned, never mutated in place.
"""

from collections import Counter
from dataclasses import dataclass, replace

from protean.exceptions import ValidationError

from storefront.catalogue.availability import StockTable

DEFAULT_COLOR = "Silvery"


class StockConflict(ValidationError):
    """A color was requested beyond its available stock."""


@dataclass(frozen=True)
class CartLine:
    position: int
    color: str
    unit_price: float
    quantity: int = 1

    def to_dict(self) -> dict:
        return {
            "position": self.position,
            "color": self.color,
            "quantity": self.quantity,
            "unit_price": self.unit_price,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CartLine":
        return cls(
            position=int(data["position"]),
            color=data["color"],
            unit_price=float(data["unit_price"]),
            quantity=int(data.get("quantity", 1)),
        )


def color_counts(lines: list[CartLine]) -> Counter:
    return Counter(line.color for line in lines)


def max_quantity(stock: StockTable) -> int:
    """Largest quantity a shopper can pick; 1 when sold out so the form stays usable."""
    return max(stock.total_available(), 1)


def next_available_color(stock: StockTable, assigned: list[CartLine], preferred_color: str | None = None) -> str:
    """First color in catalog order with capacity left after ``assigned``.

    Falls back to the first color with any stock, then the preferred color,
    then ``DEFAULT_COLOR`` when nothing has capacity.
    """
    counts = color_counts(assigned)
    available = stock.available_colors()

    for color in available:
        if counts[color] < stock.stock_of(color):
            return color

    if available:
        return available[0]
    return preferred_color or DEFAULT_COLOR


def compose_lines(
    quantity: int,
    preferred_color: str,
    stock: StockTable,
    previous_lines: list[CartLine] | None = None,
    unit_price: float | None = None,
) -> list[CartLine]:
    """Return exactly ``quantity`` lines honoring per-color stock ceilings.

    ``unit_price`` is stamped on every line; when omitted, each line keeps
    its previous price (new lines take the price of the last previous line,
    or 0.0).
    """
    if quantity < 1:
        raise ValidationError({"quantity": ["Quantity must be at least 1"]})

    previous_lines = list(previous_lines or [])
    if unit_price is None:
        unit_price = previous_lines[-1].unit_price if previous_lines else 0.0

    lines: list[CartLine] = []
    for index in range(quantity):
        if index == 0:
            if stock.stock_of(preferred_color) > 0:
                color = preferred_color
            else:
                color = next_available_color(stock, [], preferred_color)
        elif index < len(previous_lines):
            existing = previous_lines[index].color
            if color_counts(lines)[existing] < stock.stock_of(existing):
                color = existing
            else:
                color = next_available_color(stock, lines, preferred_color)
        else:
            color = next_available_color(stock, lines, preferred_color)

        lines.append(CartLine(position=index + 1, color=color, unit_price=unit_price))

    return lines


def update_item_color(lines: list[CartLine], index: int, new_color: str, stock: StockTable) -> list[CartLine]:
    """Recolor the line at ``index`` (0-based) if the new color has room for it."""
    if index < 0 or index >= len(lines):
        raise ValidationError({"position": [f"Line {index + 1} does not exist"]})

    proposed = [replace(line, color=new_color) if i == index else line for i, line in enumerate(lines)]
    available = stock.stock_of(new_color)
    if color_counts(proposed)[new_color] > available:
        raise StockConflict({"color": [f"Insufficient stock for {new_color}. Available: {available}"]})

    return proposed


def find_stock_conflicts(lines: list[CartLine], stock: StockTable) -> dict[str, list[str]]:
    """Per-color messages for every color whose line count exceeds current stock."""
    conflicts = {}
    for color, count in color_counts(lines).items():
        available = stock.stock_of(color)
        if count > available:
            conflicts[color] = [f"Insufficient stock for {color}. Available: {available}, selected: {count}"]
    return conflicts
