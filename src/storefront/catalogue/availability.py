"""Stock table — an immutable, ordered snapshot of per-color availability.

The composer and the submission check read stock only through this table,
so a single snapshot drives one whole recomposition.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class StockLevel:
    color: str
    stock: int
    active: bool = True

    @property
    def available(self) -> int:
        """Units that can be sold; inactive variants sell nothing."""
        if not self.active:
            return 0
        return max(self.stock, 0)


@dataclass(frozen=True)
class StockTable:
    """Per-color stock in catalog declaration order."""

    levels: tuple[StockLevel, ...] = field(default_factory=tuple)

    @classmethod
    def of(cls, stock: dict[str, int]) -> "StockTable":
        """Build a table of active variants from a ``{color: stock}`` mapping (insertion order kept)."""
        return cls(levels=tuple(StockLevel(color=color, stock=units) for color, units in stock.items()))

    def colors(self) -> list[str]:
        return [level.color for level in self.levels]

    def stock_of(self, color: str) -> int:
        for level in self.levels:
            if level.color == color:
                return level.available
        return 0

    def available_colors(self) -> list[str]:
        """Colors with sellable stock, in catalog order."""
        return [level.color for level in self.levels if level.available > 0]

    def total_available(self) -> int:
        return sum(level.available for level in self.levels)

    def as_dict(self) -> dict[str, int]:
        return {level.color: level.available for level in self.levels}
