"""Domain models.

Core business entities that represent the problem domain.
These models are framework-agnostic and contain only business logic.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, Optional


@dataclass(frozen=True)
class ChemicalComponent:
    """A chemical constituent of an essential oil.

    Percentage is the share (0-100) of the component in one drop of the oil.
    Reference data is trusted: percentages are not range-checked.
    """

    name: str
    percentage: Decimal

    def __post_init__(self) -> None:
        """Validate component data."""
        if not self.name:
            raise ValueError("Component name cannot be empty")


@dataclass(frozen=True)
class EssentialOil:
    """An essential oil from the catalog.

    Immutable value object; blends share references to it.
    """

    id: str
    name: str
    composition: tuple[ChemicalComponent, ...] = field(default_factory=tuple)
    description: str = ""

    def __post_init__(self) -> None:
        """Validate oil data."""
        if not self.id:
            raise ValueError("Oil id cannot be empty")
        if not self.name:
            raise ValueError("Oil name cannot be empty")


@dataclass
class BlendItem:
    """One line of the working blend.

    Mutable because drop counts change while the blend is edited.
    """

    oil: EssentialOil
    drops: int = 1

    def __post_init__(self) -> None:
        """Validate blend item data."""
        if self.drops < 1:
            raise ValueError(f"Drop count must be at least 1: {self.drops}")

    @property
    def oil_id(self) -> str:
        """Convenience accessor for the oil id."""
        return self.oil.id

    def calculate_share(self, total_drops: int) -> Decimal:
        """Calculate this item's share of all drops, in percent."""
        if total_drops == 0:
            return Decimal("0")
        return Decimal(self.drops) / Decimal(total_drops) * Decimal("100")


@dataclass(frozen=True)
class CompositionResult:
    """Drop-weighted share of one chemical component across a blend."""

    name: str
    value: Decimal


@dataclass
class Blend:
    """The blend under construction.

    Ordered and unique by oil id: adding an oil that is already present
    increments its drops instead of appending a duplicate.
    """

    items: list[BlendItem] = field(default_factory=list)

    @property
    def total_drops(self) -> int:
        """Total number of drops across all items."""
        return sum(item.drops for item in self.items)

    @property
    def item_count(self) -> int:
        return len(self.items)

    def find(self, oil_id: str) -> Optional[BlendItem]:
        """Get the item for an oil id, or None."""
        for item in self.items:
            if item.oil.id == oil_id:
                return item
        return None

    def add_oil(self, oil: EssentialOil) -> BlendItem:
        """Add one drop of an oil, creating its item on first use."""
        existing = self.find(oil.id)
        if existing is not None:
            existing.drops += 1
            return existing
        item = BlendItem(oil=oil, drops=1)
        self.items.append(item)
        return item

    def set_drops(self, oil_id: str, drops: int) -> bool:
        """Replace an item's drop count in place.

        Counts below 1 are rejected without error. Returns True if an item
        was changed.
        """
        if drops < 1:
            return False
        item = self.find(oil_id)
        if item is None:
            return False
        item.drops = drops
        return True

    def remove_oil(self, oil_id: str) -> bool:
        """Remove the item for an oil id if present."""
        for index, item in enumerate(self.items):
            if item.oil.id == oil_id:
                del self.items[index]
                return True
        return False

    def replace_items(self, items: Iterable[BlendItem]) -> None:
        """Replace the whole blend with copies of the given items."""
        self.items = [BlendItem(oil=item.oil, drops=item.drops) for item in items]

    def snapshot(self) -> tuple[BlendItem, ...]:
        """Copy the current items so later edits do not leak into the copy."""
        return tuple(BlendItem(oil=item.oil, drops=item.drops) for item in self.items)

    def clear(self) -> None:
        """Remove all items."""
        self.items.clear()

    def is_empty(self) -> bool:
        """Check if the blend has no items."""
        return len(self.items) == 0


@dataclass(frozen=True)
class SavedBlend:
    """A named, immutable snapshot of a blend and its analysis."""

    id: str
    name: str
    blend_items: tuple[BlendItem, ...]
    composition: tuple[CompositionResult, ...]
    analysis: str
    created_at: str = ""

    @property
    def total_drops(self) -> int:
        return sum(item.drops for item in self.blend_items)
