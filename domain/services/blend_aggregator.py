"""Blend composition calculation.

Rolls the chemical profiles of the oils in a blend up into one
drop-weighted composition. Pure business logic with no UI dependencies.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List

from domain.models import Blend, BlendItem, CompositionResult

HUNDRED = Decimal("100")
TWO_PLACES = Decimal("0.01")


class BlendAggregator:
    """Calculate the overall chemical composition of a blend."""

    def aggregate(self, blend: Blend | Iterable[BlendItem]) -> List[CompositionResult]:
        """Calculate component percentages across the whole blend.

        Args:
            blend: A Blend or any sequence of BlendItems

        Returns:
            CompositionResults sorted by value, highest first

        Note:
            Each oil's percentages describe one drop of that oil, so
            every component contributes (percentage / 100) * drops.
            The sums are divided by the total drop count and rounded
            half-up to 2 decimals. Ties keep the order in which the
            component was first met.
        """
        items = list(blend.items if isinstance(blend, Blend) else blend)

        total_drops = sum(item.drops for item in items)
        if total_drops == 0:
            return []

        component_totals: Dict[str, Decimal] = {}

        for item in items:
            drops = Decimal(item.drops)
            for component in item.oil.composition:
                contribution = (component.percentage / HUNDRED) * drops
                if component.name in component_totals:
                    component_totals[component.name] += contribution
                else:
                    component_totals[component.name] = contribution

        results = [
            CompositionResult(
                name=name,
                value=self._to_percent(total, total_drops),
            )
            for name, total in component_totals.items()
        ]

        # sorted() is stable with reverse=True, so ties keep insertion order
        return sorted(results, key=lambda result: result.value, reverse=True)

    def _to_percent(self, total: Decimal, total_drops: int) -> Decimal:
        value = (total / Decimal(total_drops)) * HUNDRED
        return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
