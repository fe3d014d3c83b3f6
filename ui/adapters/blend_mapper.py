"""Blend mapper - bridge between domain models and UI rows.

Maps between:
- Domain models (Blend, BlendItem, CompositionResult, SavedBlend)
- UI representation (dicts for tables, lists and the chart)
"""

from typing import Any, Dict, Iterable, List

from domain.models import Blend, BlendItem, CompositionResult, EssentialOil, SavedBlend
from domain.services.chart_summary import summarize
from domain.services.chemical_families import color_for, family_label


class BlendMapper:
    """Maps blend state to UI rows."""

    @staticmethod
    def oil_to_ui_item(oil: EssentialOil) -> Dict[str, Any]:
        """Convert catalog oil to selector entry."""
        return {
            "id": oil.id,
            "name": oil.name,
            "description": oil.description,
        }

    @staticmethod
    def item_to_ui_item(item: BlendItem, total_drops: int, index: int = 0) -> Dict[str, Any]:
        """Convert domain BlendItem to UI row dict.

        Args:
            item: Domain BlendItem
            total_drops: Drops in the whole blend (for the share column)
            index: Row index (for UI purposes)

        Returns:
            Dict compatible with UI tables
        """
        return {
            "index": index,
            "oil_id": item.oil.id,
            "name": item.oil.name,
            "drops": item.drops,
            "share": float(item.calculate_share(total_drops)),
        }

    @staticmethod
    def blend_to_ui_items(blend: Blend) -> List[Dict[str, Any]]:
        total = blend.total_drops
        return [
            BlendMapper.item_to_ui_item(item, total, idx)
            for idx, item in enumerate(blend.items)
        ]

    @staticmethod
    def saved_blend_to_ui_item(saved: SavedBlend) -> Dict[str, Any]:
        """Convert SavedBlend to list entry."""
        return {
            "id": saved.id,
            "name": saved.name,
            "created_at": saved.created_at,
            "oil_count": len(saved.blend_items),
            "total_drops": saved.total_drops,
            "oils": ", ".join(item.oil.name for item in saved.blend_items),
        }


class CompositionDisplayMapper:
    """Maps composition results to UI display format."""

    @staticmethod
    def to_rows(composition: Iterable[CompositionResult]) -> List[Dict[str, Any]]:
        return [
            {
                "name": result.name,
                "value": float(result.value),
                "family": family_label(result.name),
                "color": color_for(result.name),
            }
            for result in composition
        ]

    @staticmethod
    def to_chart_slices(
        composition: Iterable[CompositionResult],
        top_n: int,
    ) -> List[Dict[str, Any]]:
        """Top N slices plus an aggregated remainder, with colours."""
        return CompositionDisplayMapper.to_rows(summarize(composition, top_n=top_n))
