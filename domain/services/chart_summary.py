from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List

from domain.models import CompositionResult

OTHERS_LABEL = "기타 성분"


def summarize(
    composition: Iterable[CompositionResult],
    top_n: int = 10,
) -> List[CompositionResult]:
    """Keep the top N components and fold the rest into one slice.

    The folded slice is only added when the remainder is positive.
    """
    items = list(composition)
    visible = items[:top_n]
    remainder = sum((item.value for item in items[top_n:]), Decimal("0"))
    if remainder > 0:
        visible.append(
            CompositionResult(
                name=OTHERS_LABEL,
                value=remainder.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP),
            )
        )
    return visible
