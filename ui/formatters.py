from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any


def _to_decimal(value: Any) -> Decimal | None:
    if value is None:
        return None
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None


def fmt_decimal(value: Any, decimals: int = 2) -> str:
    dec = _to_decimal(value)
    if dec is None:
        return "-"
    quant = Decimal("1") if decimals <= 0 else Decimal(f"1.{'0' * decimals}")
    return f"{dec.quantize(quant):.{max(decimals, 0)}f}"


def fmt_percent(value: Any, decimals: int = 2) -> str:
    dec = _to_decimal(value)
    if dec is None:
        return "-"
    return f"{fmt_decimal(dec, decimals=decimals)}%"


def fmt_drops(value: Any) -> str:
    try:
        count = int(value)
    except (TypeError, ValueError):
        return "-"
    return f"{count} 방울"
