"""Whole-unit money formatting in the two supported display conventions."""

from __future__ import annotations

import math

from plantrack.models import CURRENCIES


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _group_western(digits: str) -> str:
    return f"{int(digits):,}"


def _group_south_asian(digits: str) -> str:
    """Group as 12,34,567: last three digits, then pairs."""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ",".join(pairs) + "," + tail


def format_money(amount: float, currency: str) -> str:
    """Format an amount in whole units with the currency's symbol and grouping.

    >>> format_money(1234567, "USD")
    '$1,234,567'
    >>> format_money(1234567, "PKR")
    'Rs12,34,567'
    """
    info = CURRENCIES.get(currency)
    rounded = _round_half_up(amount)
    sign = "-" if rounded < 0 else ""
    digits = str(abs(rounded))
    if info is None:
        return f"{currency} {sign}{_group_western(digits)}"
    if info.grouping == "south_asian":
        grouped = _group_south_asian(digits)
    else:
        grouped = _group_western(digits)
    return f"{info.symbol}{sign}{grouped}"
