from __future__ import annotations

from django.db import transaction
from django.db.models import F

from .catalog import NOTHING_VALUE
from .models import Prize, Spin


def decrement_stock(prize_value: str) -> bool:
    """
    Take one unit of a gift.

    Returns False when the stock was already at zero or the prize is unknown.
    A prize without a stock counter is unlimited and always succeeds.
    """
    updated = Prize.objects.filter(value=prize_value, stock__gt=0).update(stock=F("stock") - 1)
    if updated == 1:
        return True
    return Prize.objects.filter(value=prize_value, stock__isnull=True).exists()


def record_spin(
    user_id: str,
    prize_value: str,
    *,
    is_gift: bool = False,
    fallback_value: str = NOTHING_VALUE,
) -> Spin:
    """
    Append the spin and, for gifts, take one unit of stock in the same transaction.

    When the gift's last unit went to a concurrent spin, the spin is recorded
    as `fallback_value` instead; callers compare `spin.prize_value` with what
    they drew.
    """

    with transaction.atomic():
        if is_gift and not decrement_stock(prize_value):
            prize_value = fallback_value
        return Spin.objects.create(user_id=user_id, prize_value=prize_value)
