from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence

from django.conf import settings

from .catalog import PrizeDefinition, load_catalog, load_weight_table
from .eligibility import can_draw_today
from .engine import DEFAULT_RETRY_CAP, RandomSource, draw, nothing_result
from .recorder import record_spin
from .rewards import issue_coupon

logger = logging.getLogger(__name__)

MISSING_USER_MESSAGE = "Il faut être connecté pour jouer."
ALREADY_PLAYED_MESSAGE = "Tu as déjà joué aujourd'hui !"


class SpinRejected(Exception):
    """Raised when a spin request is refused before anything is drawn."""


@dataclass(slots=True)
class DrawOutcome:
    prize_value: str
    prize_name: str
    coupon_code: Optional[str] = None

    def to_payload(self) -> dict[str, Any]:
        return {
            "ok": True,
            "prizeValue": self.prize_value,
            "prizeName": self.prize_name,
            "couponCode": self.coupon_code,
        }


@dataclass
class WheelContext:
    """Everything one wheel needs to run; several wheels may coexist."""

    weight_table: Sequence[PrizeDefinition]
    rng: RandomSource = field(default_factory=random.SystemRandom)
    retry_cap: int = DEFAULT_RETRY_CAP
    coupon_issuer: Callable[[Optional[PrizeDefinition]], Optional[str]] = issue_coupon
    catalog_loader: Callable[[], Mapping[str, Any]] = load_catalog

    @classmethod
    def from_entries(cls, entries: Iterable[Mapping[str, Any]], **kwargs: Any) -> "WheelContext":
        return cls(weight_table=load_weight_table(entries), **kwargs)

    @classmethod
    def from_settings(cls, **kwargs: Any) -> "WheelContext":
        kwargs.setdefault("retry_cap", getattr(settings, "PRIZEWHEEL_RETRY_CAP", DEFAULT_RETRY_CAP))
        return cls.from_entries(getattr(settings, "PRIZEWHEEL_PRIZES", []), **kwargs)


def spin(context: WheelContext, user_id: Optional[str]) -> DrawOutcome:
    """
    Run one daily spin for `user_id`.

    The spin is recorded (with its stock decrement) before a coupon is
    requested, so a slow or failing commerce API never loses the draw.
    Database errors propagate to the caller.
    """

    user_id = str(user_id).strip() if user_id is not None else ""
    if not user_id:
        raise SpinRejected(MISSING_USER_MESSAGE)

    if not can_draw_today(user_id):
        raise SpinRejected(ALREADY_PLAYED_MESSAGE)

    snapshot = context.catalog_loader()
    result = draw(context.weight_table, snapshot, context.rng, context.retry_cap)
    recorded = record_spin(user_id, result.value, is_gift=result.is_gift)
    if recorded.prize_value != result.value:
        logger.info("Last unit of %s went to another spin; %s gets nothing.", result.value, user_id)
        result = nothing_result(context.weight_table, snapshot, result.attempts)
    logger.info("User %s won %s after %s attempt(s).", user_id, result.value, result.attempts)

    coupon_code = None
    if result.definition is not None and result.definition.bears_coupon:
        coupon_code = context.coupon_issuer(result.definition)
        if coupon_code is None:
            logger.warning("No coupon issued for %s won by %s.", result.value, user_id)

    return DrawOutcome(prize_value=result.value, prize_name=result.name, coupon_code=coupon_code)
