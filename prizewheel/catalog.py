"""Static weight table and the live, stock-aware prize catalog."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional

from django.core.exceptions import ImproperlyConfigured

from .models import Prize

NOTHING_VALUE = "nothing"
NOTHING_LABEL = "Rien"

KIND_NOTHING = "nothing"
KIND_DISCOUNT = "discount"
KIND_GIFT = "gift"
KINDS = {KIND_NOTHING, KIND_DISCOUNT, KIND_GIFT}

GIFT_PREFIXES = ("gift_", "CADEAU")
_DISCOUNT_PATTERN = re.compile(r"^(?:-(\d+(?:\.\d+)?)%|coupon(\d+))$", re.IGNORECASE)


@dataclass(frozen=True, slots=True)
class PrizeDefinition:
    """One slice of the wheel: a catalog value and its relative weight."""

    value: str
    weight: float
    kind: str = KIND_NOTHING
    discount_percent: Optional[float] = None

    @property
    def is_gift(self) -> bool:
        return self.kind == KIND_GIFT

    @property
    def bears_coupon(self) -> bool:
        return self.kind != KIND_NOTHING and bool(self.discount_percent)


def infer_kind(value: str) -> tuple[str, Optional[float]]:
    """Guess kind and discount from naming conventions such as `gift_x`, `-10%` or `coupon20`."""
    if value.startswith(GIFT_PREFIXES):
        return KIND_GIFT, None
    match = _DISCOUNT_PATTERN.match(value)
    if match:
        return KIND_DISCOUNT, float(match.group(1) or match.group(2))
    return KIND_NOTHING, None


def load_weight_table(raw_entries: Iterable[Mapping[str, Any]]) -> tuple[PrizeDefinition, ...]:
    """Validate configured entries and turn them into prize definitions."""

    definitions = []
    seen = set()
    for entry in raw_entries:
        value = str(entry.get("value") or "").strip()
        if not value:
            raise ImproperlyConfigured("Every wheel entry needs a non-empty value.")
        if value in seen:
            raise ImproperlyConfigured(f"Wheel entry {value!r} is configured twice.")
        seen.add(value)

        try:
            weight = float(entry.get("weight"))
        except (TypeError, ValueError) as exc:
            raise ImproperlyConfigured(f"Wheel entry {value!r} has an invalid weight.") from exc
        if weight <= 0:
            raise ImproperlyConfigured(f"Wheel entry {value!r} must have a positive weight.")

        inferred_kind, inferred_percent = infer_kind(value)
        kind = entry.get("kind") or inferred_kind
        if kind not in KINDS:
            raise ImproperlyConfigured(f"Wheel entry {value!r} has unknown kind {kind!r}.")

        percent = entry.get("discount_percent")
        if percent is None and kind == inferred_kind:
            percent = inferred_percent
        if percent is not None:
            percent = float(percent)
            if not 0 < percent <= 100:
                raise ImproperlyConfigured(
                    f"Wheel entry {value!r} needs a discount between 0 and 100."
                )

        definitions.append(
            PrizeDefinition(value=value, weight=weight, kind=kind, discount_percent=percent)
        )

    if not definitions:
        raise ImproperlyConfigured("The wheel needs at least one prize.")
    return tuple(definitions)


def load_catalog() -> dict[str, Prize]:
    """Fresh snapshot of the prize table keyed by value."""
    return {prize.value: prize for prize in Prize.objects.all()}


def list_prizes() -> list[Prize]:
    return list(Prize.objects.order_by("id"))
