"""
Weighted prize draw.

Everything here is a pure function of the weight table, a catalog snapshot and
an injected random source, so it runs without storage or network access.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Protocol, Sequence

from .catalog import NOTHING_LABEL, NOTHING_VALUE, PrizeDefinition

logger = logging.getLogger(__name__)

DEFAULT_RETRY_CAP = 10


class RandomSource(Protocol):
    def random(self) -> float: ...


@dataclass(slots=True)
class DrawResult:
    value: str
    name: str
    definition: Optional[PrizeDefinition]
    attempts: int = 1

    @property
    def is_nothing(self) -> bool:
        return self.definition is None or self.value == NOTHING_VALUE

    @property
    def is_gift(self) -> bool:
        return self.definition is not None and self.definition.is_gift


def sample(weight_table: Sequence[PrizeDefinition], rng: RandomSource) -> PrizeDefinition:
    """Pick one entry with probability proportional to its weight."""

    if not weight_table:
        raise ValueError("Cannot draw from an empty weight table.")
    total = sum(definition.weight for definition in weight_table)
    target = rng.random() * total
    cumulative = 0.0
    for definition in weight_table:
        cumulative += definition.weight
        if target < cumulative:
            return definition
    # Floating point rounding can leave target at or past the final sum.
    return weight_table[-1]


def nothing_result(
    weight_table: Sequence[PrizeDefinition],
    catalog: Mapping[str, Any],
    attempts: int = 1,
) -> DrawResult:
    definition = next((d for d in weight_table if d.value == NOTHING_VALUE), None)
    record = catalog.get(NOTHING_VALUE)
    name = record.name if record is not None else NOTHING_LABEL
    return DrawResult(value=NOTHING_VALUE, name=name, definition=definition, attempts=attempts)


def draw(
    weight_table: Sequence[PrizeDefinition],
    catalog: Mapping[str, Any],
    rng: RandomSource,
    retry_cap: int = DEFAULT_RETRY_CAP,
) -> DrawResult:
    """
    Draw a prize, redrawing with replacement while the pick is an exhausted gift.

    Exhausted gifts stay in the table; after more than `retry_cap` rejections
    the draw falls back to "nothing". A pick with no catalog entry also falls
    back to "nothing".
    """

    rejections = 0
    while True:
        attempts = rejections + 1
        definition = sample(weight_table, rng)
        record = catalog.get(definition.value)
        if record is None:
            logger.warning("Prize %s is not in the catalog; awarding nothing.", definition.value)
            return nothing_result(weight_table, catalog, attempts)

        if definition.is_gift and record.stock is not None and record.stock <= 0:
            rejections += 1
            if rejections > retry_cap:
                logger.info("Gift stock exhausted after %s attempts; awarding nothing.", attempts)
                return nothing_result(weight_table, catalog, attempts)
            continue

        return DrawResult(
            value=definition.value,
            name=record.name,
            definition=definition,
            attempts=attempts,
        )
