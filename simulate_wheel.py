#!/usr/bin/env python3
"""
Simulate many wheel draws offline and compare observed vs configured odds.

Usage:
    python simulate_wheel.py --draws 100000 --stock gift_pokemon=0

No database or network access is needed: the catalog is built in memory from
the configured weight table, every prize unlimited unless `--stock` says
otherwise.
"""

import argparse
import os
import random
import sys
from collections import Counter
from typing import Dict, List

import django

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "daily_spin.settings")
django.setup()

from django.conf import settings  # noqa: E402

from prizewheel.catalog import load_weight_table  # noqa: E402
from prizewheel.engine import draw  # noqa: E402
from prizewheel.models import Prize  # noqa: E402


def _parse_stock(pairs: List[str]) -> Dict[str, int]:
    stock = {}
    for pair in pairs:
        value, _, amount = pair.partition("=")
        try:
            stock[value] = int(amount)
        except ValueError as exc:
            raise SystemExit(f"--stock expects value=count, got {pair!r}") from exc
    return stock


def main() -> int:
    parser = argparse.ArgumentParser(description="Simulate daily wheel draws.")
    parser.add_argument("--draws", type=int, default=100_000, help="Number of draws (default: 100000)")
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible runs")
    parser.add_argument(
        "--retry-cap",
        type=int,
        default=getattr(settings, "PRIZEWHEEL_RETRY_CAP", 10),
        help="Redraws allowed on an exhausted gift",
    )
    parser.add_argument(
        "--stock",
        action="append",
        default=[],
        help="Fixed stock for a prize, e.g. gift_bip=0 (repeatable)",
    )
    args = parser.parse_args()

    table = load_weight_table(settings.PRIZEWHEEL_PRIZES)
    stock = _parse_stock(args.stock)
    catalog = {
        definition.value: Prize(value=definition.value, name=definition.value, stock=stock.get(definition.value))
        for definition in table
    }
    rng = random.Random(args.seed)

    counts = Counter()
    attempts = 0
    for _ in range(args.draws):
        result = draw(table, catalog, rng, args.retry_cap)
        counts[result.value] += 1
        attempts += result.attempts

    total_weight = sum(definition.weight for definition in table)
    print(f"{'prize':<20}{'configured':>12}{'observed':>12}")
    for definition in table:
        expected = definition.weight / total_weight
        observed = counts[definition.value] / args.draws
        print(f"{definition.value:<20}{expected:>12.4f}{observed:>12.4f}")
    print(f"[info] mean attempts per draw: {attempts / args.draws:.3f}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
