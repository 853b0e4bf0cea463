from __future__ import annotations

import logging
import re
import uuid
from datetime import datetime, timedelta
from typing import Optional

from django.conf import settings
from django.utils import timezone

from daily_spin.shopify_client import call_admin_api

from .catalog import PrizeDefinition

logger = logging.getLogger(__name__)


def make_coupon_code(prize_value: str) -> str:
    prefix = re.sub(r"[^A-Z0-9]+", "", prize_value.upper()) or "SPIN"
    return f"{prefix}-{uuid.uuid4().hex[:8].upper()}"


def _price_rule_payload(code: str, percent: float, now: datetime) -> dict:
    validity_days = getattr(settings, "PRIZEWHEEL_COUPON_VALIDITY_DAYS", 30)
    title_prefix = getattr(settings, "PRIZEWHEEL_COUPON_TITLE_PREFIX", "Jeu-Noel")
    return {
        "price_rule": {
            "title": f"{title_prefix}-{code}",
            "target_type": "line_item",
            "target_selection": "all",
            "allocation_method": "across",
            "value_type": "percentage",
            "value": f"-{float(percent):.1f}",
            "customer_selection": "all",
            "once_per_customer": True,
            "usage_limit": 1,
            "starts_at": now.isoformat(),
            "ends_at": (now + timedelta(days=validity_days)).isoformat(),
        }
    }


def issue_coupon(definition: Optional[PrizeDefinition], now: Optional[datetime] = None) -> Optional[str]:
    """
    Mint a single-use Shopify discount code for a discount-bearing prize.

    Any failure is logged and yields None; the spin itself is already recorded.
    """

    if definition is None or not definition.bears_coupon:
        return None

    now = now or timezone.now()
    code = make_coupon_code(definition.value)

    rule_result = call_admin_api(
        "price_rules.json", _price_rule_payload(code, definition.discount_percent, now)
    )
    if not rule_result["success"]:
        logger.warning("Price rule creation failed for %s: %s", code, rule_result["error"])
        return None

    price_rule = rule_result["data"].get("price_rule")
    if not isinstance(price_rule, dict):
        price_rule = {}
    price_rule_id = price_rule.get("id")
    if not price_rule_id:
        logger.warning("Price rule response for %s carried no id.", code)
        return None

    code_result = call_admin_api(
        f"price_rules/{price_rule_id}/discount_codes.json",
        {"discount_code": {"code": code}},
    )
    if not code_result["success"]:
        logger.warning("Discount code creation failed for %s: %s", code, code_result["error"])
        return None

    discount_code = code_result["data"].get("discount_code")
    if not isinstance(discount_code, dict):
        discount_code = {}
    issued = discount_code.get("code")
    if not issued:
        logger.warning("Discount code response for %s carried no code.", code)
        return None
    return issued
