import logging
from typing import Any, Dict, Optional

import requests
from django.conf import settings
from requests import RequestException

logger = logging.getLogger(__name__)


def call_admin_api(path: str, payload: Dict[str, Any], *, timeout: Optional[int] = None) -> Dict[str, Any]:
    """
    POST a JSON payload to the configured Shopify Admin REST API.

    `path` is relative to `/admin/api/<version>/`, e.g. "price_rules.json".

    Returns a dictionary with keys:
    - success: whether the call succeeded.
    - data: the decoded JSON body when successful.
    - error: a human-readable message when unsuccessful.
    """

    domain = getattr(settings, "SHOPIFY_STORE_DOMAIN", None)
    token = getattr(settings, "SHOPIFY_ADMIN_API_ACCESS_TOKEN", None)
    version = getattr(settings, "SHOPIFY_API_VERSION", "2025-01")

    if not (domain and token):
        return {"success": False, "error": "Shopify connection is not configured."}

    try:
        url = f"https://{domain}/admin/api/{version}/{path.lstrip('/')}"
        headers = {
            "Content-Type": "application/json",
            "X-Shopify-Access-Token": token,
        }
        response = requests.post(
            url,
            headers=headers,
            json=payload,
            timeout=timeout or getattr(settings, "SHOPIFY_TIMEOUT", 10),
        )
        response.raise_for_status()

        data = response.json()
        if not isinstance(data, dict):
            raise ValueError("Expected a JSON object.")
        return {"success": True, "data": data}
    except RequestException as exc:
        logger.warning("HTTP error when reaching Shopify (%s): %s", path, exc)
        return {"success": False, "error": f"Failed to reach Shopify ({exc})."}
    except ValueError as exc:
        logger.warning("Failed to decode Shopify response for %s: %s", path, exc)
        return {"success": False, "error": f"Invalid response from Shopify ({exc})."}
