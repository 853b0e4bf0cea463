from __future__ import annotations

import json
import logging
from typing import Any, Dict

from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from .catalog import list_prizes
from .ratelimit import rate_limited
from .services import SpinRejected, WheelContext, spin

logger = logging.getLogger(__name__)

SERVER_ERROR_MESSAGE = "Erreur serveur"
INVALID_BODY_MESSAGE = "Requête invalide : le corps doit être un objet JSON."


def _json_error(message: str, status: int = 400) -> JsonResponse:
    return JsonResponse(
        {"ok": False, "message": message},
        status=status,
        json_dumps_params={"ensure_ascii": False},
    )


def _parse_body(request) -> Dict[str, Any]:
    if not request.body:
        return {}
    try:
        payload = json.loads(request.body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise SpinRejected(INVALID_BODY_MESSAGE) from exc
    if not isinstance(payload, dict):
        raise SpinRejected(INVALID_BODY_MESSAGE)
    return payload


@require_http_methods(["GET"])
def prize_list(request):
    try:
        prizes = [prize.to_payload() for prize in list_prizes()]
    except Exception:
        logger.exception("Failed to list prizes.")
        return _json_error(SERVER_ERROR_MESSAGE, status=500)
    return JsonResponse(prizes, safe=False, json_dumps_params={"ensure_ascii": False})


@csrf_exempt
@require_http_methods(["POST"])
@rate_limited("spin")
def spin_wheel(request):
    try:
        payload = _parse_body(request)
        outcome = spin(WheelContext.from_settings(), payload.get("userId"))
    except SpinRejected as exc:
        return _json_error(str(exc), status=400)
    except Exception:
        logger.exception("Spin failed.")
        return _json_error(SERVER_ERROR_MESSAGE, status=500)
    return JsonResponse(outcome.to_payload(), json_dumps_params={"ensure_ascii": False})
