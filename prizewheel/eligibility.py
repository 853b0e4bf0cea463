from __future__ import annotations

from datetime import datetime
from typing import Optional

from django.utils import timezone

from .models import Spin


def last_spin(user_id: str) -> Optional[Spin]:
    return Spin.objects.filter(user_id=user_id).order_by("-spun_at").first()


def can_draw_today(user_id: str, now: Optional[datetime] = None) -> bool:
    """
    Return True when the user has not spun yet on the current calendar day.

    Days follow the server's TIME_ZONE, not a rolling 24h window. This is a
    read-then-decide check: two simultaneous requests for the same user can
    both see an eligible state.
    """

    previous = last_spin(user_id)
    if previous is None:
        return True
    now = now or timezone.now()
    return timezone.localdate(previous.spun_at) != timezone.localdate(now)
