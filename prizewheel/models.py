from __future__ import annotations

from django.db import models
from django.utils import timezone


class Prize(models.Model):
    """A prize of the wheel as known to the live catalog."""

    value = models.CharField(max_length=64, unique=True)
    name = models.CharField(max_length=255)
    stock = models.PositiveIntegerField(
        null=True,
        blank=True,
        help_text="Remaining units for physical gifts. Empty means unlimited.",
    )

    class Meta:
        db_table = "prizes"
        ordering = ["id"]

    def __str__(self) -> str:
        stock = "unlimited" if self.stock is None else self.stock
        return f"{self.name} [{self.value}] (stock={stock})"

    @property
    def is_exhausted(self) -> bool:
        return self.stock is not None and self.stock <= 0

    def to_payload(self) -> dict[str, int | str | None]:
        return {
            "id": self.id,
            "value": self.value,
            "name": self.name,
            "stock": self.stock,
        }


class Spin(models.Model):
    """One recorded draw. Rows are only ever appended."""

    user_id = models.CharField(max_length=255)
    prize_value = models.CharField(max_length=64)
    spun_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        db_table = "spins"
        ordering = ["-spun_at"]
        indexes = [
            models.Index(fields=["user_id", "-spun_at"], name="spins_user_spun_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.user_id} -> {self.prize_value} @ {self.spun_at:%Y-%m-%d %H:%M}"
