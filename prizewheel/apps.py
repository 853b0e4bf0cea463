from django.apps import AppConfig


class PrizewheelConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "prizewheel"
    verbose_name = "Daily prize wheel"

    def ready(self):
        from django.conf import settings

        from .catalog import load_weight_table

        # Fail at startup rather than on the first spin.
        load_weight_table(getattr(settings, "PRIZEWHEEL_PRIZES", []))
