from django.contrib import admin

from .models import Prize, Spin


@admin.register(Prize)
class PrizeAdmin(admin.ModelAdmin):
    list_display = ("id", "value", "name", "stock")
    search_fields = ("value", "name")
    ordering = ("id",)


@admin.register(Spin)
class SpinAdmin(admin.ModelAdmin):
    list_display = ("id", "user_id", "prize_value", "spun_at")
    list_filter = ("prize_value",)
    search_fields = ("user_id",)
    ordering = ("-spun_at",)
    readonly_fields = ("user_id", "prize_value", "spun_at")
