from django.urls import re_path

from . import views


app_name = "prizewheel"

urlpatterns = [
    re_path(r"^prizes/?$", views.prize_list, name="prize_list"),
    re_path(r"^spin/?$", views.spin_wheel, name="spin"),
]
