from django.urls import path

from . import views

app_name = "services"
urlpatterns = [
    path("", views.services_index, name="index"),
    path("seva-booking", views.seva_booking, name="seva_booking"),
    path("prasad-distribution", views.prasad_distribution, name="prasad"),
    path("daily-puja", views.daily_puja, name="daily_puja"),
    path("special-puja", views.special_puja, name="special_puja"),
    path("morning-aarti", views.morning_aarti, name="morning_aarti"),
    path("abhishekam", views.abhishekam, name="abhishekam"),
    path("flower-offering", views.flower_offering, name="flowers"),
]
