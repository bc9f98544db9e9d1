from django.urls import path

from . import views

app_name = "festivals"
urlpatterns = [
    path("", views.special_events, name="special_events"),
    path("<int:event_id>", views.event_detail, name="event_detail"),
]
