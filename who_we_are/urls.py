from django.urls import path

from . import views

app_name = "who_we_are"
urlpatterns = [
    path("about-us", views.about, name="about"),
    path("contact", views.contact, name="contact"),
]
