from django.contrib import admin
from django.urls import include, path

from . import views

handler404 = "durgamandir.views.error_404_view"

urlpatterns = [
    path("site-admin/", admin.site.urls),
    path("admin/", include("console.urls")),
    path("language/", views.set_language, name="set_language"),
    path("maintenance/", views.maintenance_view, name="maintenance"),
    path("", include("homepage.urls")),
    path("", include("who_we_are.urls")),
    path("", include("donations.urls")),
    path("services/", include("services.urls")),
    path("special-events/", include("festivals.urls")),
]
