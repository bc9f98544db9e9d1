from django.urls import path

from . import views

app_name = "donations"
urlpatterns = [
    path("donate/", views.donate, name="donate"),
    path("donate/confirm", views.confirm_payment, name="confirm_payment"),
    path("mandir-nirmaan-seva/", views.mandir_nirmaan_seva, name="mandir_nirmaan_seva"),
    path("mandir-nirmaan-seva/gallery/", views.construction_gallery, name="gallery"),
    path("donor-list/", views.donor_list, name="donor_list"),
    path("locations/<str:level>", views.location_options, name="location_options"),
]
