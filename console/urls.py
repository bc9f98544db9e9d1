from django.urls import path

from . import content, expenses, views

app_name = "console"
urlpatterns = [
    path("", views.dashboard, name="dashboard"),
    path("login/", views.login_view, name="login"),
    path("logout/", views.logout_view, name="logout"),
    path("signup/", views.signup_view, name="signup"),
    path("keepalive/", views.keepalive, name="keepalive"),
    path("donations/", views.donations_list, name="donations"),
    path("donations/<int:donation_id>/public/", views.donation_toggle_public, name="donation_toggle_public"),
    path("confirmations/", views.confirmations, name="confirmations"),
    path("confirmations/<int:confirmation_id>/decide/", views.confirmation_action, name="confirmation_action"),
    path("confirmations/notify/", views.confirmation_notify, name="confirmation_notify"),
    path("updates/", content.updates, name="updates"),
    path("updates/<int:update_id>/edit/", content.update_edit, name="update_edit"),
    path("updates/<int:update_id>/delete/", content.update_delete, name="update_delete"),
    path("updates/<int:update_id>/featured/", content.update_featured, name="update_featured"),
    path("expenses/", expenses.expenses, name="expenses"),
    path("expenses/<int:expense_id>/edit/", expenses.expense_edit, name="expense_edit"),
    path("expenses/<int:expense_id>/delete/", expenses.expense_delete, name="expense_delete"),
    path("events/", content.events, name="events"),
    path("events/<int:event_id>/edit/", content.event_edit, name="event_edit"),
    path("events/<int:event_id>/delete/", content.event_delete, name="event_delete"),
    path("events/<int:event_id>/media/", content.event_media, name="event_media"),
    path(
        "events/<int:event_id>/media/<int:media_id>/<str:action>/",
        content.event_media_action, name="event_media_action",
    ),
    path("team-members/", content.team_members, name="team_members"),
    path("team-members/<int:member_id>/edit/", content.team_member_edit, name="team_member_edit"),
    path("team-members/<int:member_id>/delete/", content.team_member_delete, name="team_member_delete"),
]
