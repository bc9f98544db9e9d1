"""Console pages for site content: updates, special events and team members."""
import logging

from django.contrib import messages
from django.http import Http404
from django.shortcuts import redirect, render
from django.views.decorators.http import require_http_methods, require_POST

from festivals.events import present_media
from templeapi import TempleApiError, client_for, media_url

from .decorators import console_login_required
from .forms import EventForm, EventMediaForm, TeamMemberForm, UpdateForm
from .views import as_list, backend_error

logger = logging.getLogger(__name__)


def _find(rows, item_id):
    for row in rows:
        if str(row.get("id")) == str(item_id):
            return row
    raise Http404("Item not found")


def _uploaded_url(response):
    url = response.get("url") if isinstance(response, dict) else None
    return media_url(url) if url else None


# --- updates ---

def _load_updates(request):
    try:
        return as_list(client_for(request).admin_updates())
    except TempleApiError as e:
        logger.warning("Admin updates unavailable: %s", e)
        messages.error(request, "Could not load updates.")
        return []


def _save_update(request, form, update_id=None):
    client = client_for(request)
    try:
        image_url = None
        if form.cleaned_data.get("image"):
            image_url = _uploaded_url(client.upload_image(form.cleaned_data["image"]))
        if update_id is None:
            client.create_update(form.payload(image_url))
        else:
            client.edit_update(update_id, form.payload(image_url))
    except TempleApiError as e:
        logger.warning("Saving update %s failed: %s", update_id or "(new)", e)
        form.add_error(None, backend_error(e, "Error saving update"))
        return False
    return True


@console_login_required
@require_http_methods(["GET", "POST"])
def updates(request):
    form = UpdateForm(request.POST or None, request.FILES or None)
    if request.method == "POST" and form.is_valid() and _save_update(request, form):
        messages.success(request, "Update published.")
        return redirect("console:updates")
    ctx = {"updates": _load_updates(request), "form": form, "show_form": request.method == "POST"}
    return render(request, "console/updates.html", ctx)


@console_login_required
@require_http_methods(["GET", "POST"])
def update_edit(request, update_id):
    if request.method == "POST":
        form = UpdateForm(request.POST, request.FILES)
        if form.is_valid() and _save_update(request, form, update_id):
            messages.success(request, "Update saved.")
            return redirect("console:updates")
    else:
        update = _find(_load_updates(request), update_id)
        form = UpdateForm(initial={
            "title": update.get("title") or "",
            "message": update.get("message") or "",
            "image_url": update.get("imageUrl") or "",
        })
    return render(request, "console/update_form.html", {"form": form, "update_id": update_id})


@console_login_required
@require_POST
def update_delete(request, update_id):
    try:
        client_for(request).delete_update(update_id)
    except TempleApiError as e:
        logger.warning("Deleting update %s failed: %s", update_id, e)
        messages.error(request, "Error deleting update")
    else:
        messages.success(request, "Update deleted.")
    return redirect("console:updates")


@console_login_required
@require_POST
def update_featured(request, update_id):
    featured = request.POST.get("featured") == "true"
    try:
        client_for(request).set_update_featured(update_id, featured)
    except TempleApiError as e:
        logger.warning("Featuring update %s failed: %s", update_id, e)
        messages.error(request, "Error updating featured status")
    return redirect("console:updates")


# --- events ---

def _load_events(request):
    try:
        return as_list(client_for(request).events())
    except TempleApiError as e:
        logger.warning("Events unavailable: %s", e)
        messages.error(request, "Could not load events.")
        return []


def _save_event(request, form, event_id=None):
    client = client_for(request)
    try:
        if event_id is None:
            client.create_event(form.payload())
        else:
            client.edit_event(event_id, form.payload())
    except TempleApiError as e:
        logger.warning("Saving event %s failed: %s", event_id or "(new)", e)
        form.add_error(None, backend_error(e, "Failed to save event. Please try again."))
        return False
    return True


@console_login_required
@require_http_methods(["GET", "POST"])
def events(request):
    form = EventForm(request.POST or None)
    if request.method == "POST" and form.is_valid() and _save_event(request, form):
        messages.success(request, "Event added successfully!")
        return redirect("console:events")
    ctx = {"events": _load_events(request), "form": form, "show_form": request.method == "POST"}
    return render(request, "console/events.html", ctx)


@console_login_required
@require_http_methods(["GET", "POST"])
def event_edit(request, event_id):
    if request.method == "POST":
        form = EventForm(request.POST)
        if form.is_valid() and _save_event(request, form, event_id):
            messages.success(request, "Event updated successfully!")
            return redirect("console:events")
    else:
        form = EventForm(initial=EventForm.initial_for(_find(_load_events(request), event_id)))
    return render(request, "console/event_form.html", {"form": form, "event_id": event_id})


@console_login_required
@require_POST
def event_delete(request, event_id):
    try:
        client_for(request).delete_event(event_id)
    except TempleApiError as e:
        logger.warning("Deleting event %s failed: %s", event_id, e)
        messages.error(request, "Failed to delete event. Please try again.")
    else:
        messages.success(request, "Event deleted successfully!")
    return redirect("console:events")


@console_login_required
@require_http_methods(["GET", "POST"])
def event_media(request, event_id):
    client = client_for(request)
    form = EventMediaForm(request.POST or None, request.FILES or None)
    if request.method == "POST":
        if not form.is_valid():
            messages.error(request, "Please select a file first")
        else:
            try:
                client.upload_event_media(event_id, form.cleaned_data["file"])
            except TempleApiError as e:
                logger.warning("Media upload for event %s failed: %s", event_id, e)
                messages.error(request, "Failed to upload media. Please try again.")
            else:
                messages.success(request, "Media uploaded successfully!")
                return redirect("console:event_media", event_id=event_id)

    event = _find(_load_events(request), event_id)
    try:
        media = present_media(client.event_media(event_id))
    except TempleApiError as e:
        logger.warning("Media for event %s unavailable: %s", event_id, e)
        media = []
    try:
        deleted = present_media(client.deleted_event_media(event_id))
    except TempleApiError as e:
        logger.warning("Deleted media for event %s unavailable: %s", event_id, e)
        deleted = []
    ctx = {"event": event, "media": media, "deleted": deleted, "form": EventMediaForm()}
    return render(request, "console/event_media.html", ctx)


MEDIA_ACTIONS = {
    "delete": ("delete_event_media", "Media deleted successfully! You can restore it from deleted items.",
               "Failed to delete media. Please try again."),
    "restore": ("restore_event_media", "Media restored successfully!",
                "Failed to restore media. Please try again."),
    "purge": ("purge_event_media", "Media permanently deleted!",
              "Failed to permanently delete media. Please try again."),
}


@console_login_required
@require_POST
def event_media_action(request, event_id, media_id, action):
    if action not in MEDIA_ACTIONS:
        raise Http404("Unknown media action")
    method, ok_text, fail_text = MEDIA_ACTIONS[action]
    try:
        getattr(client_for(request), method)(event_id, media_id)
    except TempleApiError as e:
        logger.warning("Media %s %s for event %s failed: %s", media_id, action, event_id, e)
        messages.error(request, fail_text)
    else:
        messages.success(request, ok_text)
    return redirect("console:event_media", event_id=event_id)


# --- team members ---

def _load_team(request):
    try:
        members = as_list(client_for(request).admin_team_members())
    except TempleApiError as e:
        logger.warning("Team members unavailable: %s", e)
        messages.error(request, "Failed to load team members. Please try again.")
        return []
    return [{**m, "image": media_url(m.get("imageUrl"))} for m in members]


def _save_member(request, form, member_id=None, default_order=0):
    client = client_for(request)
    fields = form.fields_payload(default_order)
    try:
        if member_id is None:
            client.create_team_member(fields, form.cleaned_data["image"])
        else:
            client.edit_team_member(member_id, fields, form.cleaned_data.get("image"))
    except TempleApiError as e:
        logger.warning("Saving team member %s failed: %s", member_id or "(new)", e)
        fallback = "Failed to save team member. Please try again."
        if e.is_unavailable:
            fallback = "Network error. Please check if the API Gateway is running."
        form.add_error(None, backend_error(e, fallback))
        return False
    return True


@console_login_required
@require_http_methods(["GET", "POST"])
def team_members(request):
    members = _load_team(request)
    form = TeamMemberForm(request.POST or None, request.FILES or None, initial={"display_order": len(members)})
    if request.method == "POST" and form.is_valid() and _save_member(request, form, default_order=len(members)):
        messages.success(request, "Team member added successfully!")
        return redirect("console:team_members")
    ctx = {"members": members, "form": form, "show_form": request.method == "POST"}
    return render(request, "console/team_members.html", ctx)


@console_login_required
@require_http_methods(["GET", "POST"])
def team_member_edit(request, member_id):
    members = _load_team(request)
    member = _find(members, member_id)
    if request.method == "POST":
        form = TeamMemberForm(request.POST, request.FILES, editing=True)
        if form.is_valid() and _save_member(request, form, member_id, default_order=member.get("displayOrder") or 0):
            messages.success(request, "Team member updated successfully!")
            return redirect("console:team_members")
    else:
        form = TeamMemberForm(editing=True, initial={
            "name": member.get("name") or "",
            "position": member.get("position") or "",
            "mobile_number": member.get("mobileNumber") or "",
            "display_order": member.get("displayOrder") or 0,
        })
    return render(request, "console/team_member_form.html", {"form": form, "member": member})


@console_login_required
@require_POST
def team_member_delete(request, member_id):
    try:
        client_for(request).delete_team_member(member_id)
    except TempleApiError as e:
        logger.warning("Deleting team member %s failed: %s", member_id, e)
        messages.error(request, "Failed to delete team member. Please try again.")
    else:
        messages.success(request, "Team member deleted successfully!")
    return redirect("console:team_members")
