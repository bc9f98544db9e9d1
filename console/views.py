import logging
import time

from django.contrib import messages
from django.http import JsonResponse
from django.shortcuts import redirect, render
from django.urls import reverse
from django.utils.http import url_has_allowed_host_and_scheme
from django.views.decorators.cache import never_cache
from django.views.decorators.csrf import ensure_csrf_cookie
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from durgamandir import analytics
from durgamandir.middleware import CONSOLE_USER_KEY, LAST_ACTIVITY_KEY
from templeapi import TempleApiError, client_for, forget_cookies, has_backend_session, media_url, save_cookies

from .decorators import console_login_required
from .forms import LoginForm, NoteForm, SignupForm
from .messaging import REJECTED, VERIFIED, notification_links

logger = logging.getLogger(__name__)

LOGIN_FAILED = "Login failed. Please check your credentials."
CONFIRMATION_TABS = ("PENDING", "VERIFIED", "REJECTED")
NOTIFY_SESSION_KEY = "console_notify"
DONATION_FILTERS = ("name", "stateId", "district", "thana", "village")


def backend_error(exc, fallback):
    """The backend's ``error`` text when it sent one, else ``fallback``."""
    payload = exc.payload if isinstance(exc.payload, dict) else {}
    return payload.get("error") or payload.get("message") or fallback


def as_list(data, key=None):
    if key and isinstance(data, dict):
        data = data.get(key)
    return [row for row in data if isinstance(row, dict)] if isinstance(data, list) else []


@ensure_csrf_cookie
@never_cache
@require_http_methods(["GET", "POST"])
def login_view(request):
    client = client_for(request)
    if request.method == "GET" and has_backend_session(request):
        try:
            if client.check_auth():
                return redirect("console:dashboard")
        except TempleApiError as e:
            logger.info("Auth check on login page failed: %s", e)

    form = LoginForm(request.POST or None)
    if request.method == "POST" and form.is_valid():
        user_id = form.cleaned_data["user_id"].strip()
        try:
            client.login(user_id, form.cleaned_data["password"])
        except TempleApiError as e:
            logger.warning("Console login failed for %s: %s", user_id, e)
            form.add_error(None, backend_error(e, LOGIN_FAILED) if e.status_code else LOGIN_FAILED)
        else:
            request.session.cycle_key()
            save_cookies(request, client)
            request.session[CONSOLE_USER_KEY] = user_id
            request.session[LAST_ACTIVITY_KEY] = time.time()
            logger.info("Console login for %s", user_id)
            analytics.track_admin_login(request, user_id)
            return redirect("console:dashboard")
    return render(request, "console/login.html", {"form": form})


@require_POST
def logout_view(request):
    if has_backend_session(request):
        try:
            client_for(request).logout()
        except TempleApiError as e:
            logger.warning("Backend logout failed: %s", e)
    forget_cookies(request)
    request.session.pop(CONSOLE_USER_KEY, None)
    request.session.pop(LAST_ACTIVITY_KEY, None)
    return redirect("console:login")


@ensure_csrf_cookie
@require_http_methods(["GET", "POST"])
def signup_view(request):
    form = SignupForm(request.POST or None)
    if request.method == "POST" and form.is_valid():
        try:
            client_for(request).signup_admin(form.cleaned_data["user_id"].strip(), form.cleaned_data["password1"])
        except TempleApiError as e:
            logger.warning("Admin signup failed: %s", e)
            form.add_error(None, backend_error(e, "Signup failed. Please try again."))
        else:
            messages.success(request, "Admin account created. Please login.")
            return redirect("console:login")
    return render(request, "console/signup.html", {"form": form})


@require_POST
def keepalive(request):
    """Ping from the idle-warning dialog; the middleware records the activity."""
    if not request.session.get(CONSOLE_USER_KEY):
        return JsonResponse({"ok": False}, status=401)
    return JsonResponse({"ok": True})


@console_login_required
@require_GET
def dashboard(request):
    try:
        stats = client_for(request).admin_stats() or {}
    except TempleApiError as e:
        logger.warning("Admin stats unavailable: %s", e)
        messages.error(request, "Could not load dashboard statistics.")
        stats = {}
    ctx = {
        "stats": {
            "totalAmount": stats.get("totalAmount") or 0,
            "totalDonors": stats.get("totalDonors") or 0,
            "last7DaysCount": stats.get("last7DaysCount") or 0,
        },
    }
    return render(request, "console/dashboard.html", ctx)


def location_text(donation: dict) -> str:
    """``village, thana, district, state, country`` with ``-`` for blanks."""
    village = donation.get("villageName") or donation.get("customVillageName") or "N/A"
    parts = [
        village,
        donation.get("thanaName"),
        donation.get("districtName"),
        donation.get("stateName"),
        donation.get("countryName"),
    ]
    return ", ".join(str(p).strip() if p and str(p).strip() else "-" for p in parts)


@console_login_required
@require_GET
def donations_list(request):
    filters = {k: (request.GET.get(k) or "").strip() for k in DONATION_FILTERS}
    try:
        rows = as_list(client_for(request).admin_donations(**filters))
    except TempleApiError as e:
        logger.warning("Admin donations unavailable: %s", e)
        messages.error(request, "Could not load donations.")
        rows = []
    donations = [{**row, "location": location_text(row)} for row in rows]
    return render(request, "console/donations.html", {"donations": donations, "filters": filters})


@console_login_required
@require_POST
def donation_toggle_public(request, donation_id):
    show_public = request.POST.get("show_public") == "true"
    try:
        client_for(request).set_donation_public(donation_id, show_public)
    except TempleApiError as e:
        logger.warning("Toggle showPublic failed for donation %s: %s", donation_id, e)
        messages.error(request, "Error updating donation")
    next_url = request.POST.get("next") or ""
    if not url_has_allowed_host_and_scheme(next_url, allowed_hosts={request.get_host()}):
        next_url = reverse("console:donations")
    return redirect(next_url)


def _tab(value):
    value = (value or "").upper()
    return value if value in CONFIRMATION_TABS else "PENDING"


@console_login_required
@require_GET
def confirmations(request):
    status = _tab(request.GET.get("status"))
    try:
        rows = as_list(client_for(request).admin_confirmations(status))
    except TempleApiError as e:
        logger.warning("Confirmations (%s) unavailable: %s", status, e)
        messages.error(request, "Could not load confirmations.")
        rows = []
    items = [{**row, "screenshot": media_url(row.get("screenshotUrl"))} for row in rows]
    ctx = {
        "items": items,
        "status": status,
        "tabs": CONFIRMATION_TABS,
        "note_form": NoteForm(initial={"action": "verify"}),
    }
    return render(request, "console/confirmations.html", ctx)


@console_login_required
@require_POST
def confirmation_action(request, confirmation_id):
    back = f"{reverse('console:confirmations')}?status={_tab(request.POST.get('status'))}"
    form = NoteForm(request.POST)
    if not form.is_valid():
        for errors in form.errors.values():
            for error in errors:
                messages.error(request, error)
        return redirect(back)

    action = form.cleaned_data["action"]
    note = form.cleaned_data["admin_note"]
    client = client_for(request)
    try:
        if action == "verify":
            updated = client.verify_confirmation(confirmation_id, note)
        else:
            updated = client.reject_confirmation(confirmation_id, note)
    except TempleApiError as e:
        logger.warning("Confirmation %s %s failed: %s", confirmation_id, action, e)
        messages.error(request, backend_error(e, "Failed to process action. Please try again."))
        return redirect(back)

    record = updated if isinstance(updated, dict) and updated else {"id": confirmation_id}
    status = VERIFIED if action == "verify" else REJECTED
    logger.info("Confirmation %s marked %s", confirmation_id, status)
    request.session[NOTIFY_SESSION_KEY] = {
        "confirmation": {k: record.get(k) for k in ("id", "name", "mobile", "amount", "method", "utr", "purpose")},
        "status": status,
        "note": note,
    }
    return redirect("console:confirmation_notify")


@console_login_required
@require_GET
def confirmation_notify(request):
    pending = request.session.get(NOTIFY_SESSION_KEY)
    if not pending:
        return redirect("console:confirmations")
    confirmation = pending["confirmation"]
    ctx = {
        "confirmation": confirmation,
        "note": pending["note"],
        "notify": notification_links(confirmation, pending["status"], pending["note"]),
    }
    return render(request, "console/confirmation_notify.html", ctx)
