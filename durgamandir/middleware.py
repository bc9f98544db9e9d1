import time

from django.conf import settings
from django.contrib import messages
from django.shortcuts import redirect
from django.urls import reverse

from templeapi import forget_cookies

from .i18n import (
    LANGUAGE_COOKIE_NAME,
    LANGUAGE_SESSION_KEY,
    language_from_request,
    normalize_language,
)

CONSOLE_USER_KEY = "console_user"
LAST_ACTIVITY_KEY = "console_last_activity"
IDLE_EXPIRED_MESSAGE = "Session expired due to inactivity. Please login again."


def idle_timeout_seconds() -> int:
    return max(int(getattr(settings, "CONSOLE_IDLE_TIMEOUT_MINUTES", 5)), 1) * 60


class MaintenanceModeMiddleware:
    """Redirect all requests to the maintenance page when enabled."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        if getattr(settings, "MAINTENANCE_MODE", False):
            maintenance_url = reverse("maintenance")
            excluded_paths = [maintenance_url, getattr(settings, "CONSOLE_PATH_PREFIX", "/admin/")]
            static_prefix = getattr(settings, "STATIC_URL", "/static/")
            media_prefix = getattr(settings, "MEDIA_URL", "/media/")
            if (
                not request.path.startswith(tuple(excluded_paths))
                and not request.path.startswith(static_prefix)
                and not request.path.startswith(media_prefix)
            ):
                return redirect(maintenance_url)
        return self.get_response(request)


class LanguageMiddleware:
    """Resolve ``request.LANG`` (en/hi); ``?lang=xx`` switches and remembers it."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        chosen = normalize_language(request.GET.get("lang"))
        if chosen:
            request.session[LANGUAGE_SESSION_KEY] = chosen
        request.LANG = chosen or language_from_request(request)
        response = self.get_response(request)
        if chosen:
            response.set_cookie(LANGUAGE_COOKIE_NAME, chosen, max_age=365 * 24 * 3600, samesite="Lax")
        return response


class ConsoleIdleTimeoutMiddleware:
    """Log the console user out after a period without requests.

    Only signed-in console sessions are tracked; the login page itself is exempt.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        prefix = getattr(settings, "CONSOLE_PATH_PREFIX", "/admin/")
        if request.path.startswith(prefix) and request.session.get(CONSOLE_USER_KEY):
            now = time.time()
            last = request.session.get(LAST_ACTIVITY_KEY)
            if last is not None and now - float(last) > idle_timeout_seconds():
                forget_cookies(request)
                request.session.pop(CONSOLE_USER_KEY, None)
                request.session.pop(LAST_ACTIVITY_KEY, None)
                messages.warning(request, IDLE_EXPIRED_MESSAGE)
                return redirect("console:login")
            request.session[LAST_ACTIVITY_KEY] = now
        return self.get_response(request)
