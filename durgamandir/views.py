from django.shortcuts import redirect, render
from django.utils.http import url_has_allowed_host_and_scheme
from django.views.decorators.http import require_POST

from .i18n import LANGUAGE_COOKIE_NAME, LANGUAGE_SESSION_KEY, normalize_language


def maintenance_view(request):
    return render(request, 'maintenance.html')


def error_404_view(request, exception):
    return render(request, '404.html', status=404)


def csrf_failure(request, reason="", template_name="csrf_failure.html"):
    """Shown when a form post fails the CSRF check (usually cookies disabled)."""
    context = {
        "reason": reason,
    }
    return render(request, template_name, context, status=403)


@require_POST
def set_language(request):
    lang = normalize_language(request.POST.get("lang"))
    next_url = request.POST.get("next") or "/"
    if not url_has_allowed_host_and_scheme(next_url, allowed_hosts={request.get_host()}):
        next_url = "/"
    response = redirect(next_url)
    if lang:
        request.session[LANGUAGE_SESSION_KEY] = lang
        response.set_cookie(LANGUAGE_COOKIE_NAME, lang, max_age=365 * 24 * 3600, samesite="Lax")
    return response
