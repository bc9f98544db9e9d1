from django.conf import settings

from .i18n import DEFAULT_LANGUAGE, other_language
from .middleware import CONSOLE_USER_KEY, idle_timeout_seconds


def site(request):
    lang = getattr(request, "LANG", DEFAULT_LANGUAGE)
    ctx = {
        "LANG": lang,
        "OTHER_LANG": other_language(lang),
        "TEMPLE_NAME": getattr(settings, "TEMPLE_NAME", "Durga Maa Temple"),
        "GA_MEASUREMENT_ID": getattr(settings, "GA_MEASUREMENT_ID", ""),
    }
    session = getattr(request, "session", None)
    if session is not None and session.get(CONSOLE_USER_KEY):
        timeout = idle_timeout_seconds()
        ctx.update({
            "console_user": session.get(CONSOLE_USER_KEY),
            "idle_timeout_seconds": timeout,
            "idle_warning_seconds": max(timeout - 60, 0),
        })
    return ctx
