import logging
from functools import wraps

from django.shortcuts import redirect

from durgamandir.middleware import CONSOLE_USER_KEY
from templeapi import TempleApiError, client_for, forget_cookies, has_backend_session

logger = logging.getLogger(__name__)


def console_login_required(view_func):
    """Only let a request through when the backend still accepts its session."""

    @wraps(view_func)
    def _wrapped(request, *args, **kwargs):
        if not has_backend_session(request):
            return redirect("console:login")
        try:
            authenticated = client_for(request).check_auth()
        except TempleApiError as e:
            logger.warning("Auth check failed for %s: %s", request.path, e)
            authenticated = False
        if not authenticated:
            forget_cookies(request)
            request.session.pop(CONSOLE_USER_KEY, None)
            return redirect("console:login")
        return view_func(request, *args, **kwargs)

    return _wrapped
