import re

_VERSION_RE = re.compile(r"Version/\d+\.\d+")
_ANDROID_RE = re.compile(r"Android", re.IGNORECASE)


def is_android_webview(user_agent) -> bool:
    """True for the Android in-app browser (the temple's app shell)."""
    ua = user_agent or ""
    is_android = bool(_ANDROID_RE.search(ua))
    return is_android and ("wv" in ua or bool(_VERSION_RE.search(ua)))


def request_is_android_webview(request) -> bool:
    return is_android_webview(request.META.get("HTTP_USER_AGENT", ""))
