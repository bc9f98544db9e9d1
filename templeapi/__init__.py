from .client import (
    TempleApiAuthError,
    TempleApiClient,
    TempleApiError,
    client_for,
    forget_cookies,
    has_backend_session,
    media_url,
    save_cookies,
)

__all__ = [
    "TempleApiAuthError",
    "TempleApiClient",
    "TempleApiError",
    "client_for",
    "forget_cookies",
    "has_backend_session",
    "media_url",
    "save_cookies",
]
