"""Google Analytics 4 events sent from the server.

Uses the GA4 Measurement Protocol. Without ``GA_MEASUREMENT_ID`` and
``GA_API_SECRET`` events are only logged. Sending never raises.
"""
import logging
import uuid

import requests
from requests import RequestException
from django.conf import settings

logger = logging.getLogger(__name__)

GA_ENDPOINT = "https://www.google-analytics.com/mp/collect"
CLIENT_ID_SESSION_KEY = "ga_client_id"


def client_id_for(request) -> str:
    # _ga cookie looks like GA1.1.1234567890.1700000000
    ga_cookie = request.COOKIES.get("_ga", "")
    parts = ga_cookie.split(".")
    if len(parts) >= 4:
        return ".".join(parts[-2:])
    cid = request.session.get(CLIENT_ID_SESSION_KEY)
    if not cid:
        cid = str(uuid.uuid4())
        request.session[CLIENT_ID_SESSION_KEY] = cid
    return cid


def track_event(request, name: str, **params) -> bool:
    params = {k: v for k, v in params.items() if v is not None}
    measurement_id = getattr(settings, "GA_MEASUREMENT_ID", "")
    api_secret = getattr(settings, "GA_API_SECRET", "")
    if not (measurement_id and api_secret):
        logger.debug("Analytics event %s %s (not sent)", name, params)
        return False
    payload = {"client_id": client_id_for(request), "events": [{"name": name, "params": params}]}
    try:
        resp = requests.post(
            GA_ENDPOINT,
            params={"measurement_id": measurement_id, "api_secret": api_secret},
            json=payload,
            timeout=getattr(settings, "GA_TIMEOUT", 5),
        )
        resp.raise_for_status()
    except RequestException:
        logger.exception("Failed to send analytics event %s", name)
        return False
    return True


def _value(amount):
    try:
        return float(amount)
    except (TypeError, ValueError):
        return None


def track_donation(request, amount, donor_name="", category="donation"):
    return track_event(
        request, "donation_made",
        value=_value(amount), currency="INR", donor_name=donor_name or "Anonymous", category=category,
    )


def track_event_view(request, event_name, event_id):
    return track_event(request, "view_event", event_name=event_name, event_id=event_id)


def track_contact_view(request):
    return track_event(request, "contact_page_view")


def track_admin_login(request, user_id):
    return track_event(request, "admin_login", user_id=user_id)


def track_service_booking(request, service_name, amount=None):
    return track_event(
        request, "service_booking",
        service_name=service_name, value=_value(amount), currency="INR" if amount is not None else None,
    )
