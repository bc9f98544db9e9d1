import logging

from django.http import Http404
from django.shortcuts import render
from django.views.decorators.http import require_GET

from durgamandir import analytics
from templeapi import TempleApiError, client_for

from .events import present_event, present_media

logger = logging.getLogger(__name__)


def _load_events(client):
    try:
        events = client.events()
    except TempleApiError as e:
        logger.warning("Events unavailable: %s", e)
        return []
    return [e for e in events if isinstance(e, dict)] if isinstance(events, list) else []


def _load_media(client, event_id):
    try:
        return present_media(client.event_media(event_id))
    except TempleApiError as e:
        logger.warning("Media for event %s unavailable: %s", event_id, e)
        return []


@require_GET
def special_events(request):
    client = client_for(request)
    events = []
    for raw in _load_events(client):
        event = present_event(raw, request.LANG)
        event["media"] = _load_media(client, raw.get("id"))
        events.append(event)
    return render(request, "festivals/special_events.html", {"events": events})


@require_GET
def event_detail(request, event_id):
    client = client_for(request)
    raw = next((e for e in _load_events(client) if str(e.get("id")) == str(event_id)), None)
    if raw is None:
        raise Http404("Event not found")
    event = present_event(raw, request.LANG)
    event["media"] = _load_media(client, raw.get("id"))
    analytics.track_event_view(request, event["name"], raw.get("id"))
    return render(request, "festivals/event_detail.html", {"event": event})
