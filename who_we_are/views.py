import logging

from django.conf import settings
from django.shortcuts import render

from durgamandir import analytics
from durgamandir.webview import request_is_android_webview
from templeapi import TempleApiError, client_for, media_url

from .maps import embed_map_url, maps_intent_url, maps_url

logger = logging.getLogger(__name__)


def _team(request):
    try:
        members = client_for(request).team_members() or []
    except TempleApiError as e:
        logger.warning("Team members unavailable: %s", e)
        return []
    team = []
    for m in members if isinstance(members, list) else []:
        if isinstance(m, dict):
            team.append({**m, "image": media_url(m.get("imageUrl"))})
    return sorted(team, key=lambda m: (m.get("displayOrder") is None, m.get("displayOrder") or 0))


def about(request):
    return render(request, 'about.html', {"team": _team(request)})


def contact(request):
    query = settings.TEMPLE_MAP_QUERY
    in_webview = request_is_android_webview(request)
    analytics.track_contact_view(request)
    ctx = {
        "phone": settings.TEMPLE_CONTACT_PHONE,
        "email": settings.TEMPLE_CONTACT_EMAIL,
        "map_embed_url": embed_map_url(query),
        "map_link": maps_intent_url(query) if in_webview else maps_url(query),
        "map_opens_app": in_webview,
    }
    return render(request, 'contact.html', ctx)
