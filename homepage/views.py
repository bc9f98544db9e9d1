import logging

from django.shortcuts import render

from templeapi import TempleApiError, client_for, media_url

logger = logging.getLogger(__name__)


def home_view(request):
    client = client_for(request)
    try:
        latest_image = client.latest_temple_image() or None
    except TempleApiError as e:
        logger.info("No latest temple image: %s", e)
        latest_image = None
    try:
        updates = client.latest_updates(limit=3, sort="desc") or []
    except TempleApiError as e:
        logger.warning("Latest updates unavailable: %s", e)
        updates = []
    if not isinstance(latest_image, dict):
        latest_image = None
    context = {
        "latest_image": latest_image,
        "latest_image_src": media_url((latest_image or {}).get("imageUrl") or (latest_image or {}).get("url")),
        "updates": updates if isinstance(updates, list) else [],
    }
    return render(request, 'home.html', context)
