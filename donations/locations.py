"""Country -> state -> district -> thana -> village dropdowns.

Option lists come from the backend and are cached. A submitted id survives
only while it belongs to its parent's options; otherwise that level (and all
levels below it) goes back to the configured default path.
"""
import logging

from django.conf import settings
from django.core.cache import cache

from templeapi import TempleApiError

logger = logging.getLogger(__name__)

LEVELS = ("country", "state", "district", "thana", "village")
OTHER_VILLAGE = "OTHER"
DEFAULT_PATH = ("India", "Jharkhand", "Hazaribag", "Ichak", "Mangura")


def default_path():
    path = list(getattr(settings, "DEFAULT_LOCATION_PATH", None) or DEFAULT_PATH)
    return (path + [""] * len(LEVELS))[: len(LEVELS)]


def _fetcher(client, level):
    return {
        "country": lambda parent: client.countries(),
        "state": client.states,
        "district": client.districts,
        "thana": client.thanas,
        "village": client.villages,
    }[level]


def _normalize(raw):
    if not isinstance(raw, list):
        return []
    options = []
    for item in raw:
        if isinstance(item, dict) and item.get("id") is not None:
            options.append({"id": str(item["id"]), "name": str(item.get("name") or "")})
    return options


def fetch_options(client, level, parent_id=None):
    if level not in LEVELS:
        raise ValueError(f"Unknown location level: {level}")
    if level != "country" and not parent_id:
        return []
    key = f"locations:{level}:{parent_id or ''}"
    options = cache.get(key)
    if options is None:
        options = _normalize(_fetcher(client, level)(parent_id))
        cache.set(key, options, getattr(settings, "LOCATION_CACHE_SECONDS", 600))
    return options


def search_options(options, query):
    q = (query or "").strip().lower()
    if not q:
        return list(options)
    return [o for o in options if q in o["name"].lower()]


def pick_default(options, name):
    if not options:
        return None
    wanted = (name or "").strip().lower()
    for option in options:
        if option["name"].strip().lower() == wanted:
            return option["id"]
    return options[0]["id"]


def resolve_cascade(client, selected=None, changed_level=None):
    """Work out options and the effective selection for every level.

    ``selected`` maps level -> submitted id. ``changed_level`` names a level
    the user just changed; everything below it is reset.
    """
    selected = selected or {}
    defaults = default_path()
    reset_from = LEVELS.index(changed_level) + 1 if changed_level in LEVELS else len(LEVELS)
    levels = []
    effective = {}
    parent_id = None
    error = None
    custom_village = False

    for index, level in enumerate(LEVELS):
        if level != "country" and parent_id is None:
            options = []
        else:
            try:
                options = fetch_options(client, level, parent_id)
            except TempleApiError as e:
                logger.warning("Could not load %s options for parent %s: %s", level, parent_id, e)
                if level != "village":
                    error = e.message
                options = []

        wanted = "" if index >= reset_from else str(selected.get(level) or "")
        ids = {o["id"] for o in options}
        if level == "village" and (wanted == OTHER_VILLAGE or not options):
            choice = None
            custom_village = True
        elif wanted in ids:
            choice = wanted
        else:
            choice = pick_default(options, defaults[index])
            # a stale parent invalidates every child selection
            reset_from = min(reset_from, index + 1) if wanted else reset_from

        effective[level] = choice
        levels.append({"level": level, "options": options, "selected": choice})
        parent_id = choice

    return {
        "levels": levels,
        "selected": effective,
        "custom_village": custom_village,
        "error": error,
    }
