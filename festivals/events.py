from durgamandir.i18n import localized, other_language
from templeapi import media_url

SCHEDULE_PARTS = ("morning", "afternoon", "evening")
TEXT_FIELDS = (
    ("name", "Untitled Event"),
    ("dateRange", "No date range"),
    ("shortDescription", "No description"),
)


def _schedule_value(event, part, lang):
    en = event.get("schedule") or {}
    hi = event.get("scheduleHi") or {}
    return localized({part: en.get(part), f"{part}Hi": hi.get(part)}, part, lang)


def _both(event, field):
    en, hi = event.get(field), event.get(f"{field}Hi")
    return bool(isinstance(en, str) and en.strip() and isinstance(hi, str) and hi.strip())


def present_event(event: dict, lang: str) -> dict:
    """Event in the visitor's language, falling back to the other one per field."""
    other = other_language(lang)
    shown = {"id": event.get("id")}
    for field, fallback in TEXT_FIELDS:
        shown[field] = localized(event, field, lang) or fallback
        # secondary line only when both languages are filled in
        shown[f"{field}Alt"] = localized(event, field, other) if _both(event, field) else ""
    shown["schedule"] = {part: _schedule_value(event, part, lang) for part in SCHEDULE_PARTS}
    shown["has_schedule"] = any(shown["schedule"].values())
    return shown


def present_media(items) -> list:
    media = []
    for item in items if isinstance(items, list) else []:
        if not isinstance(item, dict) or not item.get("mediaUrl"):
            continue
        media.append({
            "id": item.get("id"),
            "url": media_url(item.get("mediaUrl")),
            "type": "video" if str(item.get("mediaType") or "").upper().startswith("VIDEO") else "image",
            "name": item.get("originalName") or "",
        })
    return media
