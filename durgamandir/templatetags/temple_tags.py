from django import template

from donations.upi import format_amount
from templeapi import media_url

from ..i18n import DEFAULT_LANGUAGE, localized, translate

register = template.Library()


@register.simple_tag(takes_context=True)
def t(context, key):
    request = context.get("request")
    lang = context.get("LANG") or getattr(request, "LANG", DEFAULT_LANGUAGE)
    return translate(key, lang)


@register.simple_tag(takes_context=True)
def bilingual(context, record, field):
    return localized(record, field, context.get("LANG") or DEFAULT_LANGUAGE)


@register.filter
def inr(value):
    return format_amount(value)


@register.filter
def inr2(value):
    return format_amount(value, fixed=True)


@register.filter
def media(value):
    return media_url(value)


@register.filter
def get_item(mapping, key):
    if isinstance(mapping, dict):
        return mapping.get(key)
    return None
