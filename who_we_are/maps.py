from urllib.parse import quote


def _enc(query):
    return quote(str(query or ""), safe="-_.!~*'()")


def maps_url(query) -> str:
    return f"https://www.google.com/maps?q={_enc(query)}"


def embed_map_url(query) -> str:
    return f"https://www.google.com/maps?q={_enc(query)}&output=embed"


def maps_intent_url(query) -> str:
    """Opens the Google Maps app from the Android WebView shell."""
    return f"intent://maps.google.com/maps?q={_enc(query)}#Intent;scheme=https;package=com.google.android.apps.maps;end"
