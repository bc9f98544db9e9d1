import io
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from urllib.parse import quote, urlencode

import qrcode
import qrcode.image.svg

from durgamandir.webview import is_android_webview

APP_SCHEMES = {
    "phonepe": "phonepe://pay?",
    "gpay": "tez://upi/pay?",
    "googlepay": "tez://upi/pay?",
    "paytm": "paytmmp://pay?",
    "bhim": "bhim://pay?",
}
APP_PACKAGES = {
    "phonepe": "com.phonepe.app",
    "gpay": "com.google.android.apps.nfc.payment",
    "paytm": "net.one97.paytm",
    "bhim": "in.org.npci.upiapp",
}
UPI_APPS = [
    ("phonepe", "PhonePe"),
    ("gpay", "Google Pay"),
    ("paytm", "Paytm"),
    ("bhim", "BHIM"),
    ("any", "Any UPI App"),
]


def encode_component(value) -> str:
    """Percent-encode like a browser's encodeURIComponent."""
    return quote(str(value), safe="-_.!~*'()")


def amount_str(amount) -> str:
    try:
        q = Decimal(str(amount).strip())
    except (InvalidOperation, ValueError):
        return str(amount)
    if not q.is_finite():
        return str(amount)
    return format(q.normalize(), "f")


def build_upi_query(upi_id, payee_name, amount, note="") -> str:
    params = [("pa", upi_id), ("pn", payee_name), ("am", amount_str(amount)), ("cu", "INR")]
    if note:
        params.append(("tn", note))
    return urlencode(params)


def upi_link(upi_id, payee_name, amount, note="") -> str:
    return f"upi://pay?{build_upi_query(upi_id, payee_name, amount, note)}"


def app_upi_link(app, upi_id, payee_name, amount, note="") -> str:
    prefix = APP_SCHEMES.get((app or "").lower(), "upi://pay?")
    return prefix + build_upi_query(upi_id, payee_name, amount, note)


def upi_intent_url(app, upi_id, payee_name, amount, note="") -> str:
    """Android intent URL that opens a UPI app, falling back to the plain upi:// link."""
    query = build_upi_query(upi_id, payee_name, amount, note)
    fallback = encode_component(f"upi://pay?{query}")
    package = APP_PACKAGES.get((app or "").lower())
    package_part = f"package={package};" if package else ""
    return f"intent://pay?{query}#Intent;scheme=upi;{package_part}S.browser_fallback_url={fallback};end"


def payment_link_for(user_agent, app, upi_id, payee_name, amount, note="") -> str:
    if is_android_webview(user_agent) and (app or "any").lower() != "any":
        return upi_intent_url(app, upi_id, payee_name, amount, note)
    return app_upi_link(app, upi_id, payee_name, amount, note)


def upi_qr_svg(link: str) -> str:
    img = qrcode.make(link, image_factory=qrcode.image.svg.SvgPathImage, box_size=8, border=2)
    buf = io.BytesIO()
    img.save(buf)
    svg = buf.getvalue().decode("utf-8")
    if svg.startswith("<?xml"):
        svg = svg[svg.index("?>") + 2:].lstrip()
    return svg


def _group_indian(whole: str) -> str:
    if len(whole) <= 3:
        return whole
    head, tail = whole[:-3], whole[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_amount(value, fixed=False, places=2) -> str:
    """Indian digit grouping (1,00,000), at most ``places`` decimals.

    ``fixed`` always prints ``places`` decimals. Unparseable values give "0".
    """
    try:
        num = Decimal(str(value).replace(",", "").strip())
    except (InvalidOperation, ValueError):
        return "0"
    if not num.is_finite():
        return "0"
    try:
        num = num.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return "0"
    sign = "-" if num < 0 else ""
    whole, _, frac = format(abs(num), "f").partition(".")
    if not fixed:
        frac = frac.rstrip("0")
    return f"{sign}{_group_indian(whole)}" + (f".{frac}" if frac else "")
