"""WhatsApp / SMS deep links for telling a donor how their confirmation went.

No messaging provider is involved: the admin's own phone opens the link.
"""
import re

from donations.upi import encode_component, format_amount

DEFAULT_COUNTRY_CODE = "91"
VERIFIED = "VERIFIED"
REJECTED = "REJECTED"

_INDIAN_MOBILE_RE = re.compile(r"^[6-9]\d{9}$")


def _cleaned(mobile: str) -> str:
    return re.sub(r"[^\d+]", "", mobile)


def format_mobile(mobile, cc=DEFAULT_COUNTRY_CODE):
    """Digits with country code (``919876543210``), or None for empty input."""
    if not mobile or not isinstance(mobile, str):
        return None
    cleaned = _cleaned(mobile)
    if cleaned.startswith("+"):
        return cleaned[1:]
    if cleaned.startswith(cc) and len(cleaned) > 10:
        return cleaned
    if len(cleaned) == 10 and _INDIAN_MOBILE_RE.match(cleaned):
        return cc + cleaned
    if len(cleaned) >= 12:
        return cleaned
    return cc + cleaned


def is_valid_mobile(mobile) -> bool:
    if not mobile or not isinstance(mobile, str):
        return False
    return len(_cleaned(mobile).replace("+", "")) >= 10


def whatsapp_url(mobile, message):
    number = format_mobile(mobile)
    if not number:
        return None
    return f"https://wa.me/{number}?text={encode_component(message)}"


def sms_url(mobile, message):
    number = format_mobile(mobile)
    if not number:
        return None
    return f"sms:+{number}?body={encode_component(message)}"


def _amount(confirmation):
    value = confirmation.get("amount")
    if value in (None, ""):
        return "0"
    formatted = format_amount(value, places=3)
    # keep whatever the admin typed when it is not a number
    if formatted == "0" and str(value).strip() not in ("0", "0.0", "0.00", "0.000"):
        return str(value)
    return formatted


def _details(confirmation):
    return _amount(confirmation), confirmation.get("method") or "N/A", confirmation.get("utr") or "N/A"


def whatsapp_message(confirmation: dict, status: str, admin_note: str) -> str:
    amount, method, utr = _details(confirmation)
    if status == VERIFIED:
        return (
            "Namaste from Durga Maa Temple \U0001F64F\n\n"
            f"✅ Your donation of ₹{amount} has been verified.\n"
            f"Method: {method}\nUTR: {utr}\nNote: {admin_note}\n\n"
            "Thank you for your contribution!\nJai Maa Durga \U0001F33A"
        )
    return (
        "Namaste from Durga Maa Temple \U0001F64F\n\n"
        f"❌ Your donation of ₹{amount} could not be verified.\n"
        f"Method: {method}\nUTR: {utr}\nNote: {admin_note}\n\n"
        "Please contact temple admin if needed.\nJai Maa Durga \U0001F33A"
    )


def sms_message(confirmation: dict, status: str, admin_note: str) -> str:
    amount, method, utr = _details(confirmation)
    if status == VERIFIED:
        return f"Durga Maa Temple: Donation ₹{amount} verified. Method:{method}. UTR:{utr}. Note:{admin_note}. Jai Maa Durga"
    return (
        f"Durga Maa Temple: Donation ₹{amount} not verified. Method:{method}. UTR:{utr}. "
        f"Note:{admin_note}. Contact admin. Jai Maa Durga"
    )


def notification_links(confirmation: dict, status: str, admin_note: str) -> dict:
    """Everything the notify step of the confirmation page shows."""
    mobile = confirmation.get("mobile")
    wa_text = whatsapp_message(confirmation, status, admin_note)
    sms_text = sms_message(confirmation, status, admin_note)
    valid = is_valid_mobile(mobile)
    return {
        "status": status,
        "mobile": mobile or "",
        "valid_mobile": valid,
        "whatsapp_url": whatsapp_url(mobile, wa_text) if valid else None,
        "sms_url": sms_url(mobile, sms_text) if valid else None,
        "message": wa_text,
    }
