from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string
from django.template import TemplateDoesNotExist, engines
from django.conf import settings
import logging

logger = logging.getLogger(__name__)


def _from_email():
    return getattr(settings, "DONATIONS_FROM_EMAIL", None) or getattr(settings, "DEFAULT_FROM_EMAIL", "noreply@durgamaamandir.org")


def _fail_silently() -> bool:
    return getattr(settings, "EMAIL_FAIL_SILENTLY", True)


def _template_exists(path: str) -> bool:
    try:
        engines["django"].get_template(path)
        return True
    except TemplateDoesNotExist:
        return False


def _admin_recipients():
    raw = getattr(settings, "CONFIRMATIONS_ADMIN_EMAILS", "") or ""
    emails = [e.strip() for e in raw.split(",") if e and e.strip()]
    # Deduplicate while preserving order
    seen = set()
    uniq = []
    for e in emails:
        if e.lower() not in seen:
            seen.add(e.lower())
            uniq.append(e)
    return uniq


def send_confirmation_received_email(payload: dict, queued: bool = False) -> bool:
    """Tell the admins a donor submitted a payment confirmation to verify."""
    admins = _admin_recipients()
    if not admins:
        return False
    ctx = {"confirmation": payload, "queued": queued}
    subject = f"Payment confirmation to verify: ₹{payload.get('amount')} UTR {payload.get('utr')}"
    try:
        text = render_to_string("emails/confirmation_received.txt", ctx)
        msg = EmailMultiAlternatives(subject, text, _from_email(), admins)
        if _template_exists("emails/confirmation_received.html"):
            try:
                html = render_to_string("emails/confirmation_received.html", ctx)
                msg.attach_alternative(html, "text/html")
            except Exception:
                logger.exception("Failed to render HTML confirmation template; sending text-only")
        msg.send(fail_silently=_fail_silently())
    except Exception:
        logger.exception("Failed to notify admins about confirmation UTR %s", payload.get("utr"))
        return False
    return True
