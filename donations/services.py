import logging

from django.db import transaction
from django.utils import timezone

from templeapi import TempleApiError

from .models import QueuedConfirmation

logger = logging.getLogger(__name__)


def _should_queue(error: TempleApiError) -> bool:
    return error.is_unavailable or (error.status_code or 0) >= 500


@transaction.atomic
def queue_confirmation(payload: dict) -> QueuedConfirmation:
    return QueuedConfirmation.objects.create(
        amount=payload["amount"],
        method=payload.get("method") or "UPI",
        utr=payload["utr"],
        name=payload.get("name") or "",
        mobile=payload["mobile"],
        purpose=payload.get("purpose") or "Donation",
        payload=payload,
    )


def submit_confirmation(client, payload: dict, screenshot=None) -> dict:
    """Send a payment confirmation; keep it locally if the backend is down.

    Validation errors from the backend (4xx) are raised to the caller.
    """
    if screenshot is not None:
        try:
            uploaded = client.upload_screenshot(screenshot)
            url = (uploaded or {}).get("url") if isinstance(uploaded, dict) else None
            if url:
                payload = {**payload, "transactionScreenshot": url}
        except TempleApiError as e:
            if not _should_queue(e):
                raise
            logger.warning("Screenshot upload skipped for UTR %s: %s", payload.get("utr"), e)

    try:
        data = client.confirm_donation(payload)
    except TempleApiError as e:
        if not _should_queue(e):
            raise
        queued = queue_confirmation(payload)
        logger.warning("Backend unavailable; queued confirmation %s (UTR %s)", queued.pk, queued.utr)
        return {"queued": True, "data": {}, "queued_id": queued.pk}
    return {"queued": False, "data": data if isinstance(data, dict) else {}}


def forward_queued(client, queued: QueuedConfirmation) -> bool:
    queued.attempts += 1
    try:
        client.confirm_donation(queued.payload)
    except TempleApiError as e:
        retry = _should_queue(e)
        queued.last_error = e.message
        if not retry:
            queued.status = "FAILED"
        queued.save(update_fields=["attempts", "last_error", "status"])
        if retry:
            raise
        return False
    queued.status = "SENT"
    queued.sent_at = timezone.now()
    queued.last_error = ""
    queued.save(update_fields=["attempts", "last_error", "status", "sent_at"])
    return True
