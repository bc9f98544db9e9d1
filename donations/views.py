import logging
from urllib.parse import urlencode

from django.conf import settings
from django.contrib import messages
from django.http import HttpResponseBadRequest, JsonResponse
from django.shortcuts import redirect, render
from django.utils.http import url_has_allowed_host_and_scheme
from django.views.decorators.csrf import csrf_protect
from django.views.decorators.http import require_GET, require_http_methods

from durgamandir import analytics
from templeapi import TempleApiError, client_for

from .emails import send_confirmation_received_email
from .forms import PaymentConfirmationForm, TempleDonationForm, UpiPayForm
from .locations import LEVELS, OTHER_VILLAGE, fetch_options, resolve_cascade, search_options
from .services import submit_confirmation
from .upi import UPI_APPS, payment_link_for, upi_link, upi_qr_svg

logger = logging.getLogger(__name__)

DONOR_PAGE_SIZE = 20
DONOR_FILTERS = ("name", "stateId", "district", "thana", "village")
CONFIRM_400_MESSAGE = "Invalid data. Please check your mobile number (10 digits) and UTR."


def _bank_details():
    return {
        "upi_id": settings.TEMPLE_UPI_ID,
        "payee_name": settings.TEMPLE_PAYEE_NAME,
        "account": settings.TEMPLE_BANK_ACCOUNT,
        "ifsc": settings.TEMPLE_BANK_IFSC,
        "bank_name": settings.TEMPLE_BANK_NAME,
        "branch": settings.TEMPLE_BANK_BRANCH,
    }


def payment_panel_context(request, amount=None, purpose="Donation", name="", mobile="", form=None):
    """Context for ``donations/_payment_panel.html`` (UPI, bank details, confirmation form)."""
    bank = _bank_details()
    ctx = {"bank": bank, "purpose": purpose, "next_url": request.get_full_path()}
    if amount:
        link = upi_link(bank["upi_id"], bank["payee_name"], amount, purpose or "Payment")
        ctx.update({"upi_link": link, "upi_qr": upi_qr_svg(link), "pay_amount": amount})
    ctx["confirm_form"] = form or PaymentConfirmationForm(
        initial={"amount": amount or "", "method": "UPI", "purpose": purpose, "name": name, "mobile": mobile}
    )
    return ctx


@require_http_methods(["GET", "POST"])
def donate(request):
    bank = _bank_details()
    ctx = {"bank": bank, "upi_apps": UPI_APPS, "active_tab": request.GET.get("tab") or "upi"}
    if request.method == "POST":
        form = UpiPayForm(request.POST)
        if form.is_valid():
            amount = form.cleaned_data["amount"]
            app = form.cleaned_data.get("app") or "any"
            note = form.note()
            link = payment_link_for(
                request.META.get("HTTP_USER_AGENT", ""), app,
                bank["upi_id"], bank["payee_name"], amount, note,
            )
            ctx.update({
                "pay_link": link,
                "upi_qr": upi_qr_svg(upi_link(bank["upi_id"], bank["payee_name"], amount, note)),
                "pay_amount": amount,
            })
            confirm_initial = {
                "amount": amount, "method": "UPI", "purpose": "Donation",
                "name": form.cleaned_data.get("name"), "mobile": form.cleaned_data.get("mobile"),
            }
            ctx["confirm_form"] = PaymentConfirmationForm(initial=confirm_initial)
    else:
        form = UpiPayForm(initial={"app": "any"})
    ctx["upi_form"] = form
    ctx.setdefault("confirm_form", PaymentConfirmationForm(initial={"method": "UPI", "purpose": "Donation"}))
    ctx["next_url"] = request.path + "?tab=confirm"
    return render(request, "donations/donate.html", ctx)


@require_http_methods(["GET", "POST"])
@csrf_protect
def confirm_payment(request):
    """Donor reports a UPI / bank payment (UTR) for manual verification."""
    next_url = request.POST.get("next") or request.GET.get("next") or ""
    if not url_has_allowed_host_and_scheme(next_url, allowed_hosts={request.get_host()}):
        next_url = ""

    if request.method == "GET":
        form = PaymentConfirmationForm(initial={
            "amount": request.GET.get("amount") or "",
            "method": "UPI",
            "purpose": request.GET.get("purpose") or "Donation",
        })
        return render(request, "donations/confirm_payment.html", {"confirm_form": form, "bank": _bank_details(), "next_url": next_url})

    form = PaymentConfirmationForm(request.POST, request.FILES)
    if form.is_valid():
        payload = form.payload()
        try:
            result = submit_confirmation(client_for(request), payload, form.cleaned_data.get("screenshot"))
        except TempleApiError as e:
            has_message = isinstance(e.payload, dict) and (e.payload.get("error") or e.payload.get("message"))
            form.add_error(None, CONFIRM_400_MESSAGE if e.status_code == 400 and not has_message else e.message)
        else:
            send_confirmation_received_email(payload, queued=result["queued"])
            analytics.track_donation(request, payload["amount"], payload.get("name") or "", payload["purpose"])
            messages.success(
                request,
                "Thank you! Your payment details have been submitted. "
                "The temple team will verify your payment shortly.",
            )
            return redirect(next_url or "donations:donate")
    return render(request, "donations/confirm_payment.html", {"confirm_form": form, "bank": _bank_details(), "next_url": next_url})


def _stats_context(client):
    try:
        stats = client.donation_stats() or {}
    except TempleApiError as e:
        logger.warning("Donation stats unavailable: %s", e)
        return {"stats": None, "progress": 0}
    try:
        progress = float(stats.get("totalAmount") or 0) / float(stats.get("targetAmount") or 0) * 100
    except (TypeError, ValueError, ZeroDivisionError):
        progress = 0
    return {"stats": stats, "progress": progress, "progress_bar": min(progress, 100)}


def _selected_locations(data):
    return {level: data.get(level) for level in LEVELS}


def _with_cascade(data, cascade):
    """Posted data with each location level replaced by the cascade's choice."""
    data = data.copy()
    for entry in cascade["levels"]:
        data[entry["level"]] = entry["selected"] or ""
    if cascade["custom_village"]:
        data["village"] = OTHER_VILLAGE
    return data


@require_http_methods(["GET", "POST"])
def mandir_nirmaan_seva(request):
    client = client_for(request)
    receipt = None
    panel = None
    if request.method == "POST":
        changed = request.POST.get("changed_level")
        cascade = resolve_cascade(client, _selected_locations(request.POST), changed_level=changed)
        data = _with_cascade(request.POST, cascade)
        if changed:
            # dropdown refresh without JS: keep typed values, re-render options
            form = TempleDonationForm(initial=data.dict(), cascade=cascade)
        else:
            form = TempleDonationForm(data, cascade=cascade)
            if form.is_valid():
                payload = form.payload()
                try:
                    receipt = client.create_donation(payload)
                except TempleApiError as e:
                    logger.warning("Donation submit failed: %s", e)
                    form.add_error(None, "Error submitting donation. Please try again.")
                else:
                    analytics.track_donation(request, payload["amount"], payload["name"], "Mandir Nirmaan")
                    panel = payment_panel_context(
                        request, amount=payload["amount"], purpose="Mandir Nirmaan Seva",
                        name=payload["name"], mobile=payload["phone"],
                    )
                    cascade = resolve_cascade(client)
                    form = TempleDonationForm(cascade=cascade)
    else:
        cascade = resolve_cascade(client)
        form = TempleDonationForm(cascade=cascade)

    try:
        updates = client.public_updates() or []
    except TempleApiError as e:
        logger.warning("Public updates unavailable: %s", e)
        updates = []

    ctx = {
        "form": form,
        "cascade": cascade,
        "receipt": receipt,
        "panel": panel,
        "updates": updates if isinstance(updates, list) else [],
    }
    ctx.update(_stats_context(client))
    return render(request, "donations/mandir_nirmaan_seva.html", ctx)


@require_GET
def location_options(request, level):
    """JSON options for one cascade level, filtered by ``q``."""
    if level not in LEVELS:
        return HttpResponseBadRequest("Unknown location level")
    parent = (request.GET.get("parent") or "").strip()
    if level != "country" and not parent:
        return JsonResponse({"level": level, "options": []})
    try:
        options = fetch_options(client_for(request), level, parent or None)
    except TempleApiError as e:
        if level == "village":
            return JsonResponse({"level": level, "options": [], "custom": True})
        return JsonResponse({"error": e.message}, status=502)
    options = search_options(options, request.GET.get("q"))
    return JsonResponse({"level": level, "options": options, "custom": level == "village" and not options})


def _page_number(raw):
    try:
        page = int(raw)
    except (TypeError, ValueError):
        return 0
    return max(page, 0)


def donor_display(donation: dict) -> dict:
    district = donation.get("districtName")
    state = donation.get("stateName")
    if district and state:
        location = f"{district}, {state}"
    else:
        location = donation.get("city") or "N/A"
    return {
        "name": donation.get("name") or "Anonymous Devotee",
        "amount": donation.get("amount"),
        "location": location,
        "created_at": donation.get("createdAt"),
    }


@require_GET
def donor_list(request):
    page = _page_number(request.GET.get("page"))
    filters = {k: (request.GET.get(k) or "").strip() for k in DONOR_FILTERS}
    ctx = {"filters": filters, "page": page, "error": None, "rows": []}
    try:
        data = client_for(request).public_donations_page(page=page, size=DONOR_PAGE_SIZE, **filters) or {}
    except TempleApiError as e:
        logger.warning("Donor list unavailable: %s", e)
        ctx["error"] = "Failed to load donors. Please try again."
        return render(request, "donations/donor_list.html", ctx)

    donations = data.get("donations") or []
    total = int(data.get("totalElements") or 0)
    total_pages = int(data.get("totalPages") or 0)
    current = int(data.get("currentPage") or page)
    start = current * DONOR_PAGE_SIZE
    ctx.update({
        "rows": [
            {"number": start + i + 1, **donor_display(d)}
            for i, d in enumerate(donations)
        ],
        "page": current,
        "total": total,
        "total_pages": total_pages,
        "showing_from": start + 1 if donations else 0,
        "showing_to": start + len(donations),
        "has_prev": current > 0,
        "has_next": current + 1 < total_pages,
        "prev_page": current - 1,
        "next_page": current + 1,
        "last_page": max(total_pages - 1, 0),
        "query": urlencode({k: v for k, v in filters.items() if v}),
    })
    return render(request, "donations/donor_list.html", ctx)


def gallery_items(updates):
    items = []
    for update in updates if isinstance(updates, list) else []:
        if not isinstance(update, dict):
            continue
        urls = update.get("imageUrls") or []
        image = urls[0] if urls else update.get("imageUrl")
        if not image:
            continue
        items.append({
            "id": update.get("id"),
            "image": image,
            "title": update.get("title") or "Temple Construction",
            "message": update.get("message") or "",
            "created_at": update.get("createdAt"),
        })
    return items


@require_GET
def construction_gallery(request):
    try:
        items = gallery_items(client_for(request).update_images())
        error = None
    except TempleApiError as e:
        logger.warning("Construction images unavailable: %s", e)
        items, error = [], "Failed to load images. Please try again."

    index = 0
    if items:
        index = _page_number(request.GET.get("i")) % len(items)
    ctx = {
        "items": items,
        "error": error,
        "index": index,
        "current": items[index] if items else None,
        "prev_index": (index - 1) % len(items) if items else 0,
        "next_index": (index + 1) % len(items) if items else 0,
    }
    return render(request, "donations/gallery.html", ctx)
