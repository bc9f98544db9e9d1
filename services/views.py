import logging

from django.conf import settings
from django.shortcuts import render
from django.views.decorators.http import require_http_methods

from donations.views import payment_panel_context
from durgamandir import analytics
from templeapi import TempleApiError, client_for

from . import catalog
from .forms import (
    AbhishekamForm,
    FlowerOfferingForm,
    MorningAartiForm,
    PrasadSponsorshipForm,
    SankalpamForm,
    SevaBookingForm,
    SpecialPujaForm,
)

logger = logging.getLogger(__name__)


def _submit(request, form, send, service_name, error_text, amount=None):
    """POST the form payload with ``send``; returns the backend response or None."""
    try:
        result = send(client_for(request), form.payload())
    except TempleApiError as e:
        logger.warning("%s submission failed: %s", service_name, e)
        backend_error = e.payload.get("error") if isinstance(e.payload, dict) else None
        form.add_error(None, backend_error or error_text)
        return None
    analytics.track_service_booking(request, service_name, amount)
    return result if result is not None else {}


def _service_page(request, form_class, send, template, service_name, success_text, error_text, extra=None):
    success = None
    if request.method == "POST":
        form = form_class(request.POST)
        if form.is_valid() and _submit(request, form, send, service_name, error_text) is not None:
            success = success_text
            form = form_class()
    else:
        form = form_class()
    ctx = {"form": form, "success": success}
    ctx.update(extra or {})
    return render(request, template, ctx)


def services_index(request):
    return render(request, "services/index.html", {"pujas": catalog.SPECIAL_PUJAS})


@require_http_methods(["GET", "POST"])
def seva_booking(request):
    success = None
    panel = None
    if request.method == "POST":
        form = SevaBookingForm(request.POST)
        if form.is_valid():
            seva = catalog.seva_by_name(form.cleaned_data["seva_name"])
            amount = seva["amount"] if seva else None
            if _submit(request, form, lambda c, p: c.book_seva(p), form.cleaned_data["seva_name"],
                       "Failed to book seva. Please try again.", amount) is not None:
                success = "Your seva booking has been received. Please complete the payment below."
                contact = form.cleaned_data["phone_or_email"]
                panel = payment_panel_context(
                    request, amount=amount, purpose=f"Seva Booking - {form.cleaned_data['seva_name']}",
                    name=form.cleaned_data["devotee_name"], mobile=contact if "@" not in contact else "",
                )
                form = SevaBookingForm()
    else:
        form = SevaBookingForm(initial={"seva_name": request.GET.get("seva") or catalog.SEVAS[0]["name"]})
    ctx = {"form": form, "sevas": catalog.SEVAS, "success": success, "panel": panel}
    return render(request, "services/seva_booking.html", ctx)


@require_http_methods(["GET", "POST"])
def prasad_distribution(request):
    return _service_page(
        request, PrasadSponsorshipForm, lambda c, p: c.sponsor_prasad(p),
        "services/prasad.html", "Prasad Sponsorship",
        "Thank you! Your prasad sponsorship request has been received.",
        "Failed to submit sponsorship. Please try again.",
        extra={
            "todays_prasad": getattr(settings, "TODAYS_PRASAD", "Suji Halwa"),
            "distribution_time": catalog.PRASAD_DISTRIBUTION_TIME,
        },
    )


@require_http_methods(["GET", "POST"])
def daily_puja(request):
    return _service_page(
        request, SankalpamForm, lambda c, p: c.submit_sankalpam(p),
        "services/daily_puja.html", "Daily Puja Sankalpam",
        "Your sankalpam has been submitted. It will be offered in the daily puja.",
        "Failed to submit sankalpam. Please try again.",
        extra={"timings": catalog.DAILY_TIMINGS},
    )


@require_http_methods(["GET", "POST"])
def special_puja(request):
    selected = catalog.puja_by_key(request.POST.get("puja_type") or request.GET.get("type") or "")
    return _service_page(
        request, SpecialPujaForm, lambda c, p: c.book_special_puja(p),
        "services/special_puja.html", "Special Puja",
        "Your special puja booking has been received. The temple will contact you to confirm.",
        "Failed to book puja. Please try again.",
        extra={"pujas": catalog.SPECIAL_PUJAS, "selected_puja": selected, "time_slots": catalog.TIME_SLOTS},
    )


@require_http_methods(["GET", "POST"])
def morning_aarti(request):
    return _service_page(
        request, MorningAartiForm, lambda c, p: c.book_morning_aarti(p),
        "services/morning_aarti.html", "Morning Aarti",
        "Your visit has been registered. We look forward to seeing you at the aarti.",
        "Failed to register visit. Please try again.",
        extra={"timings": catalog.MORNING_AARTI_TIMINGS},
    )


@require_http_methods(["GET", "POST"])
def abhishekam(request):
    return _service_page(
        request, AbhishekamForm, lambda c, p: c.book_abhishekam(p),
        "services/abhishekam.html", "Abhishekam",
        "Your abhishekam booking has been received.",
        "Failed to book abhishekam. Please try again.",
        extra={"schedule": catalog.ABHISHEKAM_SCHEDULE},
    )


@require_http_methods(["GET", "POST"])
def flower_offering(request):
    return _service_page(
        request, FlowerOfferingForm, lambda c, p: c.offer_flowers(p),
        "services/flowers.html", "Flower Offering",
        "Thank you! Your flower offering has been registered.",
        "Failed to submit offering. Please try again.",
    )
