from django import forms
from django.core.exceptions import ValidationError
from django.utils import timezone

from .catalog import SEVAS, SPECIAL_PUJAS, TIME_SLOTS

DATE_WIDGET = forms.DateInput(attrs={"class": "form-control", "type": "date"}, format="%Y-%m-%d")


def not_in_past(value):
    if value and value < timezone.localdate():
        raise ValidationError("Please select a date that is not in the past.")


def _text(required=True, max_length=128, label=None, **attrs):
    return forms.CharField(
        required=required, max_length=max_length, label=label,
        widget=forms.TextInput(attrs={"class": "form-control", **attrs}),
    )


def _textarea(required=True, rows=3):
    return forms.CharField(required=required, widget=forms.Textarea(attrs={"class": "form-control", "rows": rows}))


def _date(future_only=True):
    return forms.DateField(widget=DATE_WIDGET, validators=[not_in_past] if future_only else [])


def _family_members():
    return forms.IntegerField(
        required=False, min_value=1,
        widget=forms.NumberInput(attrs={"class": "form-control", "min": "1"}),
    )


class ServiceForm(forms.Form):
    """Form whose cleaned data maps onto a backend JSON body."""

    field_map = {}

    def payload(self) -> dict:
        body = {}
        for field, key in self.field_map.items():
            value = self.cleaned_data.get(field)
            if hasattr(value, "isoformat"):
                value = value.isoformat()
            elif isinstance(value, str):
                value = value.strip()
            body[key] = None if value == "" else value
        return body


class SevaBookingForm(ServiceForm):
    seva_name = forms.ChoiceField(
        choices=[(s["name"], s["name"]) for s in SEVAS],
        widget=forms.Select(attrs={"class": "form-select"}),
    )
    booking_date = _date()
    devotee_name = _text()
    gotra = _text(required=False)
    phone_or_email = _text(label="Phone or Email")
    special_intentions = _textarea(required=False)

    field_map = {
        "seva_name": "sevaName",
        "booking_date": "bookingDate",
        "devotee_name": "devoteeName",
        "gotra": "gotra",
        "phone_or_email": "phoneOrEmail",
        "special_intentions": "specialIntentions",
    }


class PrasadSponsorshipForm(ServiceForm):
    name = _text()
    occasion = _text(required=False)
    preferred_date = _date()

    field_map = {"name": "name", "occasion": "occasion", "preferred_date": "preferredDate"}


class SankalpamForm(ServiceForm):
    full_name = _text()
    gotra = _text(required=False)
    city = _text(required=False)
    prayer = _textarea()

    field_map = {"full_name": "fullName", "gotra": "gotra", "city": "city", "prayer": "prayer"}


class SpecialPujaForm(ServiceForm):
    puja_type = forms.ChoiceField(
        choices=[(p["key"], p["name"]) for p in SPECIAL_PUJAS],
        widget=forms.Select(attrs={"class": "form-select"}),
    )
    devotee_name = _text()
    gotra = _text(required=False)
    city = _text(required=False)
    preferred_date = _date()
    time_slot = forms.ChoiceField(choices=TIME_SLOTS, widget=forms.RadioSelect)
    intention = _textarea()

    field_map = {
        "puja_type": "pujaType",
        "devotee_name": "devoteeName",
        "gotra": "gotra",
        "city": "city",
        "preferred_date": "preferredDate",
        "time_slot": "timeSlot",
        "intention": "intention",
    }


class MorningAartiForm(ServiceForm):
    name = _text()
    visit_date = _date(future_only=False)
    family_members = _family_members()

    field_map = {"name": "name", "visit_date": "visitDate", "family_members": "familyMembers"}


class AbhishekamForm(ServiceForm):
    name = _text()
    gotra = _text(required=False)
    preferred_date = _date()
    family_members = _family_members()

    field_map = {
        "name": "name",
        "gotra": "gotra",
        "preferred_date": "preferredDate",
        "family_members": "familyMembers",
    }


class FlowerOfferingForm(ServiceForm):
    name = _text()
    date = _date(future_only=False)
    flower_type = _text(required=False)

    field_map = {"name": "name", "date": "date", "flower_type": "flowerType"}
