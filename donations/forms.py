import re
from decimal import Decimal

from django import forms
from django.core.exceptions import ValidationError
from django.core.validators import DecimalValidator

from .locations import LEVELS, OTHER_VILLAGE

MOBILE_RE = re.compile(r"^[6-9]\d{9}$")
AMOUNT_RE = re.compile(r"^(\d+(\.\d*)?|\.\d+)$")
AMOUNT_MAX_DIGITS = 12
METHOD_CHOICES = [("UPI", "UPI"), ("Bank Transfer", "Bank Transfer")]


def clean_indian_mobile(raw: str) -> str:
    """10-digit Indian mobile from user input; a +91 / 91 prefix is dropped."""
    digits = re.sub(r"\D", "", raw or "")
    if len(digits) == 12 and digits.startswith("91"):
        digits = digits[2:]
    if not MOBILE_RE.match(digits):
        raise ValidationError("Please enter a valid 10-digit mobile number")
    return digits


def _amount_from(raw, minimum=Decimal("0")):
    # only the rupee sign, thousands separators and spaces are dropped
    clean = re.sub(r"[₹,\s]", "", str(raw or ""))
    if not AMOUNT_RE.match(clean):
        raise ValidationError("Please enter a valid amount")
    amount = Decimal(clean)
    if amount <= minimum:
        raise ValidationError("Please enter a valid amount")
    DecimalValidator(AMOUNT_MAX_DIGITS, 2)(amount)
    return amount


class PaymentConfirmationForm(forms.Form):
    amount = forms.CharField(widget=forms.TextInput(attrs={"class": "form-control", "inputmode": "decimal"}))
    method = forms.ChoiceField(choices=METHOD_CHOICES, initial="UPI", widget=forms.Select(attrs={"class": "form-select"}))
    utr = forms.CharField(label="UTR / Transaction ID", max_length=64, widget=forms.TextInput(attrs={"class": "form-control"}))
    name = forms.CharField(max_length=128, required=False, widget=forms.TextInput(attrs={"class": "form-control"}))
    mobile = forms.CharField(max_length=16, widget=forms.TextInput(attrs={"class": "form-control", "inputmode": "tel"}))
    purpose = forms.CharField(max_length=128, required=False, widget=forms.HiddenInput())
    message = forms.CharField(required=False, widget=forms.Textarea(attrs={"class": "form-control", "rows": 2}))
    screenshot = forms.ImageField(required=False, widget=forms.ClearableFileInput(attrs={"class": "form-control"}))

    def clean_amount(self):
        return _amount_from(self.cleaned_data.get("amount"))

    def clean_utr(self):
        utr = (self.cleaned_data.get("utr") or "").strip()
        if not utr:
            raise ValidationError("Please enter UTR/Transaction ID")
        return utr

    def clean_mobile(self):
        return clean_indian_mobile(self.cleaned_data.get("mobile"))

    def payload(self, screenshot_url=None) -> dict:
        data = self.cleaned_data
        payload = {
            "amount": float(data["amount"]),
            "method": data["method"],
            "utr": data["utr"],
            "name": data.get("name") or None,
            "mobile": data["mobile"],
            "message": data.get("message") or None,
            "purpose": data.get("purpose") or "Donation",
        }
        if screenshot_url:
            payload["transactionScreenshot"] = screenshot_url
        return payload


class UpiPayForm(forms.Form):
    amount = forms.CharField(widget=forms.TextInput(attrs={"class": "form-control", "inputmode": "decimal"}))
    name = forms.CharField(max_length=128, required=False, widget=forms.TextInput(attrs={"class": "form-control"}))
    mobile = forms.CharField(max_length=16, required=False, widget=forms.TextInput(attrs={"class": "form-control"}))
    app = forms.CharField(required=False, widget=forms.HiddenInput())

    def clean_amount(self):
        return _amount_from(self.cleaned_data.get("amount"))

    def note(self) -> str:
        who = self.cleaned_data.get("name") or self.cleaned_data.get("mobile")
        return f"Donation - {who}" if who else "Donation"


class TempleDonationForm(forms.Form):
    name = forms.CharField(max_length=128, widget=forms.TextInput(attrs={"class": "form-control"}))
    email = forms.EmailField(required=False, widget=forms.EmailInput(attrs={"class": "form-control"}))
    phone = forms.CharField(max_length=16, widget=forms.TextInput(attrs={"class": "form-control", "inputmode": "tel"}))
    amount = forms.DecimalField(min_value=1, max_digits=AMOUNT_MAX_DIGITS, decimal_places=2, widget=forms.NumberInput(attrs={"class": "form-control", "min": "1"}))
    show_public = forms.BooleanField(required=False, initial=True, widget=forms.CheckboxInput(attrs={"class": "form-check-input"}))
    country = forms.ChoiceField(choices=[], widget=forms.Select(attrs={"class": "form-select", "data-level": "country"}))
    state = forms.ChoiceField(choices=[], widget=forms.Select(attrs={"class": "form-select", "data-level": "state"}))
    district = forms.ChoiceField(choices=[], widget=forms.Select(attrs={"class": "form-select", "data-level": "district"}))
    thana = forms.ChoiceField(choices=[], widget=forms.Select(attrs={"class": "form-select", "data-level": "thana"}))
    village = forms.ChoiceField(choices=[], required=False, widget=forms.Select(attrs={"class": "form-select", "data-level": "village"}))
    custom_village_name = forms.CharField(max_length=128, required=False, widget=forms.TextInput(attrs={"class": "form-control"}))

    def __init__(self, *args, cascade=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.cascade = cascade
        if cascade:
            for entry in cascade["levels"]:
                choices = [(o["id"], o["name"]) for o in entry["options"]]
                if entry["level"] == "village":
                    choices = [("", "")] + choices + [(OTHER_VILLAGE, "Other")]
                self.fields[entry["level"]].choices = choices
                if not self.is_bound:
                    self.fields[entry["level"]].initial = entry["selected"] or (
                        OTHER_VILLAGE if entry["level"] == "village" and cascade["custom_village"] else ""
                    )

    def clean_name(self):
        return self.cleaned_data["name"].strip()

    def clean_phone(self):
        phone = (self.cleaned_data.get("phone") or "").strip()
        if not phone:
            raise ValidationError("This field is required.")
        return phone

    def clean(self):
        cleaned = super().clean()
        village = cleaned.get("village")
        custom = (cleaned.get("custom_village_name") or "").strip()
        if village == OTHER_VILLAGE:
            village = ""
        if not village and not custom:
            raise ValidationError("Please select a village or enter a custom village name.")
        cleaned["village"] = village
        cleaned["custom_village_name"] = custom
        return cleaned

    def payload(self) -> dict:
        data = self.cleaned_data
        ids = {f"{level}Id": _as_int(data.get(level)) for level in LEVELS}
        return {
            "name": data["name"],
            "email": data.get("email") or None,
            "phone": data["phone"],
            "amount": float(data["amount"]),
            "showPublic": bool(data.get("show_public")),
            **ids,
            "customVillageName": None if ids["villageId"] else data["custom_village_name"],
        }


def _as_int(value):
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
