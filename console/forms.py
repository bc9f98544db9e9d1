from decimal import Decimal, InvalidOperation

from django import forms
from django.core.exceptions import ValidationError

from donations.upi import format_amount


def _text(required=True, max_length=255, label=None, **attrs):
    return forms.CharField(
        required=required, max_length=max_length, label=label,
        widget=forms.TextInput(attrs={"class": "form-control", **attrs}),
    )


def _textarea(required=True, rows=3, label=None):
    return forms.CharField(
        required=required, label=label,
        widget=forms.Textarea(attrs={"class": "form-control", "rows": rows}),
    )


def _blank_to_none(value):
    if isinstance(value, str):
        value = value.strip()
    return value or None


class LoginForm(forms.Form):
    user_id = _text(max_length=150, label="User ID", autocomplete="username")
    password = forms.CharField(widget=forms.PasswordInput(attrs={"class": "form-control", "autocomplete": "current-password"}))


class SignupForm(forms.Form):
    user_id = _text(max_length=150, label="User ID", autocomplete="username")
    password1 = forms.CharField(
        label="Password", min_length=6,
        widget=forms.PasswordInput(attrs={"class": "form-control", "autocomplete": "new-password"}),
    )
    password2 = forms.CharField(
        label="Confirm password",
        widget=forms.PasswordInput(attrs={"class": "form-control", "autocomplete": "new-password"}),
    )

    def clean(self):
        cleaned = super().clean()
        if cleaned.get("password1") and cleaned.get("password2") and cleaned["password1"] != cleaned["password2"]:
            self.add_error("password2", "Passwords do not match.")
        return cleaned


class NoteForm(forms.Form):
    """Admin note sent with a verify / reject decision."""

    action = forms.ChoiceField(choices=[("verify", "Verify"), ("reject", "Reject")], widget=forms.HiddenInput)
    admin_note = forms.CharField(
        required=False, label="Admin Note",
        widget=forms.Textarea(attrs={"class": "form-control", "rows": 3}),
    )

    def clean_admin_note(self):
        note = (self.cleaned_data.get("admin_note") or "").strip()
        if not note:
            raise ValidationError("Admin Note is required. Please add a note before verifying or rejecting.")
        return note


class UpdateForm(forms.Form):
    title = _text()
    message = _textarea(rows=5)
    image_url = forms.URLField(
        required=False, label="Image URL", assume_scheme="https",
        widget=forms.URLInput(attrs={"class": "form-control"}),
    )
    image = forms.ImageField(required=False, widget=forms.ClearableFileInput(attrs={"class": "form-control"}))

    def payload(self, image_url=None) -> dict:
        data = self.cleaned_data
        return {
            "title": data["title"].strip(),
            "message": data["message"].strip(),
            "imageUrl": image_url or _blank_to_none(data.get("image_url")),
        }


class ExpenseForm(forms.Form):
    description = _text()
    amount = forms.DecimalField(
        min_value=Decimal("0.01"), max_digits=12, decimal_places=2,
        widget=forms.NumberInput(attrs={"class": "form-control", "step": "0.01", "min": "0.01"}),
    )
    category = _text(required=False, max_length=100)
    notes = _textarea(required=False)
    purchase_date = forms.DateField(
        widget=forms.DateInput(attrs={"class": "form-control", "type": "date"}, format="%Y-%m-%d"),
    )
    supporting_document = forms.URLField(
        required=False, label="Supporting document URL", assume_scheme="https",
        widget=forms.URLInput(attrs={"class": "form-control"}),
    )
    document = forms.FileField(
        required=False, label="Upload supporting document",
        widget=forms.ClearableFileInput(attrs={"class": "form-control"}),
    )

    def __init__(self, *args, max_amount=None, **kwargs):
        """``max_amount`` is the remaining balance available to this expense."""
        super().__init__(*args, **kwargs)
        self.max_amount = max_amount

    def clean_amount(self):
        amount = self.cleaned_data["amount"]
        if self.max_amount is not None and amount > self.max_amount:
            raise ValidationError(
                f"Amount exceeds remaining balance. Maximum allowed: ₹{format_amount(self.max_amount, fixed=True)}"
            )
        return amount

    def payload(self, document_url=None) -> dict:
        data = self.cleaned_data
        return {
            "description": data["description"].strip(),
            "amount": float(data["amount"]),
            "category": _blank_to_none(data.get("category")),
            "notes": _blank_to_none(data.get("notes")),
            "purchaseDate": data["purchase_date"].isoformat(),
            "supportingDocument": document_url or _blank_to_none(data.get("supporting_document")),
        }


def remaining_balance(stats, current_amount=None):
    """Budget left for an expense; adds back the amount of the one being edited."""
    if not isinstance(stats, dict) or stats.get("remaining") is None:
        return None
    try:
        remaining = Decimal(str(stats["remaining"]))
        if current_amount not in (None, ""):
            remaining += Decimal(str(current_amount))
    except InvalidOperation:
        return None
    return remaining


# (form field, label) pairs; Hindi input is ``<field>_hi``
EVENT_FIELDS = (
    ("name", "Event Name"),
    ("date_range", "Date Range"),
    ("short_description", "Short Description"),
    ("morning_schedule", "Morning Schedule"),
    ("afternoon_schedule", "Afternoon Schedule"),
    ("evening_schedule", "Evening Schedule"),
)
EVENT_KEYS = {
    "name": "name",
    "date_range": "dateRange",
    "short_description": "shortDescription",
    "morning_schedule": "morningSchedule",
    "afternoon_schedule": "afternoonSchedule",
    "evening_schedule": "eveningSchedule",
}
EVENT_INCOMPLETE = "Please fill in all required fields in at least one language."


class EventForm(forms.Form):
    """English and Hindi event text; each field needs at least one language."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        for field, label in EVENT_FIELDS:
            multiline = field == "short_description"
            self.fields[field] = _textarea(required=False, label=label) if multiline else _text(required=False, label=label)
            self.fields[f"{field}_hi"] = (
                _textarea(required=False, label=f"{label} (Hindi)") if multiline
                else _text(required=False, label=f"{label} (Hindi)")
            )

    def clean(self):
        cleaned = super().clean()
        missing = False
        for field, label in EVENT_FIELDS:
            en = (cleaned.get(field) or "").strip()
            hi = (cleaned.get(f"{field}_hi") or "").strip()
            if not en and not hi:
                self.add_error(field, f"Please provide {label} in either English or Hindi (or both)")
                missing = True
        if missing:
            raise ValidationError(EVENT_INCOMPLETE)
        return cleaned

    def payload(self) -> dict:
        body = {}
        for field, key in EVENT_KEYS.items():
            body[key] = (self.cleaned_data.get(field) or "").strip()
            body[f"{key}Hi"] = (self.cleaned_data.get(f"{field}_hi") or "").strip()
        return body

    @staticmethod
    def initial_for(event: dict) -> dict:
        """Form initial data from a backend event (schedule maps are nested)."""
        schedule = event.get("schedule") or {}
        schedule_hi = event.get("scheduleHi") or {}
        initial = {
            "name": event.get("name") or "",
            "name_hi": event.get("nameHi") or "",
            "date_range": event.get("dateRange") or "",
            "date_range_hi": event.get("dateRangeHi") or "",
            "short_description": event.get("shortDescription") or "",
            "short_description_hi": event.get("shortDescriptionHi") or "",
        }
        for part in ("morning", "afternoon", "evening"):
            initial[f"{part}_schedule"] = schedule.get(part) or ""
            initial[f"{part}_schedule_hi"] = schedule_hi.get(part) or ""
        return initial


class EventMediaForm(forms.Form):
    file = forms.FileField(widget=forms.ClearableFileInput(attrs={"class": "form-control", "accept": "image/*,video/*"}))


class TeamMemberForm(forms.Form):
    name = _text()
    position = _text()
    mobile_number = _text(required=False, max_length=20, label="Mobile number")
    display_order = forms.IntegerField(
        required=False, min_value=0,
        widget=forms.NumberInput(attrs={"class": "form-control", "min": "0"}),
    )
    image = forms.ImageField(required=False, widget=forms.ClearableFileInput(attrs={"class": "form-control"}))

    def __init__(self, *args, editing=False, **kwargs):
        super().__init__(*args, **kwargs)
        self.editing = editing

    def clean_image(self):
        image = self.cleaned_data.get("image")
        if not image and not self.editing:
            raise ValidationError("Image is required when adding a new team member")
        return image

    def fields_payload(self, default_order=0) -> dict:
        data = self.cleaned_data
        order = data.get("display_order")
        return {
            "name": data["name"].strip(),
            "position": data["position"].strip(),
            "mobileNumber": (data.get("mobile_number") or "").strip(),
            "displayOrder": order if order is not None else default_order,
        }
