import datetime
from unittest.mock import Mock, patch

from django.test import TestCase
from django.urls import reverse
from django.utils import timezone

from templeapi import TempleApiError

from .forms import AbhishekamForm, MorningAartiForm, SevaBookingForm, SpecialPujaForm


def _day(offset):
    return (timezone.localdate() + datetime.timedelta(days=offset)).isoformat()


class FormValidationTests(TestCase):
    def test_seva_booking_rejects_past_date(self):
        form = SevaBookingForm(data={
            "seva_name": "Vastra Seva", "booking_date": _day(-1),
            "devotee_name": "Asha", "phone_or_email": "asha@example.org",
        })
        self.assertFalse(form.is_valid())
        self.assertIn("booking_date", form.errors)

    def test_seva_booking_payload(self):
        form = SevaBookingForm(data={
            "seva_name": "Deep Seva (Lighting Lamps)", "booking_date": _day(0),
            "devotee_name": " Asha ", "gotra": "", "phone_or_email": "9876543210",
            "special_intentions": "Family health",
        })
        self.assertTrue(form.is_valid(), form.errors)
        self.assertEqual(form.payload(), {
            "sevaName": "Deep Seva (Lighting Lamps)",
            "bookingDate": _day(0),
            "devoteeName": "Asha",
            "gotra": None,
            "phoneOrEmail": "9876543210",
            "specialIntentions": "Family health",
        })

    def test_special_puja_requires_slot_and_intention(self):
        form = SpecialPujaForm(data={"puja_type": "navgrah", "devotee_name": "Ravi", "preferred_date": _day(3)})
        self.assertFalse(form.is_valid())
        self.assertIn("time_slot", form.errors)
        self.assertIn("intention", form.errors)

    def test_morning_aarti_allows_any_date(self):
        form = MorningAartiForm(data={"name": "Ravi", "visit_date": _day(-2), "family_members": "3"})
        self.assertTrue(form.is_valid(), form.errors)
        self.assertEqual(form.payload()["familyMembers"], 3)

    def test_abhishekam_date_not_past(self):
        form = AbhishekamForm(data={"name": "Ravi", "preferred_date": _day(-1)})
        self.assertFalse(form.is_valid())


class ServiceViewTests(TestCase):
    def test_seva_booking_success_shows_payment_panel(self):
        api = Mock()
        api.book_seva.return_value = {"id": 4}
        with patch("services.views.client_for", return_value=api):
            resp = self.client.post(reverse("services:seva_booking"), {
                "seva_name": "Annapurna Seva", "booking_date": _day(1),
                "devotee_name": "Kavita", "phone_or_email": "9876543210",
            })

        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.context["success"])
        panel = resp.context["panel"]
        self.assertIn("am=1000", panel["upi_link"])
        self.assertEqual(panel["confirm_form"].initial["purpose"], "Seva Booking - Annapurna Seva")
        self.assertEqual(panel["confirm_form"].initial["mobile"], "9876543210")

    def test_backend_error_message_is_shown(self):
        api = Mock()
        api.sponsor_prasad.side_effect = TempleApiError("bad", 400, {"error": "Date already full"})
        with patch("services.views.client_for", return_value=api):
            with self.assertLogs("services.views", level="WARNING"):
                resp = self.client.post(reverse("services:prasad"), {"name": "Mira", "preferred_date": _day(2)})
        self.assertContains(resp, "Date already full")
        self.assertIsNone(resp.context["success"])

    def test_generic_error_when_backend_down(self):
        api = Mock()
        api.submit_sankalpam.side_effect = TempleApiError("Backend request failed: timeout")
        with patch("services.views.client_for", return_value=api):
            with self.assertLogs("services.views", level="WARNING"):
                resp = self.client.post(reverse("services:daily_puja"), {"full_name": "Mira", "prayer": "Peace"})
        self.assertContains(resp, "Failed to submit sankalpam. Please try again.")

    def test_sankalpam_payload(self):
        api = Mock()
        api.submit_sankalpam.return_value = {}
        with patch("services.views.client_for", return_value=api):
            resp = self.client.post(reverse("services:daily_puja"), {"full_name": "Mira", "city": "Ichak", "prayer": "Peace"})
        api.submit_sankalpam.assert_called_once_with({"fullName": "Mira", "gotra": None, "city": "Ichak", "prayer": "Peace"})
        self.assertTrue(resp.context["success"])

    def test_pages_render(self):
        for name in ("index", "seva_booking", "prasad", "daily_puja", "special_puja", "morning_aarti", "abhishekam", "flowers"):
            resp = self.client.get(reverse(f"services:{name}"))
            self.assertEqual(resp.status_code, 200, name)

    def test_prasad_page_shows_todays_prasad(self):
        resp = self.client.get(reverse("services:prasad"))
        self.assertContains(resp, "Suji Halwa")
