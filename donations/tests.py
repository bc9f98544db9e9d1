from io import StringIO
from unittest.mock import Mock, patch

from django.core import mail
from django.core.cache import cache
from django.core.management import call_command
from django.test import TestCase, override_settings
from django.urls import reverse

from templeapi import TempleApiError

from .forms import PaymentConfirmationForm, TempleDonationForm, clean_indian_mobile
from .models import QueuedConfirmation
from .services import submit_confirmation
from .test_locations import fake_client


def confirmation_post(**overrides):
    data = {
        "amount": "501",
        "method": "UPI",
        "utr": " 123456789012 ",
        "name": "Ramesh",
        "mobile": "+91 98765 43210",
        "purpose": "Donation",
        "message": "",
    }
    data.update(overrides)
    return data


class MobileValidationTests(TestCase):
    def test_country_code_stripped(self):
        self.assertEqual(clean_indian_mobile("+91 98765-43210"), "9876543210")
        self.assertEqual(clean_indian_mobile("9876543210"), "9876543210")

    def test_invalid_numbers_rejected(self):
        form = PaymentConfirmationForm(data=confirmation_post(mobile="12345"))
        self.assertFalse(form.is_valid())
        self.assertIn("mobile", form.errors)
        form = PaymentConfirmationForm(data=confirmation_post(mobile="5876543210"))
        self.assertFalse(form.is_valid())

    def test_amount_and_utr_required(self):
        form = PaymentConfirmationForm(data=confirmation_post(amount="0", utr="   "))
        self.assertFalse(form.is_valid())
        self.assertIn("amount", form.errors)
        self.assertIn("utr", form.errors)

    def test_amount_is_not_rewritten(self):
        for raw in ("-500", "1e3", "12abc", "5.5.5", "Infinity"):
            form = PaymentConfirmationForm(data=confirmation_post(amount=raw))
            self.assertFalse(form.is_valid(), raw)
            self.assertEqual(form.errors["amount"], ["Please enter a valid amount"])

    def test_amount_digit_cap(self):
        form = PaymentConfirmationForm(data=confirmation_post(amount="1" + "0" * 27))
        self.assertFalse(form.is_valid())
        self.assertIn("amount", form.errors)
        form = PaymentConfirmationForm(data=confirmation_post(amount="10.555"))
        self.assertFalse(form.is_valid())
        form = PaymentConfirmationForm(data=confirmation_post(amount=" ₹ 1,25,000.50 "))
        self.assertTrue(form.is_valid(), form.errors)
        self.assertEqual(form.payload()["amount"], 125000.5)

    def test_payload_shape(self):
        form = PaymentConfirmationForm(data=confirmation_post(amount="₹1,001"))
        self.assertTrue(form.is_valid(), form.errors)
        self.assertEqual(
            form.payload(),
            {
                "amount": 1001.0,
                "method": "UPI",
                "utr": "123456789012",
                "name": "Ramesh",
                "mobile": "9876543210",
                "message": None,
                "purpose": "Donation",
            },
        )


class SubmitConfirmationTests(TestCase):
    def test_backend_down_queues_locally(self):
        client = Mock()
        client.confirm_donation.side_effect = TempleApiError("Backend request failed: refused")
        payload = {"amount": 100.0, "method": "UPI", "utr": "U1", "mobile": "9876543210", "purpose": "Donation"}

        with self.assertLogs("donations.services", level="WARNING"):
            result = submit_confirmation(client, payload)

        self.assertTrue(result["queued"])
        queued = QueuedConfirmation.objects.get()
        self.assertEqual(queued.utr, "U1")
        self.assertEqual(queued.payload["mobile"], "9876543210")

    def test_validation_error_is_raised(self):
        client = Mock()
        client.confirm_donation.side_effect = TempleApiError("Duplicate UTR", 400, {"error": "Duplicate UTR"})
        with self.assertRaises(TempleApiError):
            submit_confirmation(client, {"amount": 1.0, "utr": "U1", "mobile": "9876543210"})
        self.assertFalse(QueuedConfirmation.objects.exists())

    def test_screenshot_url_is_attached(self):
        client = Mock()
        client.upload_screenshot.return_value = {"url": "/uploads/s.png"}
        client.confirm_donation.return_value = {"id": 9}

        result = submit_confirmation(client, {"amount": 1.0, "utr": "U1", "mobile": "9876543210"}, screenshot=object())

        self.assertFalse(result["queued"])
        sent = client.confirm_donation.call_args.args[0]
        self.assertEqual(sent["transactionScreenshot"], "/uploads/s.png")


@override_settings(
    EMAIL_BACKEND="django.core.mail.backends.locmem.EmailBackend",
    CONFIRMATIONS_ADMIN_EMAILS="seva@example.org, SEVA@example.org, trust@example.org",
)
class ConfirmPaymentViewTests(TestCase):
    def test_success_redirects_and_notifies_admins(self):
        client = Mock()
        client.confirm_donation.return_value = {"id": 1, "status": "PENDING"}
        with patch("donations.views.client_for", return_value=client):
            resp = self.client.post(reverse("donations:confirm_payment"), confirmation_post(next="/donate/?tab=confirm"))

        self.assertRedirects(resp, "/donate/?tab=confirm", fetch_redirect_response=False)
        sent = client.confirm_donation.call_args.args[0]
        self.assertEqual(sent["mobile"], "9876543210")
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ["seva@example.org", "trust@example.org"])

    def test_backend_400_without_message_shows_hint(self):
        client = Mock()
        client.confirm_donation.side_effect = TempleApiError("Invalid data.", 400, {})
        with patch("donations.views.client_for", return_value=client):
            resp = self.client.post(reverse("donations:confirm_payment"), confirmation_post())

        self.assertEqual(resp.status_code, 200)
        self.assertContains(resp, "Please check your mobile number (10 digits) and UTR.")
        self.assertEqual(len(mail.outbox), 0)

    def test_backend_message_is_shown(self):
        client = Mock()
        client.confirm_donation.side_effect = TempleApiError("UTR already submitted", 400, {"error": "UTR already submitted"})
        with patch("donations.views.client_for", return_value=client):
            resp = self.client.post(reverse("donations:confirm_payment"), confirmation_post())
        self.assertContains(resp, "UTR already submitted")

    def test_external_next_is_ignored(self):
        client = Mock()
        client.confirm_donation.return_value = {"id": 1}
        with patch("donations.views.client_for", return_value=client):
            resp = self.client.post(reverse("donations:confirm_payment"), confirmation_post(next="https://evil.example/"))
        self.assertRedirects(resp, reverse("donations:donate"), fetch_redirect_response=False)


class DonatePageTests(TestCase):
    def test_get_shows_bank_details(self):
        resp = self.client.get(reverse("donations:donate"))
        self.assertContains(resp, "BKID0004980")
        self.assertContains(resp, "boism-9931690581@boi")

    def test_upi_post_builds_link_with_note(self):
        resp = self.client.post(reverse("donations:donate"), {"amount": "251", "name": "Sita", "app": "phonepe"})
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.context["pay_link"].startswith("phonepe://pay?"))
        self.assertIn("tn=Donation+-+Sita", resp.context["pay_link"])
        self.assertIn("<svg", resp.context["upi_qr"])

    def test_upi_post_rejects_oversized_amount(self):
        resp = self.client.post(reverse("donations:donate"), {"amount": "1" + "0" * 27, "app": "any"})
        self.assertEqual(resp.status_code, 200)
        self.assertNotIn("pay_link", resp.context)
        self.assertIn("amount", resp.context["upi_form"].errors)

    def test_upi_post_rejects_zero(self):
        resp = self.client.post(reverse("donations:donate"), {"amount": "0", "app": "any"})
        self.assertNotIn("pay_link", resp.context)
        self.assertTrue(resp.context["upi_form"].errors)


@override_settings(DEFAULT_LOCATION_PATH=["India", "Jharkhand", "Hazaribag", "Ichak", "Mangura"])
class MandirNirmaanSevaTests(TestCase):
    def setUp(self):
        cache.clear()
        self.api = fake_client()
        self.api.donation_stats.return_value = {"totalAmount": 250000, "targetAmount": 200000, "totalDonors": 12}
        self.api.public_updates.return_value = [{"id": 1, "title": "Foundation laid", "message": "Work started"}]

    def _post(self, **overrides):
        data = {
            "name": "Mohan", "email": "", "phone": "9876543210", "amount": "1100", "show_public": "on",
            "country": "2", "state": "11", "district": "111", "thana": "1110", "village": "6",
            "custom_village_name": "",
        }
        data.update(overrides)
        with patch("donations.views.client_for", return_value=self.api):
            return self.client.post(reverse("donations:mandir_nirmaan_seva"), data)

    def test_get_renders_progress_capped(self):
        with patch("donations.views.client_for", return_value=self.api):
            resp = self.client.get(reverse("donations:mandir_nirmaan_seva"))
        self.assertEqual(resp.context["progress_bar"], 100)
        self.assertContains(resp, "125.0%")
        self.assertEqual(resp.context["form"]["village"].value(), "6")

    def test_submit_sends_payload_and_shows_receipt(self):
        self.api.create_donation.return_value = {"id": 77, "name": "Mohan", "amount": 1100, "createdAt": "2024-05-01T10:00:00"}
        resp = self._post()

        payload = self.api.create_donation.call_args.args[0]
        self.assertEqual(payload["villageId"], 6)
        self.assertIsNone(payload["customVillageName"])
        self.assertIsNone(payload["email"])
        self.assertTrue(payload["showPublic"])
        self.assertEqual(resp.context["receipt"]["id"], 77)

    def test_custom_village_when_other(self):
        self.api.create_donation.return_value = {"id": 78, "name": "Mohan", "amount": 1100}
        self._post(village="OTHER", custom_village_name="  Kariyatpur ")
        payload = self.api.create_donation.call_args.args[0]
        self.assertIsNone(payload["villageId"])
        self.assertEqual(payload["customVillageName"], "Kariyatpur")

    def test_stale_state_falls_back_to_default_path(self):
        self.api.create_donation.return_value = {"id": 79, "name": "Mohan", "amount": 1100}
        resp = self._post(state="99", district="100", thana="1000", village="5")

        self.assertFalse(resp.context["form"].errors)
        payload = self.api.create_donation.call_args.args[0]
        self.assertEqual(
            (payload["countryId"], payload["stateId"], payload["districtId"], payload["thanaId"], payload["villageId"]),
            (2, 11, 111, 1110, 6),
        )
        self.assertEqual(resp.context["receipt"]["id"], 79)

    def test_village_or_custom_required(self):
        resp = self._post(village="OTHER", custom_village_name="")
        self.assertContains(resp, "Please select a village or enter a custom village name.")
        self.api.create_donation.assert_not_called()

    def test_amount_minimum(self):
        resp = self._post(amount="0")
        self.assertIn("amount", resp.context["form"].errors)


class DonorListTests(TestCase):
    def test_rows_numbering_and_fallbacks(self):
        api = Mock()
        api.public_donations_page.return_value = {
            "donations": [
                {"name": "", "amount": 500, "districtName": "Hazaribag", "stateName": "Jharkhand"},
                {"name": "Gita", "amount": 1000, "city": "Ranchi"},
                {"name": "Hari", "amount": 10},
            ],
            "currentPage": 1,
            "totalPages": 3,
            "totalElements": 43,
        }
        with patch("donations.views.client_for", return_value=api):
            resp = self.client.get(reverse("donations:donor_list"), {"page": "1", "name": "a"})

        rows = resp.context["rows"]
        self.assertEqual([r["number"] for r in rows], [21, 22, 23])
        self.assertEqual(rows[0]["name"], "Anonymous Devotee")
        self.assertEqual(rows[0]["location"], "Hazaribag, Jharkhand")
        self.assertEqual(rows[1]["location"], "Ranchi")
        self.assertEqual(rows[2]["location"], "N/A")
        self.assertTrue(resp.context["has_prev"])
        self.assertTrue(resp.context["has_next"])
        api.public_donations_page.assert_called_once_with(page=1, size=20, name="a", stateId="", district="", thana="", village="")

    def test_backend_error_shows_message(self):
        api = Mock()
        api.public_donations_page.side_effect = TempleApiError("down")
        with patch("donations.views.client_for", return_value=api):
            with self.assertLogs("donations.views", level="WARNING"):
                resp = self.client.get(reverse("donations:donor_list"))
        self.assertContains(resp, "Failed to load donors")


class GalleryTests(TestCase):
    def test_items_and_wraparound(self):
        api = Mock()
        api.update_images.return_value = [
            {"id": 1, "imageUrls": ["/u/1a.jpg", "/u/1b.jpg"], "title": "Pillars"},
            {"id": 2, "imageUrl": "/u/2.jpg"},
            {"id": 3, "title": "No image"},
        ]
        with patch("donations.views.client_for", return_value=api):
            resp = self.client.get(reverse("donations:gallery"), {"i": "1"})

        items = resp.context["items"]
        self.assertEqual([i["image"] for i in items], ["/u/1a.jpg", "/u/2.jpg"])
        self.assertEqual(items[1]["title"], "Temple Construction")
        self.assertEqual(resp.context["next_index"], 0)
        self.assertEqual(resp.context["prev_index"], 0)


class LocationOptionsViewTests(TestCase):
    def setUp(self):
        cache.clear()

    def test_search_filters_options(self):
        with patch("donations.views.client_for", return_value=fake_client()):
            resp = self.client.get(reverse("donations:location_options", args=["village"]), {"parent": "1110", "q": "man"})
        self.assertEqual(resp.json()["options"], [{"id": "6", "name": "Mangura"}])

    def test_unknown_level(self):
        resp = self.client.get(reverse("donations:location_options", args=["planet"]))
        self.assertEqual(resp.status_code, 400)

    def test_missing_parent_is_empty(self):
        resp = self.client.get(reverse("donations:location_options", args=["state"]))
        self.assertEqual(resp.json()["options"], [])


class ForwardQueuedConfirmationsCommandTests(TestCase):
    def _queue(self, utr):
        return QueuedConfirmation.objects.create(
            amount=100, utr=utr, mobile="9876543210",
            payload={"amount": 100.0, "utr": utr, "mobile": "9876543210", "method": "UPI"},
        )

    def test_sends_and_marks(self):
        self._queue("A1")
        rejected = self._queue("A2")
        api = Mock()
        api.confirm_donation.side_effect = [{"id": 1}, TempleApiError("Duplicate UTR", 400)]
        out = StringIO()
        with patch("donations.management.commands.forward_queued_confirmations.TempleApiClient", return_value=api):
            call_command("forward_queued_confirmations", stdout=out)

        self.assertEqual(QueuedConfirmation.objects.get(utr="A1").status, "SENT")
        rejected.refresh_from_db()
        self.assertEqual(rejected.status, "FAILED")
        self.assertIn("Checked 2, sent 1 confirmations.", out.getvalue())

    def test_stops_when_backend_down(self):
        self._queue("B1")
        self._queue("B2")
        api = Mock()
        api.confirm_donation.side_effect = TempleApiError("refused")
        out = StringIO()
        with patch("donations.management.commands.forward_queued_confirmations.TempleApiClient", return_value=api):
            call_command("forward_queued_confirmations", stdout=out)
        self.assertEqual(api.confirm_donation.call_count, 1)
        self.assertEqual(QueuedConfirmation.objects.filter(status="QUEUED").count(), 2)


class TempleDonationFormTests(TestCase):
    def test_phone_required(self):
        form = TempleDonationForm(data={"name": "A", "phone": "  ", "amount": "5", "custom_village_name": "X"})
        self.assertFalse(form.is_valid())
        self.assertIn("phone", form.errors)
