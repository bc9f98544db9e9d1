from unittest.mock import Mock, patch

from django.test import TestCase
from django.urls import reverse

from console.views import NOTIFY_SESSION_KEY, location_text
from durgamandir.middleware import CONSOLE_USER_KEY
from templeapi import TempleApiError
from templeapi.client import SESSION_COOKIES_KEY

from .helpers import ConsoleTestMixin


class LoginTests(TestCase):
    def setUp(self):
        self.api = Mock()
        self.api.cookies.return_value = {"JSESSIONID": "s1"}
        patcher = patch("console.views.client_for", return_value=self.api)
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_login_stores_backend_session(self):
        self.api.login.return_value = {"authenticated": True}
        with patch("console.views.analytics.track_admin_login") as track:
            resp = self.client.post(reverse("console:login"), {"user_id": "admin", "password": "secret"})

        self.assertRedirects(resp, reverse("console:dashboard"), fetch_redirect_response=False)
        self.api.login.assert_called_once_with("admin", "secret")
        self.assertEqual(self.client.session[SESSION_COOKIES_KEY], {"JSESSIONID": "s1"})
        self.assertEqual(self.client.session[CONSOLE_USER_KEY], "admin")
        track.assert_called_once()

    def test_backend_error_text_shown(self):
        self.api.login.side_effect = TempleApiError("bad", 401, {"error": "Invalid credentials"})
        with self.assertLogs("console.views", level="WARNING"):
            resp = self.client.post(reverse("console:login"), {"user_id": "admin", "password": "x"})
        self.assertContains(resp, "Invalid credentials")
        self.assertNotIn(SESSION_COOKIES_KEY, self.client.session)

    def test_generic_error_when_backend_down(self):
        self.api.login.side_effect = TempleApiError("Backend request failed: refused")
        with self.assertLogs("console.views", level="WARNING"):
            resp = self.client.post(reverse("console:login"), {"user_id": "admin", "password": "x"})
        self.assertContains(resp, "Login failed. Please check your credentials.")

    def test_already_signed_in_goes_to_dashboard(self):
        session = self.client.session
        session[SESSION_COOKIES_KEY] = {"JSESSIONID": "s1"}
        session.save()
        self.api.check_auth.return_value = True
        resp = self.client.get(reverse("console:login"))
        self.assertRedirects(resp, reverse("console:dashboard"), fetch_redirect_response=False)

    def test_logout_even_when_backend_fails(self):
        session = self.client.session
        session[SESSION_COOKIES_KEY] = {"JSESSIONID": "s1"}
        session[CONSOLE_USER_KEY] = "admin"
        session.save()
        self.api.logout.side_effect = TempleApiError("down")
        with self.assertLogs("console.views", level="WARNING"):
            resp = self.client.post(reverse("console:logout"))
        self.assertRedirects(resp, reverse("console:login"), fetch_redirect_response=False)
        self.assertNotIn(SESSION_COOKIES_KEY, self.client.session)
        self.assertNotIn(CONSOLE_USER_KEY, self.client.session)

    def test_signup_password_mismatch(self):
        resp = self.client.post(reverse("console:signup"), {"user_id": "a", "password1": "secret1", "password2": "secret2"})
        self.assertContains(resp, "Passwords do not match.")
        self.api.signup_admin.assert_not_called()


class GuardTests(TestCase):
    def test_no_session_redirects_to_login(self):
        resp = self.client.get(reverse("console:dashboard"))
        self.assertRedirects(resp, reverse("console:login"), fetch_redirect_response=False)

    def test_rejected_session_is_forgotten(self):
        session = self.client.session
        session[SESSION_COOKIES_KEY] = {"JSESSIONID": "old"}
        session.save()
        api = Mock()
        api.check_auth.return_value = False
        with patch("console.decorators.client_for", return_value=api):
            resp = self.client.get(reverse("console:donations"))
        self.assertRedirects(resp, reverse("console:login"), fetch_redirect_response=False)
        self.assertNotIn(SESSION_COOKIES_KEY, self.client.session)


class DashboardAndDonationsTests(ConsoleTestMixin, TestCase):
    def test_dashboard_stats(self):
        self.api.admin_stats.return_value = {"totalAmount": 250000, "totalDonors": 42, "last7DaysCount": 5}
        resp = self.client.get(reverse("console:dashboard"))
        self.assertEqual(resp.context["stats"]["totalDonors"], 42)
        self.assertContains(resp, "2,50,000")

    def test_donations_filters_and_location(self):
        self.api.admin_donations.return_value = [
            {"id": 3, "name": "Asha", "amount": 500, "showPublic": True, "customVillageName": "Nayatola",
             "thanaName": "Ichak", "districtName": "Hazaribagh", "stateName": "Jharkhand", "countryName": "India"},
        ]
        resp = self.client.get(reverse("console:donations") + "?name=Asha&district=Hazaribagh")
        self.api.admin_donations.assert_called_once_with(
            name="Asha", stateId="", district="Hazaribagh", thana="", village="",
        )
        self.assertEqual(resp.context["donations"][0]["location"], "Nayatola, Ichak, Hazaribagh, Jharkhand, India")

    def test_toggle_public(self):
        resp = self.client.post(reverse("console:donation_toggle_public", args=[3]), {"show_public": "false"})
        self.api.set_donation_public.assert_called_once_with(3, False)
        self.assertRedirects(resp, reverse("console:donations"), fetch_redirect_response=False)

    def test_toggle_public_keeps_local_next(self):
        next_url = reverse("console:donations") + "?name=Asha"
        resp = self.client.post(
            reverse("console:donation_toggle_public", args=[3]), {"show_public": "true", "next": next_url},
        )
        self.assertRedirects(resp, next_url, fetch_redirect_response=False)

    def test_toggle_public_ignores_external_next(self):
        resp = self.client.post(
            reverse("console:donation_toggle_public", args=[5]),
            {"show_public": "true", "next": "https://evil.example/"},
        )
        self.api.set_donation_public.assert_called_once_with(5, True)
        self.assertRedirects(resp, reverse("console:donations"), fetch_redirect_response=False)

    def test_location_text_blanks(self):
        self.assertEqual(location_text({"stateName": "Bihar"}), "N/A, -, -, Bihar, -")


class ConfirmationTests(ConsoleTestMixin, TestCase):
    def test_tab_defaults_to_pending(self):
        self.api.admin_confirmations.return_value = [
            {"id": 7, "name": "Ravi", "amount": 1100, "utr": "U1", "screenshotUrl": "/uploads/s.png"},
        ]
        resp = self.client.get(reverse("console:confirmations") + "?status=bogus")
        self.api.admin_confirmations.assert_called_once_with("PENDING")
        self.assertTrue(resp.context["items"][0]["screenshot"].endswith("/uploads/s.png"))

    def test_note_is_required(self):
        resp = self.client.post(
            reverse("console:confirmation_action", args=[7]),
            {"action": "verify", "admin_note": "   ", "status": "PENDING"},
            follow=True,
        )
        self.api.verify_confirmation.assert_not_called()
        self.assertContains(resp, "Admin Note is required.")

    def test_verify_then_notify(self):
        self.api.verify_confirmation.return_value = {
            "id": 7, "name": "Ravi", "mobile": "9876543210", "amount": 1100, "method": "UPI", "utr": "U1",
            "status": "VERIFIED",
        }
        resp = self.client.post(
            reverse("console:confirmation_action", args=[7]),
            {"action": "verify", "admin_note": "Checked in bank", "status": "PENDING"},
        )
        self.assertRedirects(resp, reverse("console:confirmation_notify"), fetch_redirect_response=False)
        self.api.verify_confirmation.assert_called_once_with(7, "Checked in bank")

        resp = self.client.get(reverse("console:confirmation_notify"))
        notify = resp.context["notify"]
        self.assertTrue(notify["whatsapp_url"].startswith("https://wa.me/919876543210?text="))
        self.assertTrue(notify["sms_url"].startswith("sms:+919876543210?body="))
        self.assertIn("₹1,100 has been verified", notify["message"])

    def test_reject_failure_shows_message(self):
        self.api.reject_confirmation.side_effect = TempleApiError("boom", 500, {})
        with self.assertLogs("console.views", level="WARNING"):
            resp = self.client.post(
                reverse("console:confirmation_action", args=[7]),
                {"action": "reject", "admin_note": "No such UTR", "status": "PENDING"},
                follow=True,
            )
        self.assertContains(resp, "Failed to process action. Please try again.")
        self.assertNotIn(NOTIFY_SESSION_KEY, self.client.session)

    def test_notify_without_pending_action(self):
        resp = self.client.get(reverse("console:confirmation_notify"))
        self.assertRedirects(resp, reverse("console:confirmations"), fetch_redirect_response=False)


class KeepaliveTests(TestCase):
    def test_requires_console_session(self):
        resp = self.client.post(reverse("console:keepalive"))
        self.assertEqual(resp.status_code, 401)
