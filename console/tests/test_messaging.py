from django.test import SimpleTestCase

from console.messaging import (
    format_mobile,
    is_valid_mobile,
    notification_links,
    sms_message,
    sms_url,
    whatsapp_message,
    whatsapp_url,
)

CONFIRMATION = {"amount": 125000, "method": "UPI", "utr": "412345678901", "mobile": "98765 43210"}


class FormatMobileTests(SimpleTestCase):
    def test_ten_digit_indian_number_gets_country_code(self):
        self.assertEqual(format_mobile("98765-43210"), "919876543210")

    def test_plus_prefix_is_dropped(self):
        self.assertEqual(format_mobile("+44 7700 900123"), "447700900123")

    def test_already_prefixed(self):
        self.assertEqual(format_mobile("919876543210"), "919876543210")

    def test_short_number_still_prefixed(self):
        self.assertEqual(format_mobile("12345"), "9112345")

    def test_empty_or_not_string(self):
        self.assertIsNone(format_mobile(""))
        self.assertIsNone(format_mobile(None))
        self.assertIsNone(format_mobile(9876543210))

    def test_is_valid_mobile(self):
        self.assertTrue(is_valid_mobile("+91 98765 43210"))
        self.assertFalse(is_valid_mobile("98765"))
        self.assertFalse(is_valid_mobile(None))


class MessageTests(SimpleTestCase):
    def test_verified_whatsapp_text(self):
        text = whatsapp_message(CONFIRMATION, "VERIFIED", "Received, thank you")
        self.assertIn("✅ Your donation of ₹1,25,000 has been verified.", text)
        self.assertIn("UTR: 412345678901", text)
        self.assertIn("Note: Received, thank you", text)
        self.assertTrue(text.endswith("Jai Maa Durga \U0001F33A"))

    def test_rejected_sms_with_fallbacks(self):
        text = sms_message({"amount": "501"}, "REJECTED", "UTR not found")
        self.assertEqual(
            text,
            "Durga Maa Temple: Donation ₹501 not verified. Method:N/A. UTR:N/A. "
            "Note:UTR not found. Contact admin. Jai Maa Durga",
        )

    def test_amount_keeps_three_fraction_digits(self):
        text = sms_message({"amount": 1500.125}, "VERIFIED", "ok")
        self.assertIn("Donation ₹1,500.125 verified", text)
        text = sms_message({"amount": "1500.1256"}, "VERIFIED", "ok")
        self.assertIn("Donation ₹1,500.126 verified", text)

    def test_links_encode_message(self):
        self.assertEqual(whatsapp_url("9876543210", "Jai Maa"), "https://wa.me/919876543210?text=Jai%20Maa")
        self.assertEqual(sms_url("9876543210", "a&b"), "sms:+919876543210?body=a%26b")
        self.assertIsNone(whatsapp_url("", "x"))

    def test_notification_links_without_valid_mobile(self):
        links = notification_links({"amount": 100, "mobile": "123"}, "VERIFIED", "ok")
        self.assertFalse(links["valid_mobile"])
        self.assertIsNone(links["whatsapp_url"])
        self.assertIn("has been verified", links["message"])
