from django.test import SimpleTestCase

from . import upi

UPI_ID = "boism-9931690581@boi"
PAYEE = "Durga Maa Temple"
ANDROID_WV = "Mozilla/5.0 (Linux; Android 13; Pixel 7 Build/TQ3A; wv) AppleWebKit/537.36 Version/4.0 Chrome/118.0 Mobile"
DESKTOP = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 Chrome/118.0 Safari/537.36"


class UpiLinkTests(SimpleTestCase):
    def test_generic_link_with_note(self):
        link = upi.upi_link(UPI_ID, PAYEE, 501, "Donation - Ram")
        self.assertEqual(
            link,
            "upi://pay?pa=boism-9931690581%40boi&pn=Durga+Maa+Temple&am=501&cu=INR&tn=Donation+-+Ram",
        )

    def test_note_is_optional(self):
        self.assertNotIn("tn=", upi.upi_link(UPI_ID, PAYEE, "100"))

    def test_amount_string_drops_trailing_zeros(self):
        self.assertIn("am=250.5&", upi.upi_link(UPI_ID, PAYEE, "250.50"))

    def test_app_specific_schemes(self):
        self.assertTrue(upi.app_upi_link("PhonePe", UPI_ID, PAYEE, 1).startswith("phonepe://pay?pa="))
        self.assertTrue(upi.app_upi_link("gpay", UPI_ID, PAYEE, 1).startswith("tez://upi/pay?"))
        self.assertTrue(upi.app_upi_link("googlepay", UPI_ID, PAYEE, 1).startswith("tez://upi/pay?"))
        self.assertTrue(upi.app_upi_link("paytm", UPI_ID, PAYEE, 1).startswith("paytmmp://pay?"))
        self.assertTrue(upi.app_upi_link("bhim", UPI_ID, PAYEE, 1).startswith("bhim://pay?"))
        self.assertTrue(upi.app_upi_link("whatever", UPI_ID, PAYEE, 1).startswith("upi://pay?"))

    def test_intent_url_with_package(self):
        url = upi.upi_intent_url("phonepe", UPI_ID, PAYEE, 10)
        self.assertEqual(
            url,
            "intent://pay?pa=boism-9931690581%40boi&pn=Durga+Maa+Temple&am=10&cu=INR"
            "#Intent;scheme=upi;package=com.phonepe.app;"
            "S.browser_fallback_url=upi%3A%2F%2Fpay%3Fpa%3Dboism-9931690581%2540boi"
            "%26pn%3DDurga%2BMaa%2BTemple%26am%3D10%26cu%3DINR;end",
        )

    def test_intent_url_without_package(self):
        url = upi.upi_intent_url("any", UPI_ID, PAYEE, 10)
        self.assertIn("#Intent;scheme=upi;S.browser_fallback_url=", url)
        self.assertNotIn("package=", url)

    def test_payment_link_depends_on_webview(self):
        self.assertTrue(upi.payment_link_for(ANDROID_WV, "paytm", UPI_ID, PAYEE, 5).startswith("intent://"))
        self.assertTrue(upi.payment_link_for(ANDROID_WV, "any", UPI_ID, PAYEE, 5).startswith("upi://"))
        self.assertTrue(upi.payment_link_for(DESKTOP, "paytm", UPI_ID, PAYEE, 5).startswith("paytmmp://"))

    def test_qr_svg_is_inline_svg(self):
        svg = upi.upi_qr_svg(upi.upi_link(UPI_ID, PAYEE, 1))
        self.assertIn("<svg", svg)
        self.assertNotIn("<?xml", svg)


class FormatAmountTests(SimpleTestCase):
    def test_indian_grouping(self):
        self.assertEqual(upi.format_amount(100000), "1,00,000")
        self.assertEqual(upi.format_amount(12345678), "1,23,45,678")
        self.assertEqual(upi.format_amount(999), "999")
        self.assertEqual(upi.format_amount("1000"), "1,000")

    def test_decimals(self):
        self.assertEqual(upi.format_amount(1234.5), "1,234.5")
        self.assertEqual(upi.format_amount("2500.456"), "2,500.46")
        self.assertEqual(upi.format_amount(1500, fixed=True), "1,500.00")

    def test_invalid_is_zero(self):
        self.assertEqual(upi.format_amount("abc"), "0")
        self.assertEqual(upi.format_amount(None), "0")

    def test_oversized_is_zero(self):
        self.assertEqual(upi.format_amount("1" + "0" * 27), "0")
        self.assertEqual(upi.format_amount("1e100"), "0")

    def test_places(self):
        self.assertEqual(upi.format_amount("1500.1256", places=3), "1,500.126")
        self.assertEqual(upi.format_amount(2, fixed=True, places=3), "2.000")
