from django.test import SimpleTestCase

from durgamandir.webview import is_android_webview


class WebViewDetectionTests(SimpleTestCase):
    def test_android_webview(self):
        self.assertTrue(is_android_webview(
            "Mozilla/5.0 (Linux; Android 13; SM-A146B Build/TP1A; wv) AppleWebKit/537.36 Chrome/119.0 Mobile Safari/537.36"
        ))
        self.assertTrue(is_android_webview(
            "Mozilla/5.0 (Linux; U; Android 4.4.2; en-us) AppleWebKit/534.30 Version/4.0 Mobile Safari/534.30"
        ))

    def test_regular_browsers(self):
        self.assertFalse(is_android_webview(
            "Mozilla/5.0 (Linux; Android 13) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/119.0 Mobile Safari/537.36"
        ))
        self.assertFalse(is_android_webview(
            "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) AppleWebKit/605.1.15 Version/17.0 Mobile Safari/604.1"
        ))
        self.assertFalse(is_android_webview(None))
