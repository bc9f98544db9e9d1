from unittest.mock import Mock, patch

from django.test import RequestFactory, SimpleTestCase, override_settings
from requests import ConnectionError as RequestsConnectionError

from durgamandir import analytics


def _request(cookies=None):
    request = RequestFactory().get("/")
    request.session = {}
    request.COOKIES.update(cookies or {})
    return request


class AnalyticsTests(SimpleTestCase):
    @override_settings(GA_MEASUREMENT_ID="", GA_API_SECRET="")
    def test_not_configured_is_noop(self):
        with patch("durgamandir.analytics.requests.post") as post:
            self.assertFalse(analytics.track_contact_view(_request()))
        post.assert_not_called()

    @override_settings(GA_MEASUREMENT_ID="G-TEST", GA_API_SECRET="s3cret")
    def test_donation_event_payload(self):
        with patch("durgamandir.analytics.requests.post") as post:
            post.return_value = Mock(status_code=204)
            ok = analytics.track_donation(_request({"_ga": "GA1.1.111.222"}), "501", "", "mandir_nirmaan")
        self.assertTrue(ok)
        kwargs = post.call_args.kwargs
        self.assertEqual(kwargs["params"], {"measurement_id": "G-TEST", "api_secret": "s3cret"})
        self.assertEqual(kwargs["json"]["client_id"], "111.222")
        event = kwargs["json"]["events"][0]
        self.assertEqual(event["name"], "donation_made")
        self.assertEqual(event["params"]["value"], 501.0)
        self.assertEqual(event["params"]["donor_name"], "Anonymous")

    @override_settings(GA_MEASUREMENT_ID="G-TEST", GA_API_SECRET="s3cret")
    def test_failure_is_logged_not_raised(self):
        with patch("durgamandir.analytics.requests.post", side_effect=RequestsConnectionError("down")):
            with self.assertLogs("durgamandir.analytics", level="ERROR"):
                self.assertFalse(analytics.track_event_view(_request(), "Navratri", 1))

    def test_client_id_kept_in_session(self):
        request = _request()
        first = analytics.client_id_for(request)
        self.assertEqual(analytics.client_id_for(request), first)
