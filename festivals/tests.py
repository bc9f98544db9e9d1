from unittest.mock import Mock, patch

from django.test import SimpleTestCase, TestCase
from django.urls import reverse

from templeapi import TempleApiError

from .events import present_event, present_media

NAVRATRI = {
    "id": 1,
    "name": "Navratri Utsav",
    "nameHi": "नवरात्रि उत्सव",
    "dateRange": "October 15 - October 24",
    "dateRangeHi": "",
    "shortDescription": "",
    "shortDescriptionHi": "माँ दुर्गा को समर्पित नौ दिन",
    "schedule": {"morning": "Morning Puja: 6:00 AM", "afternoon": "", "evening": None},
    "scheduleHi": {"morning": "प्रातः पूजा", "afternoon": "", "evening": "संध्या आरती"},
}


class PresentEventTests(SimpleTestCase):
    def test_english_with_hindi_fallback(self):
        event = present_event(NAVRATRI, "en")
        self.assertEqual(event["name"], "Navratri Utsav")
        self.assertEqual(event["nameAlt"], "नवरात्रि उत्सव")
        self.assertEqual(event["shortDescription"], "माँ दुर्गा को समर्पित नौ दिन")
        self.assertEqual(event["shortDescriptionAlt"], "")
        self.assertEqual(event["schedule"], {"morning": "Morning Puja: 6:00 AM", "afternoon": "", "evening": "संध्या आरती"})

    def test_hindi_with_english_fallback(self):
        event = present_event(NAVRATRI, "hi")
        self.assertEqual(event["name"], "नवरात्रि उत्सव")
        self.assertEqual(event["dateRange"], "October 15 - October 24")
        self.assertEqual(event["schedule"]["morning"], "प्रातः पूजा")

    def test_placeholders_when_empty(self):
        event = present_event({"id": 9}, "en")
        self.assertEqual(event["name"], "Untitled Event")
        self.assertEqual(event["dateRange"], "No date range")
        self.assertFalse(event["has_schedule"])

    def test_media_types_and_urls(self):
        media = present_media([
            {"id": 1, "mediaType": "IMAGE", "mediaUrl": "/uploads/e1.jpg"},
            {"id": 2, "mediaType": "VIDEO", "mediaUrl": "https://cdn.example.org/v.mp4", "originalName": "v.mp4"},
            {"id": 3, "mediaType": "IMAGE"},
        ])
        self.assertEqual([m["type"] for m in media], ["image", "video"])
        self.assertTrue(media[0]["url"].endswith("/uploads/e1.jpg"))
        self.assertTrue(media[0]["url"].startswith("http"))


class SpecialEventsViewTests(TestCase):
    def test_list_uses_language_and_tolerates_media_failure(self):
        api = Mock()
        api.events.return_value = [NAVRATRI]
        api.event_media.side_effect = TempleApiError("down")
        with patch("festivals.views.client_for", return_value=api):
            with self.assertLogs("festivals.views", level="WARNING"):
                resp = self.client.get(reverse("festivals:special_events") + "?lang=hi")

        event = resp.context["events"][0]
        self.assertEqual(event["name"], "नवरात्रि उत्सव")
        self.assertEqual(event["media"], [])

    def test_backend_down_gives_empty_list(self):
        api = Mock()
        api.events.side_effect = TempleApiError("down")
        with patch("festivals.views.client_for", return_value=api):
            with self.assertLogs("festivals.views", level="WARNING"):
                resp = self.client.get(reverse("festivals:special_events"))
        self.assertEqual(resp.context["events"], [])

    def test_detail_tracks_view(self):
        api = Mock()
        api.events.return_value = [NAVRATRI]
        api.event_media.return_value = []
        with patch("festivals.views.client_for", return_value=api), \
                patch("festivals.views.analytics.track_event_view") as track:
            resp = self.client.get(reverse("festivals:event_detail", args=[1]))
        self.assertEqual(resp.status_code, 200)
        track.assert_called_once()
        self.assertEqual(track.call_args.args[1:], ("Navratri Utsav", 1))

    def test_detail_unknown_event_404(self):
        api = Mock()
        api.events.return_value = [NAVRATRI]
        with patch("festivals.views.client_for", return_value=api):
            resp = self.client.get(reverse("festivals:event_detail", args=[42]))
        self.assertEqual(resp.status_code, 404)
