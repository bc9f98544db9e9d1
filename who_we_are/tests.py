from unittest.mock import Mock, patch

from django.test import SimpleTestCase, TestCase, override_settings
from django.urls import reverse

from templeapi import TempleApiError

from .maps import embed_map_url, maps_intent_url, maps_url

WEBVIEW_UA = "Mozilla/5.0 (Linux; Android 13; wv) AppleWebKit/537.36 (KHTML, like Gecko) Version/4.0 Chrome/119.0 Mobile Safari/537.36"


class MapsUrlTests(SimpleTestCase):
    def test_query_is_encoded(self):
        self.assertEqual(maps_url("3FFH+GP4,Kariyatpur"), "https://www.google.com/maps?q=3FFH%2BGP4%2CKariyatpur")
        self.assertTrue(embed_map_url("a b").endswith("?q=a%20b&output=embed"))

    def test_intent_targets_maps_app(self):
        url = maps_intent_url("Kariyatpur")
        self.assertTrue(url.startswith("intent://maps.google.com/maps?q=Kariyatpur#Intent;"))
        self.assertIn("package=com.google.android.apps.maps", url)


@override_settings(TEMPLE_MAP_QUERY="3FFH+GP4,Kariyatpur,Mangura,Jharkhand,India")
class ContactViewTests(TestCase):
    def test_browser_gets_web_link(self):
        with patch("who_we_are.views.analytics.track_contact_view") as track:
            resp = self.client.get(reverse("who_we_are:contact"))
        self.assertEqual(resp.status_code, 200)
        track.assert_called_once()
        self.assertTrue(resp.context["map_link"].startswith("https://www.google.com/maps?q="))
        self.assertFalse(resp.context["map_opens_app"])

    def test_android_webview_gets_intent(self):
        resp = self.client.get(reverse("who_we_are:contact"), HTTP_USER_AGENT=WEBVIEW_UA)
        self.assertTrue(resp.context["map_link"].startswith("intent://"))


class AboutViewTests(TestCase):
    def test_team_members_sorted_with_image_urls(self):
        api = Mock()
        api.team_members.return_value = [
            {"id": 2, "name": "Sunita Devi", "position": "Treasurer", "displayOrder": 2, "imageUrl": "/uploads/t2.jpg"},
            {"id": 1, "name": "Ramesh Mahto", "position": "President", "displayOrder": 1},
        ]
        with patch("who_we_are.views.client_for", return_value=api):
            resp = self.client.get(reverse("who_we_are:about"))

        team = resp.context["team"]
        self.assertEqual([m["name"] for m in team], ["Ramesh Mahto", "Sunita Devi"])
        self.assertTrue(team[1]["image"].endswith("/uploads/t2.jpg"))
        self.assertContains(resp, "Sunita Devi")

    def test_team_unavailable(self):
        api = Mock()
        api.team_members.side_effect = TempleApiError("down")
        with patch("who_we_are.views.client_for", return_value=api):
            with self.assertLogs("who_we_are.views", level="WARNING"):
                resp = self.client.get(reverse("who_we_are:about"))
        self.assertEqual(resp.context["team"], [])
