from unittest.mock import Mock, patch

from django.test import TestCase
from django.urls import reverse

from templeapi import TempleApiError


class HomeViewTests(TestCase):
    def test_latest_image_and_updates(self):
        api = Mock()
        api.latest_temple_image.return_value = {"imageUrl": "/uploads/front.jpg", "title": "Shikhar"}
        api.latest_updates.return_value = [{"id": 1, "title": "Roof casting done"}]
        with patch("homepage.views.client_for", return_value=api):
            resp = self.client.get(reverse("homepage:homepage"))

        self.assertEqual(resp.status_code, 200)
        api.latest_updates.assert_called_once_with(limit=3, sort="desc")
        self.assertEqual(resp.context["latest_image"]["title"], "Shikhar")
        self.assertEqual(resp.context["latest_image_src"], "http://backend.test/uploads/front.jpg")
        self.assertContains(resp, 'src="http://backend.test/uploads/front.jpg"')
        self.assertContains(resp, "Roof casting done")

    def test_latest_image_with_url_key(self):
        api = Mock()
        api.latest_temple_image.return_value = {"url": "/uploads/side.jpg"}
        api.latest_updates.return_value = []
        with patch("homepage.views.client_for", return_value=api):
            resp = self.client.get(reverse("homepage:homepage"))

        self.assertEqual(resp.status_code, 200)
        self.assertContains(resp, 'src="http://backend.test/uploads/side.jpg"')

    def test_backend_down_still_renders(self):
        api = Mock()
        api.latest_temple_image.side_effect = TempleApiError("down")
        api.latest_updates.side_effect = TempleApiError("down")
        with patch("homepage.views.client_for", return_value=api):
            with self.assertLogs("homepage.views", level="WARNING"):
                resp = self.client.get(reverse("homepage:homepage"))

        self.assertEqual(resp.status_code, 200)
        self.assertIsNone(resp.context["latest_image"])
        self.assertEqual(resp.context["updates"], [])

    def test_hindi_selected_by_query(self):
        api = Mock()
        api.latest_temple_image.return_value = None
        api.latest_updates.return_value = []
        with patch("homepage.views.client_for", return_value=api):
            resp = self.client.get(reverse("homepage:homepage") + "?lang=hi")
        self.assertEqual(resp.context["LANG"], "hi")
        self.assertEqual(resp.cookies["durgamaa_lang"].value, "hi")
