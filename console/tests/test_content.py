from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import SimpleTestCase, TestCase
from django.urls import reverse

from console.forms import EventForm, UpdateForm
from templeapi import TempleApiError

from .helpers import ConsoleTestMixin

# 1x1 GIF
GIF = (
    b"\x47\x49\x46\x38\x39\x61\x01\x00\x01\x00\x00\x00\x00\x21\xf9\x04"
    b"\x01\x0a\x00\x01\x00\x2c\x00\x00\x00\x00\x01\x00\x01\x00\x00\x02"
    b"\x02\x4c\x01\x00\x3b"
)

EVENT_POST = {
    "name": "Navratri", "name_hi": "",
    "date_range": "", "date_range_hi": "अक्टूबर 15 - 24",
    "short_description": "Nine nights", "short_description_hi": "",
    "morning_schedule": "6 AM Puja", "morning_schedule_hi": "",
    "afternoon_schedule": "Bhog", "afternoon_schedule_hi": "",
    "evening_schedule": "", "evening_schedule_hi": "संध्या आरती",
}


class UpdateFormTests(SimpleTestCase):
    def test_image_url_without_scheme_uses_https(self):
        form = UpdateForm(data={"title": "Roof", "message": "Slab cast", "image_url": "cdn.example.org/roof.jpg"})
        self.assertTrue(form.is_valid(), form.errors)
        self.assertEqual(form.payload()["imageUrl"], "https://cdn.example.org/roof.jpg")


class EventFormTests(SimpleTestCase):
    def test_each_field_needs_one_language(self):
        form = EventForm(data={**EVENT_POST, "date_range_hi": "", "evening_schedule_hi": ""})
        self.assertFalse(form.is_valid())
        self.assertEqual(form.errors["date_range"], ["Please provide Date Range in either English or Hindi (or both)"])
        self.assertEqual(
            form.errors["evening_schedule"], ["Please provide Evening Schedule in either English or Hindi (or both)"],
        )
        self.assertIn("Please fill in all required fields in at least one language.", form.non_field_errors())

    def test_payload_is_flat_bilingual(self):
        form = EventForm(data=EVENT_POST)
        self.assertTrue(form.is_valid(), form.errors)
        payload = form.payload()
        self.assertEqual(payload["name"], "Navratri")
        self.assertEqual(payload["dateRange"], "")
        self.assertEqual(payload["dateRangeHi"], "अक्टूबर 15 - 24")
        self.assertEqual(payload["eveningScheduleHi"], "संध्या आरती")
        self.assertEqual(len(payload), 12)

    def test_initial_from_nested_schedule(self):
        initial = EventForm.initial_for({"name": "Holi", "schedule": {"morning": "7 AM"}, "scheduleHi": {"evening": "शाम"}})
        self.assertEqual(initial["morning_schedule"], "7 AM")
        self.assertEqual(initial["evening_schedule_hi"], "शाम")
        self.assertEqual(initial["afternoon_schedule"], "")


class UpdatesViewTests(ConsoleTestMixin, TestCase):
    def test_create_with_uploaded_image(self):
        self.api.upload_image.return_value = {"url": "/uploads/u1.gif"}
        image = SimpleUploadedFile("u1.gif", GIF, content_type="image/gif")
        resp = self.client.post(reverse("console:updates"), {"title": "Pillars", "message": "Done", "image": image})
        self.assertRedirects(resp, reverse("console:updates"), fetch_redirect_response=False)
        self.api.create_update.assert_called_once_with(
            {"title": "Pillars", "message": "Done", "imageUrl": "http://backend.test/uploads/u1.gif"},
        )

    def test_title_and_message_required(self):
        resp = self.client.post(reverse("console:updates"), {"title": "", "message": ""})
        self.assertIn("title", resp.context["form"].errors)
        self.assertIn("message", resp.context["form"].errors)

    def test_set_featured(self):
        self.client.post(reverse("console:update_featured", args=[4]), {"featured": "true"})
        self.api.set_update_featured.assert_called_once_with(4, True)

    def test_edit_unknown_update_404(self):
        self.api.admin_updates.return_value = [{"id": 1, "title": "A", "message": "B"}]
        resp = self.client.get(reverse("console:update_edit", args=[9]))
        self.assertEqual(resp.status_code, 404)


class EventsViewTests(ConsoleTestMixin, TestCase):
    def test_create_event(self):
        resp = self.client.post(reverse("console:events"), EVENT_POST)
        self.assertRedirects(resp, reverse("console:events"), fetch_redirect_response=False)
        self.assertEqual(self.api.create_event.call_args.args[0]["morningSchedule"], "6 AM Puja")

    def test_media_page_lists_active_and_deleted(self):
        self.api.events.return_value = [{"id": 5, "name": "Navratri"}]
        self.api.event_media.return_value = [{"id": 1, "mediaType": "IMAGE", "mediaUrl": "/uploads/a.jpg"}]
        self.api.deleted_event_media.return_value = [{"id": 2, "mediaType": "VIDEO", "mediaUrl": "/uploads/b.mp4"}]
        resp = self.client.get(reverse("console:event_media", args=[5]))
        self.assertEqual([m["id"] for m in resp.context["media"]], [1])
        self.assertEqual(resp.context["deleted"][0]["type"], "video")

    def test_media_actions(self):
        for action, method in (("delete", "delete_event_media"), ("restore", "restore_event_media"),
                               ("purge", "purge_event_media")):
            resp = self.client.post(reverse("console:event_media_action", args=[5, 2, action]))
            self.assertRedirects(resp, reverse("console:event_media", args=[5]), fetch_redirect_response=False)
            getattr(self.api, method).assert_called_once_with(5, 2)

    def test_unknown_media_action_404(self):
        resp = self.client.post(reverse("console:event_media_action", args=[5, 2, "explode"]))
        self.assertEqual(resp.status_code, 404)


class TeamMembersViewTests(ConsoleTestMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.api.admin_team_members.return_value = [
            {"id": 1, "name": "Ramesh", "position": "President", "displayOrder": 0},
            {"id": 2, "name": "Sunita", "position": "Treasurer", "displayOrder": 1},
        ]

    def test_image_required_on_create(self):
        resp = self.client.post(reverse("console:team_members"), {"name": "Mohan", "position": "Secretary"})
        self.assertEqual(resp.context["form"].errors["image"], ["Image is required when adding a new team member"])
        self.api.create_team_member.assert_not_called()

    def test_display_order_defaults_to_count(self):
        image = SimpleUploadedFile("m.gif", GIF, content_type="image/gif")
        self.client.post(reverse("console:team_members"), {"name": "Mohan", "position": "Secretary", "image": image})
        fields = self.api.create_team_member.call_args.args[0]
        self.assertEqual(fields["displayOrder"], 2)
        self.assertEqual(fields["mobileNumber"], "")

    def test_edit_without_image(self):
        resp = self.client.post(
            reverse("console:team_member_edit", args=[2]),
            {"name": "Sunita Devi", "position": "Treasurer", "display_order": "1"},
        )
        self.assertRedirects(resp, reverse("console:team_members"), fetch_redirect_response=False)
        member_id, fields, image = self.api.edit_team_member.call_args.args
        self.assertEqual((member_id, fields["name"], image), (2, "Sunita Devi", None))

    def test_network_error_message(self):
        self.api.edit_team_member.side_effect = TempleApiError("Backend request failed: refused")
        with self.assertLogs("console.content", level="WARNING"):
            resp = self.client.post(
                reverse("console:team_member_edit", args=[2]), {"name": "Sunita", "position": "Treasurer"},
            )
        self.assertIn("Network error. Please check if the API Gateway is running.", resp.context["form"].non_field_errors())
