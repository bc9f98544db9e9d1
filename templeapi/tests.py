from unittest.mock import Mock

from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import SimpleTestCase, override_settings
from requests import ConnectionError as RequestsConnectionError

from .client import TempleApiAuthError, TempleApiClient, TempleApiError, media_url


class FakeResponse:
    def __init__(self, status_code=200, data=None, text=""):
        self.status_code = status_code
        self._data = data
        self.text = text

    def json(self):
        if self._data is None:
            raise ValueError("no json")
        return self._data


def _client(response=None, side_effect=None):
    session = Mock()
    session.request.return_value = response
    session.request.side_effect = side_effect
    return TempleApiClient(base_url="http://backend.test/api", timeout=5, session=session), session


class RequestTests(SimpleTestCase):
    def test_success_returns_json_and_drops_empty_params(self):
        client, session = _client(FakeResponse(200, {"donations": [], "totalPages": 0}))

        data = client.public_donations_page(page=1, size=20, name="Ram", stateId="")

        self.assertEqual(data["totalPages"], 0)
        args, kwargs = session.request.call_args
        self.assertEqual(args, ("GET", "http://backend.test/api/donations/public/paginated"))
        self.assertEqual(kwargs["params"], {"page": 1, "size": 20, "name": "Ram"})
        self.assertEqual(kwargs["timeout"], 5)

    def test_backend_error_message_is_used(self):
        client, _ = _client(FakeResponse(400, {"error": "Mobile must be 10 digits"}))
        with self.assertLogs("templeapi.client", level="WARNING"):
            with self.assertRaises(TempleApiError) as cm:
                client.confirm_donation({"amount": 1})
        self.assertEqual(cm.exception.message, "Mobile must be 10 digits")
        self.assertEqual(cm.exception.status_code, 400)
        self.assertFalse(cm.exception.is_unavailable)

    def test_message_key_and_status_hint(self):
        client, _ = _client(FakeResponse(500, {"message": "boom"}))
        with self.assertLogs("templeapi.client", level="WARNING"):
            with self.assertRaises(TempleApiError) as cm:
                client.events()
        self.assertEqual(cm.exception.message, "boom")

        client, _ = _client(FakeResponse(503, None, text="Service Unavailable"))
        with self.assertLogs("templeapi.client", level="WARNING"):
            with self.assertRaises(TempleApiError) as cm:
                client.events()
        self.assertIn("503", cm.exception.message)
        self.assertEqual(cm.exception.payload, {"raw": "Service Unavailable"})

    def test_unauthorized_raises_auth_error(self):
        client, _ = _client(FakeResponse(401, {}))
        with self.assertLogs("templeapi.client", level="WARNING"):
            with self.assertRaises(TempleApiAuthError):
                client.admin_stats()

    def test_network_failure_is_unavailable(self):
        client, _ = _client(side_effect=RequestsConnectionError("refused"))
        with self.assertLogs("templeapi.client", level="WARNING"):
            with self.assertRaises(TempleApiError) as cm:
                client.donation_stats()
        self.assertTrue(cm.exception.is_unavailable)

    def test_empty_body_is_empty_dict(self):
        client, _ = _client(FakeResponse(204, None, text=""))
        self.assertEqual(client.delete_expense(7), {})


class AuthTests(SimpleTestCase):
    def test_login_defaults_authenticated(self):
        client, session = _client(FakeResponse(200, {"userId": "admin"}))
        data = client.login("admin", "secret")
        self.assertTrue(data["authenticated"])
        self.assertEqual(session.request.call_args.kwargs["json"], {"userId": "admin", "password": "secret"})

    def test_check_auth_false_on_401(self):
        client, _ = _client(FakeResponse(401, {}))
        with self.assertLogs("templeapi.client", level="WARNING"):
            self.assertFalse(client.check_auth())

    def test_check_auth_reads_flag(self):
        client, _ = _client(FakeResponse(200, {"authenticated": True}))
        self.assertTrue(client.check_auth())


class UploadTests(SimpleTestCase):
    def test_team_member_multipart_skips_blank_fields(self):
        client, session = _client(FakeResponse(200, {"id": 3}))
        image = SimpleUploadedFile("p.jpg", b"img", content_type="image/jpeg")

        client.create_team_member({"name": "Sita", "position": "Pujari", "mobileNumber": ""}, image)

        kwargs = session.request.call_args.kwargs
        self.assertEqual(kwargs["data"], {"name": "Sita", "position": "Pujari"})
        self.assertEqual(kwargs["files"]["image"], ("p.jpg", b"img", "image/jpeg"))

    def test_set_featured_sends_query_flag(self):
        client, session = _client(FakeResponse(200, {}))
        client.set_update_featured(4, False)
        self.assertEqual(session.request.call_args.kwargs["params"], {"featured": "false"})


class MediaUrlTests(SimpleTestCase):
    @override_settings(TEMPLE_API_URL="https://api.example.org/api")
    def test_relative_paths_use_backend_origin(self):
        self.assertEqual(media_url("/uploads/a.jpg"), "https://api.example.org/uploads/a.jpg")
        self.assertEqual(media_url("uploads/a.jpg"), "https://api.example.org/uploads/a.jpg")

    def test_absolute_and_empty(self):
        self.assertEqual(media_url("https://cdn.example.org/x.png"), "https://cdn.example.org/x.png")
        self.assertEqual(media_url(None), "")
