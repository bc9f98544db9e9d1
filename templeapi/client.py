import json
import logging

import requests
from requests import RequestException
from django.conf import settings

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:8081/api"
SESSION_COOKIES_KEY = "templeapi_cookies"


class TempleApiError(Exception):
    """Raised for any failed call to the temple backend.

    ``status_code`` is None when the backend could not be reached at all.
    """

    def __init__(self, message, status_code=None, payload=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload if payload is not None else {}

    @property
    def is_unavailable(self) -> bool:
        return self.status_code is None


class TempleApiAuthError(TempleApiError):
    pass


def api_base_url() -> str:
    return (getattr(settings, "TEMPLE_API_URL", "") or DEFAULT_API_URL).rstrip("/")


def backend_origin() -> str:
    base = api_base_url()
    return base[: -len("/api")] if base.endswith("/api") else base


def media_url(path) -> str:
    """Absolute URL for a file path the backend hands out."""
    if not path:
        return ""
    path = str(path)
    if path.startswith(("http://", "https://", "data:", "//")):
        return path
    if not path.startswith("/"):
        path = "/" + path
    return backend_origin() + path


def _error_message(data, status_code: int) -> str:
    if isinstance(data, dict):
        for key in ("error", "message"):
            if data.get(key):
                return str(data[key])
    if status_code == 400: return "Invalid data. Please check the form and try again."
    if status_code == 401: return "Not authenticated."
    if status_code == 403: return "Not allowed."
    if status_code == 404: return "Not found."
    if status_code >= 500: return f"Backend error {status_code}. Please try again later."
    return f"HTTP {status_code}"


def _upload(fileobj):
    """(name, bytes, content_type) tuple for a Django UploadedFile."""
    fileobj.seek(0)
    return (fileobj.name, fileobj.read(), getattr(fileobj, "content_type", None) or "application/octet-stream")


def _clean_params(params):
    return {k: v for k, v in (params or {}).items() if v not in (None, "")}


class TempleApiClient:
    def __init__(self, base_url=None, timeout=None, cookies=None, session=None):
        self.base_url = (base_url or api_base_url()).rstrip("/")
        self.timeout = timeout or getattr(settings, "TEMPLE_API_TIMEOUT", 30)
        self.session = session or requests.Session()
        if cookies:
            self.session.cookies.update(cookies)

    def _request(self, method, path, *, params=None, json_body=None, data=None, files=None):
        url = f"{self.base_url}{path}"
        try:
            resp = self.session.request(
                method, url,
                params=_clean_params(params) or None,
                json=json_body, data=data, files=files,
                timeout=self.timeout,
            )
        except RequestException as e:
            logger.warning("Backend unreachable for %s %s: %s", method, path, e)
            raise TempleApiError(f"Backend request failed: {e}")
        try: body = resp.json()
        except ValueError: body = {"raw": resp.text} if resp.text else {}
        if 200 <= resp.status_code < 300:
            return body
        message = _error_message(body, resp.status_code)
        logger.warning(
            "Backend %s %s -> %s. Response: %s",
            method, path, resp.status_code, json.dumps(body, default=str)[:800],
        )
        if resp.status_code in (401, 403):
            raise TempleApiAuthError(message, resp.status_code, body)
        raise TempleApiError(message, resp.status_code, body)

    def cookies(self) -> dict:
        return self.session.cookies.get_dict()

    # --- public donations ---
    def donation_stats(self):
        return self._request("GET", "/donations/stats")

    def public_donations(self):
        return self._request("GET", "/donations/public")

    def public_donations_page(self, page=0, size=20, **filters):
        params = {"page": page, "size": size}
        params.update({k: filters.get(k) for k in ("name", "stateId", "district", "thana", "village")})
        return self._request("GET", "/donations/public/paginated", params=params)

    def create_donation(self, payload: dict):
        return self._request("POST", "/donations", json_body=payload)

    def confirm_donation(self, payload: dict):
        return self._request("POST", "/donation-confirmations", json_body=payload)

    def upload_screenshot(self, fileobj):
        return self._request("POST", "/donation-confirmations/upload-screenshot", files={"file": _upload(fileobj)})

    # --- updates ---
    def public_updates(self):
        return self._request("GET", "/updates/public")

    def latest_updates(self, limit=3, sort="desc"):
        return self._request("GET", "/updates", params={"limit": limit, "sort": sort})

    def update_images(self):
        return self._request("GET", "/updates/images")

    def latest_temple_image(self):
        return self._request("GET", "/updates/public/latest-image")

    # --- locations ---
    def countries(self):
        return self._request("GET", "/locations/countries")

    def states(self, country_id):
        return self._request("GET", "/locations/states", params={"countryId": country_id})

    def districts(self, state_id):
        return self._request("GET", "/locations/districts", params={"stateId": state_id})

    def thanas(self, district_id):
        return self._request("GET", "/locations/thanas", params={"districtId": district_id})

    def villages(self, thana_id):
        return self._request("GET", "/locations/villages", params={"thanaId": thana_id})

    # --- public service forms ---
    def submit_sankalpam(self, payload: dict):
        return self._request("POST", "/sankalpam", json_body=payload)

    def book_seva(self, payload: dict):
        return self._request("POST", "/seva-bookings", json_body=payload)

    def sponsor_prasad(self, payload: dict):
        return self._request("POST", "/prasad-sponsorships", json_body=payload)

    def book_special_puja(self, payload: dict):
        return self._request("POST", "/services/special-puja", json_body=payload)

    def book_morning_aarti(self, payload: dict):
        return self._request("POST", "/services/morning-aarti", json_body=payload)

    def book_abhishekam(self, payload: dict):
        return self._request("POST", "/services/abhishekam", json_body=payload)

    def offer_flowers(self, payload: dict):
        return self._request("POST", "/services/flowers", json_body=payload)

    # --- events + team ---
    def events(self):
        return self._request("GET", "/events")

    def event_media(self, event_id):
        return self._request("GET", f"/events/{event_id}/media")

    def team_members(self):
        return self._request("GET", "/events/team-members")

    # --- auth ---
    def login(self, user_id, password):
        data = self._request("POST", "/auth/login", json_body={"userId": user_id, "password": password})
        if isinstance(data, dict):
            data.setdefault("authenticated", True)
        return data

    def logout(self):
        return self._request("POST", "/auth/logout")

    def check_auth(self) -> bool:
        try:
            data = self._request("GET", "/auth/check")
        except TempleApiAuthError:
            return False
        return bool(isinstance(data, dict) and data.get("authenticated"))

    def signup_admin(self, user_id, password):
        return self._request("POST", "/auth/admin/signup", json_body={"userId": user_id, "password": password})

    # --- admin: donations ---
    def admin_donations(self, **filters):
        params = {k: filters.get(k) for k in ("name", "stateId", "district", "thana", "village")}
        return self._request("GET", "/admin/donations", params=params)

    def set_donation_public(self, donation_id, show_public: bool):
        return self._request("PATCH", f"/admin/donations/{donation_id}", json_body={"showPublic": bool(show_public)})

    def admin_stats(self):
        return self._request("GET", "/admin/stats")

    def admin_confirmations(self, status=None):
        return self._request("GET", "/admin/donation-confirmations", params={"status": status})

    def verify_confirmation(self, confirmation_id, admin_note):
        return self._request("POST", f"/admin/donation-confirmations/{confirmation_id}/verify", json_body={"adminNote": admin_note})

    def reject_confirmation(self, confirmation_id, admin_note):
        return self._request("POST", f"/admin/donation-confirmations/{confirmation_id}/reject", json_body={"adminNote": admin_note})

    # --- admin: updates + uploads ---
    def admin_updates(self):
        return self._request("GET", "/admin/updates")

    def create_update(self, payload: dict):
        return self._request("POST", "/admin/updates", json_body=payload)

    def edit_update(self, update_id, payload: dict):
        return self._request("PUT", f"/admin/updates/{update_id}", json_body=payload)

    def delete_update(self, update_id):
        return self._request("DELETE", f"/admin/updates/{update_id}")

    def set_update_featured(self, update_id, featured: bool):
        return self._request("POST", f"/admin/updates/{update_id}/set-featured", params={"featured": "true" if featured else "false"})

    def upload_image(self, fileobj):
        return self._request("POST", "/admin/upload/image", files={"file": _upload(fileobj)})

    def upload_document(self, fileobj):
        return self._request("POST", "/admin/upload/document", files={"file": _upload(fileobj)})

    # --- admin: expenses ---
    def expense_stats(self):
        return self._request("GET", "/admin/expenses/stats")

    def expenses(self, page=0, size=10, description=""):
        return self._request("GET", "/admin/expenses", params={"page": page, "size": size, "description": description})

    def create_expense(self, payload: dict):
        return self._request("POST", "/admin/expenses", json_body=payload)

    def edit_expense(self, expense_id, payload: dict):
        return self._request("PUT", f"/admin/expenses/{expense_id}", json_body=payload)

    def delete_expense(self, expense_id):
        return self._request("DELETE", f"/admin/expenses/{expense_id}")

    # --- admin: events ---
    def create_event(self, payload: dict):
        return self._request("POST", "/events", json_body=payload)

    def edit_event(self, event_id, payload: dict):
        return self._request("PUT", f"/events/{event_id}", json_body=payload)

    def delete_event(self, event_id):
        return self._request("DELETE", f"/events/{event_id}")

    def upload_event_media(self, event_id, fileobj):
        return self._request("POST", f"/admin/events/{event_id}/media", files={"file": _upload(fileobj)})

    def delete_event_media(self, event_id, media_id):
        return self._request("DELETE", f"/admin/events/{event_id}/media/{media_id}")

    def deleted_event_media(self, event_id):
        return self._request("GET", f"/admin/events/{event_id}/media/deleted")

    def restore_event_media(self, event_id, media_id):
        return self._request("POST", f"/admin/events/{event_id}/media/{media_id}/restore")

    def purge_event_media(self, event_id, media_id):
        return self._request("DELETE", f"/admin/events/{event_id}/media/{media_id}/permanent")

    # --- admin: team members ---
    def admin_team_members(self):
        return self._request("GET", "/admin/team-members")

    def _team_form(self, fields: dict, image=None):
        data = {k: v for k, v in fields.items() if v not in (None, "")}
        files = {"image": _upload(image)} if image else None
        return data, files

    def create_team_member(self, fields: dict, image=None):
        data, files = self._team_form(fields, image)
        return self._request("POST", "/admin/team-members", data=data, files=files)

    def edit_team_member(self, member_id, fields: dict, image=None):
        data, files = self._team_form(fields, image)
        return self._request("PUT", f"/admin/team-members/{member_id}", data=data, files=files)

    def delete_team_member(self, member_id):
        return self._request("DELETE", f"/admin/team-members/{member_id}")


def client_for(request) -> TempleApiClient:
    """Client carrying the backend session cookies stored in the Django session."""
    return TempleApiClient(cookies=request.session.get(SESSION_COOKIES_KEY) or {})


def save_cookies(request, client: TempleApiClient) -> None:
    request.session[SESSION_COOKIES_KEY] = client.cookies()


def forget_cookies(request) -> None:
    request.session.pop(SESSION_COOKIES_KEY, None)


def has_backend_session(request) -> bool:
    return bool(request.session.get(SESSION_COOKIES_KEY))
