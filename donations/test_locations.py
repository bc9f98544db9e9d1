from unittest.mock import Mock

from django.core.cache import cache
from django.test import SimpleTestCase, TestCase, override_settings

from templeapi import TempleApiError

from . import locations

COUNTRIES = [{"id": 1, "name": "Nepal"}, {"id": 2, "name": "India"}]
STATES = {"2": [{"id": 10, "name": "Bihar"}, {"id": 11, "name": "Jharkhand"}]}
DISTRICTS = {
    "10": [{"id": 100, "name": "Patna"}],
    "11": [{"id": 110, "name": "Ranchi"}, {"id": 111, "name": "Hazaribag"}],
}
THANAS = {"100": [{"id": 1000, "name": "Danapur"}], "111": [{"id": 1110, "name": "Ichak"}]}
VILLAGES = {"1110": [{"id": 5, "name": "Barkagaon"}, {"id": 6, "name": "Mangura"}], "1000": []}


def fake_client():
    client = Mock()
    client.countries.return_value = COUNTRIES
    client.states.side_effect = lambda pid: STATES.get(str(pid), [])
    client.districts.side_effect = lambda pid: DISTRICTS.get(str(pid), [])
    client.thanas.side_effect = lambda pid: THANAS.get(str(pid), [])
    client.villages.side_effect = lambda pid: VILLAGES.get(str(pid), [])
    return client


class HelperTests(SimpleTestCase):
    def test_pick_default_by_name_else_first(self):
        options = [{"id": "1", "name": "Nepal"}, {"id": "2", "name": "India"}]
        self.assertEqual(locations.pick_default(options, "india"), "2")
        self.assertEqual(locations.pick_default(options, "Bhutan"), "1")
        self.assertIsNone(locations.pick_default([], "India"))

    def test_search_is_case_insensitive_substring(self):
        options = [{"id": "5", "name": "Barkagaon"}, {"id": "6", "name": "Mangura"}]
        self.assertEqual(locations.search_options(options, "GUR"), [{"id": "6", "name": "Mangura"}])
        self.assertEqual(locations.search_options(options, "  "), options)


@override_settings(DEFAULT_LOCATION_PATH=["India", "Jharkhand", "Hazaribag", "Ichak", "Mangura"])
class CascadeTests(TestCase):
    def setUp(self):
        cache.clear()
        self.client_api = fake_client()

    def test_defaults_follow_configured_path(self):
        result = locations.resolve_cascade(self.client_api)
        self.assertEqual(
            result["selected"],
            {"country": "2", "state": "11", "district": "111", "thana": "1110", "village": "6"},
        )
        self.assertFalse(result["custom_village"])

    def test_valid_selection_is_kept(self):
        selected = {"country": "2", "state": "11", "district": "110"}
        result = locations.resolve_cascade(self.client_api, selected)
        self.assertEqual(result["selected"]["district"], "110")
        # Ranchi has no thanas -> nothing below
        self.assertIsNone(result["selected"]["thana"])
        self.assertTrue(result["custom_village"])

    def test_changed_parent_resets_children(self):
        selected = {"country": "2", "state": "10", "district": "111", "thana": "1110", "village": "6"}
        result = locations.resolve_cascade(self.client_api, selected, changed_level="state")
        self.assertEqual(result["selected"]["state"], "10")
        self.assertEqual(result["selected"]["district"], "100")
        self.assertEqual(result["selected"]["thana"], "1000")
        self.assertIsNone(result["selected"]["village"])
        self.assertTrue(result["custom_village"])

    def test_stale_child_id_falls_back(self):
        selected = {"country": "2", "state": "11", "district": "100"}
        result = locations.resolve_cascade(self.client_api, selected)
        self.assertEqual(result["selected"]["district"], "111")

    def test_other_village_means_custom(self):
        selected = {"country": "2", "state": "11", "district": "111", "thana": "1110", "village": "OTHER"}
        result = locations.resolve_cascade(self.client_api, selected)
        self.assertIsNone(result["selected"]["village"])
        self.assertTrue(result["custom_village"])

    def test_village_failure_switches_to_custom(self):
        self.client_api.villages.side_effect = TempleApiError("down")
        with self.assertLogs("donations.locations", level="WARNING"):
            result = locations.resolve_cascade(self.client_api)
        self.assertTrue(result["custom_village"])
        self.assertIsNone(result["error"])

    def test_options_are_cached(self):
        locations.fetch_options(self.client_api, "country")
        locations.fetch_options(self.client_api, "country")
        self.assertEqual(self.client_api.countries.call_count, 1)
