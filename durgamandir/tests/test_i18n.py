from django.template import Context, Template
from django.test import RequestFactory, SimpleTestCase, TestCase

from durgamandir.i18n import (
    language_from_accept_header,
    localized,
    normalize_language,
    translate,
)


class TranslateTests(SimpleTestCase):
    def test_hindi_lookup(self):
        self.assertEqual(translate("nav.home", "hi"), "होम")
        self.assertEqual(translate("nav.home", "en"), "Home")

    def test_falls_back_to_english_then_key(self):
        self.assertEqual(translate("nav.home", "fr"), "Home")
        self.assertEqual(translate("no.such.key", "hi"), "no.such.key")

    def test_normalize_and_accept_header(self):
        self.assertEqual(normalize_language("hi-IN"), "hi")
        self.assertIsNone(normalize_language("fr"))
        self.assertEqual(language_from_accept_header("fr-FR,hi;q=0.8,en;q=0.5"), "hi")
        self.assertIsNone(language_from_accept_header(""))

    def test_localized_falls_back_to_other_language(self):
        record = {"title": "", "titleHi": "मंदिर"}
        self.assertEqual(localized(record, "title", "en"), "मंदिर")
        self.assertEqual(localized({"title": "Temple"}, "title", "hi"), "Temple")
        self.assertEqual(localized(None, "title", "en"), "")

    def test_template_tag(self):
        request = RequestFactory().get("/")
        request.LANG = "hi"
        rendered = Template('{% load temple_tags %}{% t "nav.contact" %}|{{ 1234567|inr }}').render(
            Context({"request": request}),
        )
        self.assertEqual(rendered, "संपर्क|12,34,567")


class LanguageSelectionTests(TestCase):
    def test_accept_language_header(self):
        response = self.client.get("/services/", HTTP_ACCEPT_LANGUAGE="hi-IN,hi;q=0.9")
        self.assertEqual(response.context["LANG"], "hi")

    def test_query_overrides_and_sticks(self):
        self.client.get("/services/?lang=hi")
        response = self.client.get("/services/", HTTP_ACCEPT_LANGUAGE="en")
        self.assertEqual(response.context["LANG"], "hi")

    def test_cookie_used_without_session(self):
        self.client.cookies["durgamaa_lang"] = "hi"
        response = self.client.get("/services/")
        self.assertEqual(response.context["LANG"], "hi")

    def test_post_language_switch(self):
        response = self.client.post("/language/", {"lang": "hi", "next": "/services/"})
        self.assertRedirects(response, "/services/", fetch_redirect_response=False)
        self.assertEqual(response.cookies["durgamaa_lang"].value, "hi")
        self.assertEqual(self.client.get("/services/").context["OTHER_LANG"], "en")

    def test_post_language_rejects_offsite_next(self):
        response = self.client.post("/language/", {"lang": "en", "next": "https://evil.example.com/"})
        self.assertEqual(response["Location"], "/")
