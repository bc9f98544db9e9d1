from django.test import Client, SimpleTestCase, TestCase, override_settings


@override_settings(
    DEBUG=False,
    DATABASES={"default": {"ENGINE": "django.db.backends.sqlite3", "NAME": ":memory:"}}
)
class ErrorHandlerTests(SimpleTestCase):
    def test_custom_404_template_used(self):
        response = self.client.get('/this-url-does-not-exist/')
        self.assertEqual(response.status_code, 404)
        self.assertTemplateUsed(response, '404.html')


class CsrfFailureTests(TestCase):
    def test_csrf_failure_page(self):
        client = Client(enforce_csrf_checks=True)
        response = client.post('/language/', {"lang": "hi"})
        self.assertEqual(response.status_code, 403)
        self.assertTemplateUsed(response, 'csrf_failure.html')


@override_settings(MAINTENANCE_MODE=True)
class MaintenanceModeTests(TestCase):
    def test_public_pages_redirect(self):
        response = self.client.get('/services/')
        self.assertRedirects(response, '/maintenance/', fetch_redirect_response=False)

    def test_console_still_reachable(self):
        response = self.client.get('/admin/login/')
        self.assertEqual(response.status_code, 200)
