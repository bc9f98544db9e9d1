from contextlib import ExitStack
from unittest.mock import Mock, patch

from durgamandir.middleware import CONSOLE_USER_KEY
from templeapi.client import SESSION_COOKIES_KEY


class ConsoleTestMixin:
    """Signed-in console session with a mocked backend."""

    modules = ("console.views", "console.content", "console.expenses")

    def setUp(self):
        super().setUp()
        self.api = Mock()
        self.api.check_auth.return_value = True
        stack = ExitStack()
        stack.enter_context(patch("console.decorators.client_for", return_value=self.api))
        for module in self.modules:
            stack.enter_context(patch(f"{module}.client_for", return_value=self.api))
        self.addCleanup(stack.close)
        self.sign_in()

    def sign_in(self, user="admin"):
        session = self.client.session
        session[SESSION_COOKIES_KEY] = {"JSESSIONID": "abc"}
        session[CONSOLE_USER_KEY] = user
        session.save()
