# users/tests/test_oauth.py

from unittest import mock

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIClient

from users.services import InvalidSessionError, UsersServiceError

User = get_user_model()

COOKIE = "lethashop_session_token"

REMOTE_USER = {
    "id": "remote-123",
    "email": "njeri@gmail.com",
    "google_user_data": {
        "name": "Njeri Mwangi",
        "given_name": "Njeri",
        "family_name": "Mwangi",
        "picture": "https://lh3.googleusercontent.com/njeri.png",
    },
}


class OAuthProxyTests(TestCase):
    """
    OAuth delegation to the external users service.

    GUARANTEES:
    - Redirect URL is proxied verbatim
    - Code exchange sets an HttpOnly, Secure, SameSite=None cookie (60 days)
    - Logout deletes the remote session and expires the cookie
    - Users-service outages surface as 502, never 500
    """

    def setUp(self):
        self.client = APIClient()

    @mock.patch("users.views.oauth.get_oauth_redirect_url")
    def test_redirect_url(self, redirect_mock):
        redirect_mock.return_value = "https://accounts.google.com/o/oauth2/auth?x=1"

        res = self.client.get("/api/auth/oauth/google/redirect_url/")

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["redirectUrl"], "https://accounts.google.com/o/oauth2/auth?x=1")
        redirect_mock.assert_called_once_with("google")

    def test_unsupported_provider(self):
        res = self.client.get("/api/auth/oauth/myspace/redirect_url/")
        self.assertEqual(res.status_code, 404)
        self.assertEqual(res.data["error"]["code"], "UNSUPPORTED_PROVIDER")

    @mock.patch("users.views.oauth.get_oauth_redirect_url")
    def test_redirect_url_service_down(self, redirect_mock):
        redirect_mock.side_effect = UsersServiceError("boom")

        res = self.client.get("/api/auth/oauth/google/redirect_url/")

        self.assertEqual(res.status_code, 502)
        self.assertEqual(res.data["error"]["code"], "USERS_SERVICE_ERROR")

    @mock.patch("users.views.oauth.exchange_code_for_session_token")
    def test_session_exchange_sets_cookie(self, exchange_mock):
        exchange_mock.return_value = "sess-abc"

        res = self.client.post("/api/auth/sessions/", {"code": "auth-code"}, format="json")

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data, {"success": True})
        exchange_mock.assert_called_once_with("auth-code")

        cookie = res.cookies[COOKIE]
        self.assertEqual(cookie.value, "sess-abc")
        self.assertTrue(cookie["httponly"])
        self.assertTrue(cookie["secure"])
        self.assertEqual(cookie["samesite"], "None")
        self.assertEqual(int(cookie["max-age"]), 60 * 24 * 60 * 60)

    def test_session_exchange_requires_code(self):
        res = self.client.post("/api/auth/sessions/", {}, format="json")
        self.assertEqual(res.status_code, 400)

    @mock.patch("users.views.oauth.delete_session")
    def test_logout_deletes_remote_session_and_cookie(self, delete_mock):
        self.client.cookies[COOKIE] = "sess-abc"

        res = self.client.get("/api/auth/logout/")

        self.assertEqual(res.status_code, 200)
        delete_mock.assert_called_once_with("sess-abc")
        self.assertEqual(res.cookies[COOKIE].value, "")
        self.assertEqual(int(res.cookies[COOKIE]["max-age"]), 0)

    @mock.patch("users.views.oauth.delete_session")
    def test_logout_without_cookie_skips_remote_call(self, delete_mock):
        res = self.client.get("/api/auth/logout/")

        self.assertEqual(res.status_code, 200)
        delete_mock.assert_not_called()


class SessionCookieAuthenticationTests(TestCase):
    """
    GUARANTEES:
    - A valid cookie authenticates and maps to a local user by email
    - First sight creates the local account with Google profile data
    - Rejected cookies / outages leave the request anonymous
    - Malformed remote profiles never surface as 500s
    """

    def setUp(self):
        self.client = APIClient()
        self.client.cookies[COOKIE] = "sess-abc"

    @mock.patch("users.authentication.get_current_user")
    def test_cookie_creates_local_user(self, remote_mock):
        remote_mock.return_value = REMOTE_USER

        res = self.client.get("/api/auth/me/")

        self.assertEqual(res.status_code, 200, res.data)
        self.assertEqual(res.data["email"], "njeri@gmail.com")
        self.assertEqual(res.data["name"], "Njeri Mwangi")

        user = User.objects.get(email="njeri@gmail.com")
        self.assertFalse(user.has_usable_password())
        self.assertEqual(user.avatar_url, "https://lh3.googleusercontent.com/njeri.png")

    @mock.patch("users.authentication.get_current_user")
    def test_cookie_maps_to_existing_user(self, remote_mock):
        remote_mock.return_value = REMOTE_USER
        existing = User.objects.create_user(
            email="njeri@gmail.com", password="secret12", name="Njeri"
        )

        res = self.client.get("/api/users/me/")

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["id"], str(existing.id))
        # existing profile fields are not overwritten
        self.assertEqual(res.data["name"], "Njeri")
        self.assertEqual(User.objects.filter(email="njeri@gmail.com").count(), 1)

    @mock.patch("users.authentication.get_current_user")
    def test_rejected_cookie_is_anonymous(self, remote_mock):
        remote_mock.side_effect = InvalidSessionError("expired")

        res = self.client.get("/api/auth/me/")

        self.assertEqual(res.status_code, 401)

    @mock.patch("users.authentication.get_current_user")
    def test_users_service_outage_is_anonymous(self, remote_mock):
        remote_mock.side_effect = UsersServiceError("down")

        res = self.client.get("/api/auth/me/")

        self.assertEqual(res.status_code, 401)

    @mock.patch("users.authentication.get_current_user")
    def test_disabled_local_user_rejected(self, remote_mock):
        remote_mock.return_value = REMOTE_USER
        User.objects.create_user(email="njeri@gmail.com", password=None, is_active=False)

        res = self.client.get("/api/auth/me/")

        self.assertEqual(res.status_code, 401)

    @mock.patch("users.authentication.get_current_user")
    def test_invalid_picture_is_dropped(self, remote_mock):
        remote_mock.return_value = {
            "email": "wanjiru@example.com",
            "google_user_data": {"name": "Wanjiru", "picture": "not a url"},
        }

        res = self.client.get("/api/auth/me/")

        self.assertEqual(res.status_code, 200, res.data)
        user = User.objects.get(email="wanjiru@example.com")
        self.assertEqual(user.avatar_url, "")
        self.assertEqual(user.name, "Wanjiru")

    @mock.patch("users.authentication.get_current_user")
    def test_invalid_remote_email_is_anonymous(self, remote_mock):
        remote_mock.return_value = {"email": "not-an-email"}

        res = self.client.get("/api/auth/me/")

        self.assertEqual(res.status_code, 401)
        self.assertFalse(User.objects.exists())
