# users/tests/test_auth.py

from django.contrib.auth import get_user_model
from django.test import TestCase, override_settings
from rest_framework.test import APIClient

User = get_user_model()


class SignUpTests(TestCase):
    """
    Email + password registration.

    GUARANTEES:
    - Signup returns the user plus a usable JWT pair
    - Password must be at least 6 characters
    - Duplicate emails are rejected
    - Shop-domain emails become admins; everyone else is a customer
    """

    def setUp(self):
        self.client = APIClient()

    def test_signup_returns_user_and_tokens(self):
        res = self.client.post(
            "/api/auth/signup/",
            {"email": "wanjiru@example.com", "password": "secret12", "name": "Wanjiru"},
            format="json",
        )

        self.assertEqual(res.status_code, 201, res.data)
        self.assertEqual(res.data["user"]["email"], "wanjiru@example.com")
        self.assertEqual(res.data["user"]["name"], "Wanjiru")
        self.assertEqual(res.data["user"]["role"], "customer")
        self.assertTrue(res.data["access"])
        self.assertTrue(res.data["refresh"])
        self.assertNotIn("password", res.data["user"])

    def test_short_password_rejected(self):
        res = self.client.post(
            "/api/auth/signup/",
            {"email": "short@example.com", "password": "12345"},
            format="json",
        )

        self.assertEqual(res.status_code, 400)
        self.assertIn("password", res.data)
        self.assertFalse(User.objects.filter(email="short@example.com").exists())

    def test_duplicate_email_rejected(self):
        User.objects.create_user(email="taken@example.com", password="secret12")

        res = self.client.post(
            "/api/auth/signup/",
            {"email": "TAKEN@example.com", "password": "secret12"},
            format="json",
        )

        self.assertEqual(res.status_code, 400)
        self.assertIn("email", res.data)

    def test_shop_domain_email_becomes_admin(self):
        res = self.client.post(
            "/api/auth/signup/",
            {"email": "owner@lethashop.com", "password": "secret12"},
            format="json",
        )

        self.assertEqual(res.status_code, 201)
        self.assertEqual(res.data["user"]["role"], "admin")
        self.assertTrue(res.data["user"]["is_admin"])

    @override_settings(SHOP={"ADMIN_EMAIL_DOMAINS": []})
    def test_no_admin_domains_means_customer(self):
        res = self.client.post(
            "/api/auth/signup/",
            {"email": "owner@lethashop.com", "password": "secret12"},
            format="json",
        )

        self.assertEqual(res.status_code, 201)
        self.assertEqual(res.data["user"]["role"], "customer")

    def test_admin_substring_in_email_is_not_admin(self):
        res = self.client.post(
            "/api/auth/signup/",
            {"email": "admin.fan@example.com", "password": "secret12"},
            format="json",
        )

        self.assertEqual(res.status_code, 201)
        self.assertEqual(res.data["user"]["role"], "customer")
        self.assertFalse(res.data["user"]["is_admin"])


class SignInTests(TestCase):
    """
    GUARANTEES:
    - Correct credentials return a JWT pair that authenticates /me
    - Wrong password / unknown email share one generic error
    - Disabled accounts cannot sign in
    """

    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(
            email="kamau@example.com", password="secret12", name="Kamau"
        )

    def test_signin_and_me(self):
        res = self.client.post(
            "/api/auth/signin/",
            {"email": "kamau@example.com", "password": "secret12"},
            format="json",
        )
        self.assertEqual(res.status_code, 200, res.data)

        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {res.data['access']}")
        me = self.client.get("/api/auth/me/")

        self.assertEqual(me.status_code, 200)
        self.assertEqual(me.data["email"], "kamau@example.com")
        self.assertEqual(me.data["name"], "Kamau")

    def test_wrong_password(self):
        res = self.client.post(
            "/api/auth/signin/",
            {"email": "kamau@example.com", "password": "nope-nope"},
            format="json",
        )

        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["detail"], "Invalid email or password")

    def test_unknown_email(self):
        res = self.client.post(
            "/api/auth/signin/",
            {"email": "ghost@example.com", "password": "secret12"},
            format="json",
        )

        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["detail"], "Invalid email or password")

    def test_disabled_account(self):
        self.user.is_active = False
        self.user.save(update_fields=["is_active"])

        res = self.client.post(
            "/api/auth/signin/",
            {"email": "kamau@example.com", "password": "secret12"},
            format="json",
        )

        self.assertEqual(res.status_code, 403)

    def test_me_requires_authentication(self):
        res = self.client.get("/api/auth/me/")
        self.assertEqual(res.status_code, 401)


class SignOutTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        User.objects.create_user(email="otieno@example.com", password="secret12")

    def test_signout_blacklists_refresh_token(self):
        tokens = self.client.post(
            "/api/auth/signin/",
            {"email": "otieno@example.com", "password": "secret12"},
            format="json",
        ).data

        res = self.client.post(
            "/api/auth/signout/", {"refresh": tokens["refresh"]}, format="json"
        )
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data, {"success": True})

        refreshed = self.client.post(
            "/api/auth/token/refresh/", {"refresh": tokens["refresh"]}, format="json"
        )
        self.assertEqual(refreshed.status_code, 401)

    def test_signout_without_token_still_succeeds(self):
        res = self.client.post("/api/auth/signout/", {}, format="json")
        self.assertEqual(res.status_code, 200)


class TokenRefreshTests(TestCase):
    """
    GUARANTEES:
    - Refresh returns a new access token and a rotated refresh token
    - A rotated-out refresh token cannot be used again
    """

    def setUp(self):
        self.client = APIClient()
        User.objects.create_user(email="mutua@example.com", password="secret12")
        self.tokens = self.client.post(
            "/api/auth/signin/",
            {"email": "mutua@example.com", "password": "secret12"},
            format="json",
        ).data

    def _refresh(self, token):
        return self.client.post("/api/auth/token/refresh/", {"refresh": token}, format="json")

    def test_refresh_rotates_tokens(self):
        res = self._refresh(self.tokens["refresh"])

        self.assertEqual(res.status_code, 200, res.data)
        self.assertTrue(res.data["access"])
        self.assertTrue(res.data["refresh"])
        self.assertNotEqual(res.data["refresh"], self.tokens["refresh"])

        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {res.data['access']}")
        me = self.client.get("/api/auth/me/")
        self.assertEqual(me.status_code, 200)
        self.assertEqual(me.data["email"], "mutua@example.com")

    def test_rotated_refresh_token_is_rejected(self):
        first = self._refresh(self.tokens["refresh"])
        self.assertEqual(first.status_code, 200)

        again = self._refresh(self.tokens["refresh"])
        self.assertEqual(again.status_code, 401)

        # the replacement keeps working
        self.assertEqual(self._refresh(first.data["refresh"]).status_code, 200)

    def test_garbage_refresh_token_is_rejected(self):
        self.assertEqual(self._refresh("not-a-token").status_code, 401)


class ProfileTests(TestCase):
    """
    GUARANTEES:
    - Only name + avatar_url are editable
    - Role / email in the payload are ignored
    - An empty payload is rejected
    """

    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(email="achieng@example.com", password="secret12")
        self.client.force_authenticate(self.user)

    def test_update_name_and_avatar(self):
        res = self.client.put(
            "/api/auth/profile/",
            {"name": "Achieng O.", "avatar_url": "https://cdn.example.com/a.png"},
            format="json",
        )

        self.assertEqual(res.status_code, 200, res.data)
        self.user.refresh_from_db()
        self.assertEqual(self.user.name, "Achieng O.")
        self.assertEqual(self.user.avatar_url, "https://cdn.example.com/a.png")

    def test_role_and_email_are_not_editable(self):
        res = self.client.patch(
            "/api/auth/profile/",
            {"name": "New Name", "role": "admin", "email": "evil@lethashop.com"},
            format="json",
        )

        self.assertEqual(res.status_code, 200)
        self.user.refresh_from_db()
        self.assertEqual(self.user.role, "customer")
        self.assertEqual(self.user.email, "achieng@example.com")

    def test_empty_update_rejected(self):
        res = self.client.put("/api/auth/profile/", {"role": "admin"}, format="json")
        self.assertEqual(res.status_code, 400)


class AdminFlagTests(TestCase):
    """
    GUARANTEES:
    - is_admin in the user payload follows the stored role
    - Superusers are reported as admins whatever their role
    """

    def test_superuser_with_customer_role_is_admin(self):
        user = User.objects.create_superuser(email="root@example.com", password="secret12")
        User.objects.filter(pk=user.pk).update(role="customer")
        user.refresh_from_db()

        client = APIClient()
        client.force_authenticate(user)
        res = client.get("/api/auth/me/")

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["role"], "customer")
        self.assertTrue(res.data["is_admin"])

    def test_customer_is_not_admin(self):
        user = User.objects.create_user(email="shopper@example.com", password="secret12")

        client = APIClient()
        client.force_authenticate(user)
        res = client.get("/api/auth/me/")

        self.assertFalse(res.data["is_admin"])
