# backend/tests/test_health.py

from unittest import mock

from django.db.utils import DatabaseError
from django.test import TestCase
from rest_framework.test import APIClient


class ApiRootTests(TestCase):
    """
    GUARANTEES:
    - /api/ is public and lists the main entry points
    """

    def test_api_root_is_public(self):
        res = APIClient().get("/api/")

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["message"], "LethaShop API is running")
        self.assertEqual(res.data["auth"]["signin"], "/api/auth/signin/")
        self.assertEqual(res.data["modules"]["products"], "/api/products/")
        self.assertEqual(res.data["docs"]["swagger"], "/api/docs/")


class HealthCheckTests(TestCase):
    """
    GUARANTEES:
    - Healthy DB -> 200 {"status": "ok", "db": "ok"}
    - DB errors -> 503 "degraded", never a 500
    - No authentication required (stale credentials are ignored)
    """

    def setUp(self):
        self.client = APIClient()

    def test_healthy(self):
        res = self.client.get("/api/health/")

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data, {"status": "ok", "db": "ok"})

    def test_ignores_bad_bearer_token(self):
        self.client.credentials(HTTP_AUTHORIZATION="Bearer not-a-jwt")

        res = self.client.get("/api/health/")

        self.assertEqual(res.status_code, 200)

    @mock.patch("backend.urls.connections")
    def test_database_down_is_503(self, connections_mock):
        connections_mock.__getitem__.return_value.cursor.side_effect = DatabaseError(
            "connection refused"
        )

        res = self.client.get("/api/health/")

        self.assertEqual(res.status_code, 503)
        self.assertEqual(res.data["status"], "degraded")
        self.assertEqual(res.data["db"], "down")
        self.assertIn("connection refused", res.data["error"])
