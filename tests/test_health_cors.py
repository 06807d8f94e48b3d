import tempfile
import unittest

from fastapi.testclient import TestClient

from support import AppHarness


class HealthTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.harness = AppHarness(self._tmp.name)

    def tearDown(self):
        self.harness.close()
        self._tmp.cleanup()

    def test_health_reports_database(self):
        res = self.harness.client.get(self.harness.url("/health"))
        self.assertEqual(res.status_code, 200)
        body = res.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["status"], "OK")
        self.assertEqual(body["database"], "connected")
        self.assertEqual(body["environment"], "test")
        self.assertIn("timestamp", body)

    def test_health_after_store_closed(self):
        self.harness.app.state.resume_store.close()
        body = self.harness.client.get(self.harness.url("/health")).json()
        self.assertEqual(body["database"], "disconnected")

    def test_unknown_route(self):
        res = self.harness.client.get(self.harness.url("/does-not-exist"))
        self.assertEqual(res.status_code, 404)
        self.assertEqual(res.json(), {"success": False, "message": "Route not found"})

    def test_unexpected_error_includes_stack_outside_production(self):
        def boom():
            raise RuntimeError("kaboom")

        self.harness.app.add_api_route("/boom", boom)
        client = TestClient(self.harness.app, raise_server_exceptions=False)
        res = client.get("/boom")
        self.assertEqual(res.status_code, 500)
        body = res.json()
        self.assertFalse(body["success"])
        self.assertEqual(body["message"], "kaboom")
        self.assertIn("RuntimeError", body["stack"])


class DevelopmentCorsTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.harness = AppHarness(self._tmp.name, environment="development")

    def tearDown(self):
        self.harness.close()
        self._tmp.cleanup()

    def test_any_origin_is_allowed(self):
        res = self.harness.client.get(self.harness.url("/health"), headers={"Origin": "http://random.test"})
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.headers.get("access-control-allow-origin"), "http://random.test")
        self.assertEqual(res.headers.get("access-control-allow-credentials"), "true")


class ProductionCorsTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.harness = AppHarness(
            self._tmp.name,
            environment="production",
            client_url="https://app.example.com",
            cors_allowed_origins=(),
        )
        self.client = self.harness.client

    def tearDown(self):
        self.harness.close()
        self._tmp.cleanup()

    def test_listed_origin_is_allowed(self):
        res = self.client.get(self.harness.url("/health"), headers={"Origin": "https://app.example.com"})
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.headers.get("access-control-allow-origin"), "https://app.example.com")

    def test_preflight_from_listed_origin(self):
        res = self.client.options(
            self.harness.url("/resumes"),
            headers={
                "Origin": "https://app.example.com",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "Authorization, Content-Type",
            },
        )
        self.assertEqual(res.status_code, 200)
        self.assertIn("POST", res.headers.get("access-control-allow-methods", ""))

    def test_unlisted_origin_is_403(self):
        res = self.client.get(self.harness.url("/health"), headers={"Origin": "https://evil.example.com"})
        self.assertEqual(res.status_code, 403)
        self.assertEqual(res.json(), {"success": False, "message": "CORS Error: Origin not allowed"})

    def test_requests_without_origin_pass(self):
        self.assertEqual(self.client.get(self.harness.url("/health")).status_code, 200)

    def test_no_stack_in_production(self):
        def boom():
            raise RuntimeError("kaboom")

        self.harness.app.add_api_route("/boom", boom)
        client = TestClient(self.harness.app, raise_server_exceptions=False)
        body = client.get("/boom").json()
        self.assertNotIn("stack", body)


if __name__ == "__main__":
    unittest.main()
