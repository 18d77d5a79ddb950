import unittest

from tests.support import ContestHubTestCase
from utils.access import ACCESS_POLICY


class AccessPolicyTests(ContestHubTestCase):

    def test_policy_names_registered_endpoints(self):
        endpoints = {rule.endpoint for rule in self.app.url_map.iter_rules()}
        self.assertEqual(set(ACCESS_POLICY) - endpoints, set())

    def test_public_routes_need_no_token(self):
        for path in ("/", "/health", "/contests", "/contests/popular", "/contests/search?type=logo"):
            self.assertEqual(self.client.get(path).status_code, 200, path)

    def test_malformed_header_is_unauthorized(self):
        response = self.client.post("/contests", json={}, headers={"Authorization": "Token abc"})
        self.assertEqual(response.status_code, 401)
        response = self.client.post("/contests", json={}, headers={"Authorization": "Bearer "})
        self.assertEqual(response.status_code, 401)

    def test_unknown_principal_fails_role_check(self):
        self.identity.add("token-new", "new@x.com")
        response = self.client.get("/admin/users", headers=self.headers("token-new"))
        self.assertEqual(response.status_code, 403)

    def test_preflight_skips_authentication(self):
        response = self.client.options(
            "/contests",
            headers={"Origin": "http://localhost:5173", "Access-Control-Request-Method": "POST"},
        )
        self.assertEqual(response.status_code, 200)

    def test_unexpected_errors_become_upstream_failures(self):
        def broken():
            raise RuntimeError("connection reset by datastore")

        self.store.list_contests = lambda **kwargs: broken()
        response = self.client.get("/contests")
        self.assertEqual(response.status_code, 502)
        self.assertNotIn("datastore", response.get_json()["message"])

    def test_unknown_route_is_json_404(self):
        response = self.client.get("/nowhere")
        self.assertEqual(response.status_code, 404)
        self.assertIn("message", response.get_json())


if __name__ == "__main__":
    unittest.main()
