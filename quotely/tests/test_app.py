import unittest
from unittest.mock import patch

from fastapi.testclient import TestClient

from quotely import dependencies, selection
from quotely.app import create_app
from quotely.db import STATUS_APPROVED, STATUS_PENDING, InMemoryDbClient, PostgresDbClient
from quotely.dependencies import get_db_client
from quotely.errors import StoreError
from quotely.sample_data import SAMPLE_PROVERBS, SAMPLE_QUOTES

USER = {"X-User-Id": "user-1234567890"}


class BackendApiTests(unittest.TestCase):
    def setUp(self):
        self.db = InMemoryDbClient()
        app = create_app()
        app.dependency_overrides[get_db_client] = lambda: self.db
        self.client = TestClient(app)

    def _seed_quotes(self, count):
        return [
            self.db.create_quote(
                content=f"quote {n}", author="Anon", created_at=float(n)
            )
            for n in range(count)
        ]

    def test_health(self):
        response = self.client.get("/api/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["database"], "Connected")

    def test_list_quotes_paginates(self):
        self._seed_quotes(25)
        response = self.client.get("/api/quotes", params={"page": 2, "limit": 10})
        self.assertEqual(response.status_code, 200)
        payload = response.json()
        self.assertTrue(payload["success"])
        self.assertEqual(len(payload["data"]), 10)
        self.assertEqual(payload["data"][0]["content"], "quote 14")
        self.assertEqual(
            payload["pagination"], {"page": 2, "limit": 10, "total": 25, "pages": 3}
        )

    def test_list_quotes_caps_limit(self):
        self._seed_quotes(3)
        payload = self.client.get("/api/quotes", params={"limit": 5000}).json()
        self.assertEqual(payload["pagination"]["limit"], 100)

    def test_invalid_page_is_400(self):
        response = self.client.get("/api/quotes", params={"page": 0})
        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.json()["success"])
        self.assertEqual(response.json()["error"], "Invalid request")

    def test_get_quote_and_missing(self):
        quote = self._seed_quotes(1)[0]
        response = self.client.get(f"/api/quotes/{quote.id}")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["id"], quote.id)

        missing = self.client.get("/api/quotes/9999")
        self.assertEqual(missing.status_code, 404)
        self.assertEqual(missing.json(), {"success": False, "error": "Quote not found"})

    def test_daily_and_random_quote(self):
        quotes = self._seed_quotes(4)
        day = selection.today_in("UTC")
        expected = quotes[selection.daily_index(day, 4)]
        for path in ("/api/quotes/daily", "/api/dashboard/daily"):
            payload = self.client.get(path).json()
            self.assertEqual(payload["data"]["id"], expected.id)

        payload = self.client.get("/api/quotes/random").json()
        self.assertIn(payload["data"]["id"], {q.id for q in quotes})

    def test_daily_with_no_quotes(self):
        response = self.client.get("/api/quotes/daily")
        self.assertEqual(response.status_code, 200)
        payload = response.json()
        self.assertTrue(payload["success"])
        self.assertIsNone(payload["data"])
        self.assertEqual(payload["message"], "No quotes available")

    def test_submit_quote_requires_user(self):
        body = {"content": "New wisdom", "author": "Me", "tags": ["new", " "]}
        anonymous = self.client.post("/api/quotes", json=body)
        self.assertEqual(anonymous.status_code, 401)
        self.assertEqual(anonymous.json()["error"], "Authentication required")

        response = self.client.post("/api/quotes", json=body, headers=USER)
        self.assertEqual(response.status_code, 201)
        data = response.json()["data"]
        self.assertEqual(data["submitted_by"], USER["X-User-Id"])
        self.assertEqual(data["tags"], ["new"])

    def test_categories(self):
        self.db.create_quote(content="a", author="x", category="Life")
        self.db.create_quote(content="b", author="x", category="Motivation")
        self.db.create_quote(content="c", author="x", category="Life")
        payload = self.client.get("/api/quotes/categories").json()
        self.assertEqual(payload["data"], ["Life", "Motivation"])

    def test_like_toggle(self):
        quote = self._seed_quotes(1)[0]
        first = self.client.post(f"/api/quotes/{quote.id}/like", headers=USER).json()
        self.assertEqual(first["data"], {"quote_id": quote.id, "liked": True, "like_count": 1})
        second = self.client.post(f"/api/quotes/{quote.id}/like", headers=USER).json()
        self.assertFalse(second["data"]["liked"])
        self.assertEqual(second["data"]["like_count"], 0)

    def test_proverbs_public_listing_hides_pending(self):
        approved = self.db.create_proverb(content="seen", status=STATUS_APPROVED)
        pending = self.db.create_proverb(content="unseen", status=STATUS_PENDING)

        payload = self.client.get("/api/proverbs").json()
        self.assertEqual([p["id"] for p in payload["data"]], [approved.id])
        self.assertEqual(self.client.get(f"/api/proverbs/{pending.id}").status_code, 404)
        self.assertEqual(self.client.get(f"/api/proverbs/{approved.id}").status_code, 200)
        self.assertEqual(
            self.client.get("/api/proverbs/random").json()["data"]["id"], approved.id
        )

    def test_submit_proverb_is_pending(self):
        response = self.client.post(
            "/api/proverbs",
            json={"content": "Still waters run deep.", "origin": "English"},
            headers=USER,
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["data"]["status"], STATUS_PENDING)
        self.assertEqual(self.client.get("/api/proverbs").json()["data"], [])

    def test_favorites_flow(self):
        quote = self._seed_quotes(1)[0]

        missing = self.client.post("/api/favorites", json={}, headers=USER)
        self.assertEqual(missing.status_code, 400)
        self.assertEqual(missing.json()["error"], "Missing quote_id")

        added = self.client.post(
            "/api/favorites", json={"quote_id": quote.id}, headers=USER
        )
        self.assertEqual(added.status_code, 201)
        self.assertEqual(added.json()["message"], "Added to favorites")

        duplicate = self.client.post(
            "/api/favorites", json={"quote_id": quote.id}, headers=USER
        )
        self.assertEqual(duplicate.status_code, 400)
        self.assertEqual(duplicate.json()["error"], "Already favorited")
        self.assertEqual(self.db.count_favorites(), 1)

        check = self.client.get(f"/api/favorites/check/{quote.id}", headers=USER)
        self.assertEqual(check.json(), {"success": True, "is_favorited": True})

        listing = self.client.get("/api/favorites", headers=USER).json()
        self.assertEqual(listing["data"][0]["quote"]["id"], quote.id)
        self.assertEqual(listing["pagination"]["total"], 1)

        for _ in range(2):
            removed = self.client.delete(f"/api/favorites/{quote.id}", headers=USER)
            self.assertEqual(removed.status_code, 200)
            self.assertTrue(removed.json()["success"])

    def test_favorite_unknown_quote(self):
        response = self.client.post(
            "/api/favorites", json={"quote_id": 404}, headers=USER
        )
        self.assertEqual(response.status_code, 404)

    def test_profile_get_or_create_and_update(self):
        first = self.client.get("/api/users/profile", headers=USER).json()
        self.assertEqual(first["message"], "Profile created")
        self.assertEqual(first["data"]["username"], "user_user-123")

        updated = self.client.put(
            "/api/users/profile", json={"bio": "Reader"}, headers=USER
        ).json()
        self.assertEqual(updated["data"]["bio"], "Reader")

        again = self.client.get("/api/users/profile", headers=USER).json()
        self.assertIsNone(again["message"])
        self.assertEqual(again["data"]["bio"], "Reader")

    def test_user_stats_and_my_quotes(self):
        mine = self.db.create_quote(content="m", author="me", submitted_by=USER["X-User-Id"])
        self.db.create_like("someone", mine.id)
        stats = self.client.get("/api/users/stats", headers=USER).json()["data"]
        self.assertEqual(stats["submitted_quotes"], 1)
        self.assertEqual(stats["total_likes_received"], 1)

        page = self.client.get("/api/users/my-quotes", headers=USER).json()
        self.assertEqual([q["id"] for q in page["data"]], [mine.id])

    def test_dashboard(self):
        self._seed_quotes(12)
        self.db.create_proverb(content="p", status=STATUS_APPROVED)
        response = self.client.get("/api/dashboard", headers=USER)
        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        self.assertEqual(data["total_quotes"], 12)
        self.assertEqual(data["total_proverbs"], 1)
        self.assertEqual(data["user_quotes"], 0)
        self.assertEqual(len(data["recent_quotes"]), 10)
        self.assertEqual(data["recent_quotes"][0]["content"], "quote 11")
        self.assertEqual(len(data["recent_proverbs"]), 1)

    def test_dashboard_fails_closed(self):
        with patch.object(self.db, "count_profiles", side_effect=StoreError("down")):
            response = self.client.get("/api/dashboard", headers=USER)
        self.assertEqual(response.status_code, 500)
        payload = response.json()
        self.assertEqual(payload["error"], "Failed to fetch dashboard stats")
        self.assertIn("total_users", payload["message"])

    def test_trending(self):
        quotes = self._seed_quotes(3)
        self.db.create_like("a", quotes[0].id)
        response = self.client.get("/api/dashboard/trending", headers=USER)
        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        self.assertEqual(data[0]["id"], quotes[0].id)
        self.assertEqual(data[0]["like_count"], 1)
        self.assertEqual(
            self.client.get("/api/dashboard/trending").status_code, 401
        )

    def test_store_failure_is_500_with_route_message(self):
        with patch.object(self.db, "count_quotes", side_effect=StoreError("boom")):
            response = self.client.get("/api/quotes")
        self.assertEqual(response.status_code, 500)
        self.assertEqual(
            response.json(), {"success": False, "error": "Failed to fetch quotes"}
        )

    def test_system_health(self):
        data = self.client.get("/api/dashboard/health").json()["data"]
        self.assertTrue(all(data["tables"].values()))
        self.assertIn("timestamp", data)

    def test_unknown_route(self):
        response = self.client.get("/api/nope")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["error"], "Not found")


if __name__ == "__main__":
    unittest.main()


class DependencyWiringTests(unittest.TestCase):
    def setUp(self):
        dependencies._db_client = None

    def tearDown(self):
        dependencies._db_client = None

    @patch("quotely.dependencies.get_settings")
    def test_in_memory_backend_with_sample_data(self, mock_settings):
        mock_settings.return_value = type(
            "Settings",
            (),
            {
                "use_in_memory_backends": True,
                "database_url": None,
                "seed_sample_data": True,
            },
        )()
        db = dependencies.get_db_client()
        self.assertIsInstance(db, InMemoryDbClient)
        self.assertIs(dependencies.get_db_client(), db)
        self.assertEqual(db.count_quotes(), len(SAMPLE_QUOTES))
        self.assertEqual(db.count_proverbs(), len(SAMPLE_PROVERBS))

    @patch("quotely.dependencies.get_settings")
    def test_database_url_selects_sql_backend(self, mock_settings):
        mock_settings.return_value = type(
            "Settings",
            (),
            {
                "use_in_memory_backends": False,
                "database_url": "sqlite+pysqlite:///:memory:",
                "seed_sample_data": False,
            },
        )()
        db = dependencies.get_db_client()
        self.assertIsInstance(db, PostgresDbClient)
        db.engine.dispose()
