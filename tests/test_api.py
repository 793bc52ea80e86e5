"""Tests for the FastAPI endpoints.

Each test builds its own service context against a feed file in a temporary
directory, so the user's real configuration directory is never touched.
"""

import json
import tempfile
from pathlib import Path
from unittest import TestCase, mock

from fastapi.testclient import TestClient

from pseudofeed.app_server import create_app, parse_args
from pseudofeed.feed_utils import build_context
from pseudofeed.main.config import Settings
from pseudofeed.main.models import JSON_FEED_VERSION


class TestAPI(TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.path = Path(self._tmp.name) / "pseudofeed"
        self.context = build_context(Settings(feed_path=self.path))
        self.client = TestClient(create_app(self.context))

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_routes(self) -> None:
        paths = {route.path for route in self.client.app.routes}
        self.assertIn("/", paths)
        self.assertIn("/feed.json", paths)
        self.assertIn("/bookmarklet", paths)

    def test_fresh_feed_json(self) -> None:
        resp = self.client.get("/feed.json")
        self.assertEqual(200, resp.status_code)
        self.assertTrue(resp.headers["content-type"].startswith("application/json"))
        data = resp.json()
        self.assertEqual(JSON_FEED_VERSION, data["version"])
        self.assertEqual([], data["items"])

    def test_feed_json_is_raw_file(self) -> None:
        resp = self.client.get("/feed.json")
        self.assertEqual(self.path.read_bytes(), resp.content)

    def test_post_share_payload(self) -> None:
        resp = self.client.post(
            "/", json={"url": "Enver Hoxha - Wikipedia https://en.m.wikipedia.org/wiki/Enver_Hoxha"}
        )
        self.assertEqual(200, resp.status_code)
        self.assertEqual(b"", resp.content)

        items = self.client.get("/feed.json").json()["items"]
        self.assertEqual(1, len(items))
        self.assertEqual("Enver Hoxha - Wikipedia", items[0]["title"])
        self.assertEqual("https://en.m.wikipedia.org/wiki/Enver_Hoxha", items[0]["url"])
        self.assertEqual("https://en.m.wikipedia.org/wiki/Enver_Hoxha", items[0]["id"])
        self.assertEqual("https://en.m.wikipedia.org/wiki/Enver_Hoxha", items[0]["external_url"])
        self.assertIn("date_published", items[0])

    def test_post_bare_url_is_stored_whole(self) -> None:
        self.client.post("/", json={"url": "https://example.com/path"})
        item = self.client.get("/feed.json").json()["items"][0]
        self.assertEqual("https://example.com/path", item["title"])
        self.assertEqual("https://example.com/path", item["url"])

    def test_post_missing_url(self) -> None:
        resp = self.client.post("/", json={})
        self.assertEqual(400, resp.status_code)
        self.assertEqual({"error": "URL is required"}, resp.json())

    def test_post_blank_url(self) -> None:
        resp = self.client.post("/", json={"url": "   "})
        self.assertEqual(400, resp.status_code)

    def test_post_unparseable_body(self) -> None:
        resp = self.client.post("/", content=b"{oops", headers={"Content-Type": "application/json"})
        self.assertEqual(400, resp.status_code)
        body = resp.json()
        self.assertEqual("Invalid request", body["error"])
        self.assertIn("raw", body)

    def test_page_is_most_recent_first(self) -> None:
        self.client.post("/", json={"url": "First https://a.example/1"})
        self.client.post("/", json={"url": "Second https://b.example/2"})
        resp = self.client.get("/")
        self.assertEqual(200, resp.status_code)
        self.assertTrue(resp.headers["content-type"].startswith("text/html"))
        self.assertLess(resp.text.index("Second"), resp.text.index("First"))

        stored = [item["title"] for item in self.client.get("/feed.json").json()["items"]]
        self.assertEqual(["First", "Second"], stored)

    def test_bookmarklet_uses_request_host(self) -> None:
        resp = self.client.get("/bookmarklet", headers={"Host": "feeds.example:8081"})
        self.assertEqual(200, resp.status_code)
        self.assertTrue(resp.headers["content-type"].startswith("application/javascript"))
        self.assertIn('"feeds.example:8081"', resp.text)

    def test_corrupted_feed_returns_500(self) -> None:
        self.path.write_text("{not json", encoding="utf-8")
        for resp in (self.client.get("/"), self.client.post("/", json={"url": "https://example.com/"})):
            self.assertEqual(500, resp.status_code)
            body = resp.json()
            self.assertEqual("Error parsing stored feed", body["error"])
            self.assertIn("raw", body)

    def test_missing_feed_returns_500(self) -> None:
        self.path.unlink()
        resp = self.client.get("/feed.json")
        self.assertEqual(500, resp.status_code)
        body = resp.json()
        self.assertEqual("Error reading file", body["error"])
        self.assertIn("raw", body)

    def test_write_failure_returns_500(self) -> None:
        denied = PermissionError(13, "Permission denied", str(self.path))
        with mock.patch.object(Path, "write_bytes", side_effect=denied):
            resp = self.client.post("/", json={"url": "Example https://example.com/"})
        self.assertEqual(500, resp.status_code)
        body = resp.json()
        self.assertEqual("Error writing file", body["error"])
        self.assertIn("Permission denied", body["raw"])
        self.assertEqual([], self.client.get("/feed.json").json()["items"])

    def write_feed_with_date(self, value) -> None:
        self.path.write_text(
            json.dumps(
                {
                    "version": JSON_FEED_VERSION,
                    "title": "t",
                    "items": [{"id": "x", "url": "https://x.example/", "date_published": value}],
                }
            ),
            encoding="utf-8",
        )

    def test_invalid_stored_date_returns_500(self) -> None:
        for value in ("not a date", "2024-01-01", 1700000000, "2024-01-01T10:00:00"):
            with self.subTest(date_published=value):
                self.write_feed_with_date(value)
                resp = self.client.get("/")
                self.assertEqual(500, resp.status_code)
                self.assertEqual("Error parsing stored feed", resp.json()["error"])

    def test_stored_date_is_shown_in_its_offset(self) -> None:
        self.write_feed_with_date("2024-01-01T10:00:00+02:00")
        resp = self.client.get("/")
        self.assertEqual(200, resp.status_code)
        self.assertIn("2024-01-01 10:00:00", resp.text)

    def test_script_url_is_not_linked(self) -> None:
        resp = self.client.post("/", json={"url": "javascript:alert(document.cookie)"})
        self.assertEqual(200, resp.status_code)
        page = self.client.get("/").text
        self.assertNotIn('href="javascript:', page)
        self.assertIn('<a href="#">javascript:alert(document.cookie)</a>', page)


class TestCLI(TestCase):
    def test_parse_args(self) -> None:
        args = parse_args(["--port", "9000", "--log-level", "debug"])
        self.assertEqual("9000", args.port)
        self.assertEqual("debug", args.log_level)

    def test_defaults_come_from_settings(self) -> None:
        args = parse_args([])
        self.assertIsNone(args.port)
        self.assertIsNone(args.log_level)
