import unittest
from unittest.mock import MagicMock, patch

import requests

from wikifeed.adapters.wiki_api import WikiApiClient
from wikifeed.errors import TransportError
from wikifeed.http_client import HttpClient

CONTENT_PAYLOAD = {
    "batchcomplete": "",
    "query": {
        "pages": {
            "736": {
                "pageid": 736,
                "ns": 0,
                "title": "Albert Einstein",
                "extract": "Albert Einstein was a theoretical physicist.\n\nHe developed relativity.",
                "categories": [
                    {"ns": 14, "title": "Category:20th-century physicists"},
                    {"ns": 14, "title": "Category:Articles with hCards"},
                ],
                "links": [
                    {"ns": 0, "title": "Annus mirabilis papers"},
                    {"ns": 0, "title": "Photoelectric effect"},
                ],
            }
        }
    },
}

MISSING_PAYLOAD = {"query": {"pages": {"-1": {"ns": 0, "title": "Nowhere land", "missing": ""}}}}

IMAGE_PAYLOAD = {
    "query": {
        "pages": {
            "736": {
                "title": "Albert Einstein",
                "original": {"source": "https://upload.example/Einstein.jpg", "width": 800, "height": 1000},
                "pageimage": "Einstein.jpg",
            }
        }
    }
}

RANDOM_PAYLOAD = {"query": {"random": [{"id": 1, "ns": 0, "title": "Lake Bled"}, {"id": 2, "ns": 0, "title": "Otter"}]}}

SEARCH_PAYLOAD = {"query": {"search": [{"ns": 0, "title": "Sea otter", "snippet": "..."}]}}


class WikiApiClientTests(unittest.TestCase):
    def setUp(self):
        self.http = MagicMock()
        self.client = WikiApiClient(http=self.http)

    def test_fetch_page_maps_content(self):
        self.http.get_json.return_value = CONTENT_PAYLOAD
        page = self.client.fetch_page("Albert Einstein")

        self.assertEqual(page.title, "Albert Einstein")
        self.assertFalse(page.missing)
        self.assertIn("relativity", page.extract)
        self.assertEqual(page.categories[0], "Category:20th-century physicists")
        self.assertEqual(page.links, ["Annus mirabilis papers", "Photoelectric effect"])

        params = self.http.get_json.call_args.kwargs["params"]
        self.assertEqual(params["action"], "query")
        self.assertEqual(params["prop"], "extracts|categories|links")
        self.assertEqual(params["pllimit"], 50)
        self.assertEqual(params["titles"], "Albert Einstein")

    def test_missing_flag_is_parsed(self):
        self.http.get_json.return_value = MISSING_PAYLOAD
        page = self.client.fetch_page("Nowhere land")
        self.assertTrue(page.missing)
        self.assertIsNone(page.extract)

    def test_fetch_image(self):
        self.http.get_json.return_value = IMAGE_PAYLOAD
        image = self.client.fetch_image("Albert Einstein")
        self.assertEqual(image.url, "https://upload.example/Einstein.jpg")
        self.assertEqual(image.caption, "Einstein.jpg")

    def test_random_and_search(self):
        self.http.get_json.return_value = RANDOM_PAYLOAD
        self.assertEqual(self.client.random_titles(limit=2, min_size=3000, non_redirects=True), ["Lake Bled", "Otter"])
        params = self.http.get_json.call_args.kwargs["params"]
        self.assertEqual(params["rnnamespace"], 0)
        self.assertEqual(params["rnminsize"], 3000)
        self.assertEqual(params["rnfilterredir"], "nonredirects")

        self.http.get_json.return_value = SEARCH_PAYLOAD
        self.assertEqual(self.client.search("otter"), ["Sea otter"])

    def test_summaries_batch_titles(self):
        self.http.get_json.return_value = {"query": {"pages": {}}}
        self.assertEqual(self.client.fetch_summaries(["A", "B"]), [])
        params = self.http.get_json.call_args.kwargs["params"]
        self.assertEqual(params["titles"], "A|B")
        self.assertEqual(params["exintro"], 1)
        self.assertEqual(self.client.fetch_summaries([]), [])
        self.assertEqual(self.http.get_json.call_count, 1)

    def test_malformed_payload_raises_transport_error(self):
        self.http.get_json.return_value = {"query": {"pages": {"1": {"title": "X", "links": "oops"}}}}
        with self.assertRaises(TransportError):
            self.client.fetch_page("X")
        self.assertFalse(self.client.health.healthy)
        self.assertEqual(self.client.health.failures, 1)

    def test_transport_error_updates_health(self):
        self.http.get_json.side_effect = TransportError("HTTP 503")
        with self.assertRaises(TransportError):
            self.client.search("otter")
        self.assertEqual(self.client.health.last_error, "HTTP 503")


class HttpClientTests(unittest.TestCase):
    @patch("wikifeed.http_client.requests.Session.get")
    def test_non_200_raises(self, mock_get):
        mock_get.return_value = MagicMock(status_code=503, text="busy")
        with self.assertRaises(TransportError):
            HttpClient().get_json("https://example.com/api")

    @patch("wikifeed.http_client.requests.Session.get")
    def test_connection_error_raises(self, mock_get):
        mock_get.side_effect = requests.ConnectionError("refused")
        with self.assertRaises(TransportError):
            HttpClient().get_json("https://example.com/api")

    @patch("wikifeed.http_client.requests.Session.get")
    def test_returns_json(self, mock_get):
        response = MagicMock(status_code=200)
        response.json.return_value = {"query": {}}
        mock_get.return_value = response
        self.assertEqual(HttpClient().get_json("https://example.com/api"), {"query": {}})


if __name__ == "__main__":
    unittest.main()
