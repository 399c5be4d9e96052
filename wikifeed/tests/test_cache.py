import unittest
from unittest.mock import MagicMock

from wikifeed.cache import ImagePositionCache
from wikifeed.models import DEFAULT_IMAGE_POSITION


class ImagePositionCacheTests(unittest.TestCase):
    def test_provider_runs_once_per_url(self):
        provider = MagicMock(return_value="40% 20%")
        cache = ImagePositionCache(provider=provider, max_entries=5)

        self.assertEqual(cache.position_for("https://img/a.jpg"), "40% 20%")
        self.assertEqual(cache.position_for("https://img/a.jpg"), "40% 20%")

        provider.assert_called_once_with("https://img/a.jpg")
        snapshot = cache.snapshot()
        self.assertEqual(snapshot["hits"], 1)
        self.assertEqual(snapshot["misses"], 1)

    def test_evicts_least_recently_used(self):
        cache = ImagePositionCache(max_entries=2)
        cache.set("a", "top")
        cache.set("b", "center")
        self.assertEqual(cache.get("a"), "top")  # refresh "a"
        cache.set("c", "bottom")

        self.assertIn("a", cache)
        self.assertNotIn("b", cache)
        self.assertIn("c", cache)
        self.assertEqual(len(cache), 2)

    def test_default_provider_and_failures_fall_back(self):
        self.assertEqual(ImagePositionCache().position_for("x"), DEFAULT_IMAGE_POSITION)

        broken = ImagePositionCache(provider=MagicMock(side_effect=RuntimeError("no detector")))
        self.assertEqual(broken.position_for("y"), DEFAULT_IMAGE_POSITION)
        self.assertNotIn("y", broken)

    def test_rejects_non_positive_capacity(self):
        with self.assertRaises(ValueError):
            ImagePositionCache(max_entries=0)


if __name__ == "__main__":
    unittest.main()
