import json
import unittest
from unittest.mock import patch

from click.testing import CliRunner

from wikifeed.cli import cli
from wikifeed.errors import ExhaustedRetries
from wikifeed.models import ArticleViewModel, RelatedArticle, RelationType


def _view():
    return ArticleViewModel(
        title="Otter",
        definition="Otters are carnivorous mammals.",
        category="Mustelids",
        related_articles=[RelatedArticle(title="Sea otter", extract="The sea otter is a marine mammal.", type=RelationType.DIRECT)],
    )


class CliTests(unittest.TestCase):
    @patch("wikifeed.cli.ArticleFeed")
    def test_show_prints_view_model_json(self, mock_feed_cls):
        mock_feed_cls.return_value.load_title.return_value = _view()
        result = CliRunner().invoke(cli, ["show", "Otter"])

        self.assertEqual(result.exit_code, 0, result.output)
        payload = json.loads(result.stdout)
        self.assertEqual(payload["title"], "Otter")
        self.assertEqual(payload["relatedArticles"][0]["type"], "direct")
        self.assertEqual(payload["categoryIcon"], "globe")

    @patch("wikifeed.cli.ArticleFeed")
    def test_exhausted_retries_exit_non_zero(self, mock_feed_cls):
        mock_feed_cls.return_value.load_random.side_effect = ExhaustedRetries("fetch_random", 3)
        result = CliRunner().invoke(cli, ["random"])

        self.assertNotEqual(result.exit_code, 0)
        self.assertIn("fetch_random failed after 3 attempts", result.output)


if __name__ == "__main__":
    unittest.main()
