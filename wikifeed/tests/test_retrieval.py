import unittest
from unittest.mock import MagicMock

from wikifeed.errors import ContentInvalid, ExhaustedRetries, LoadCancelled, TransportError
from wikifeed.models import ArticleViewModel, RawPage
from wikifeed.retrieval import (
    Action,
    LoadToken,
    Outcome,
    RetrievalOrchestrator,
    RetryPolicy,
    decide,
)
from wikifeed.tests.fakes import LONG_TEXT, FakeWikiClient


def _view(page, token=None):
    return ArticleViewModel(title=page.title, definition=page.extract, category="General Knowledge", related_articles=[])


class DecideTests(unittest.TestCase):
    def test_success_always_succeeds(self):
        policy = RetryPolicy(max_attempts=3, delay=1.0)
        self.assertIs(decide(3, Outcome.SUCCESS, policy).action, Action.SUCCEED)

    def test_retries_with_fixed_delay_until_cap(self):
        policy = RetryPolicy(max_attempts=3, delay=1.0)
        for attempt in (1, 2):
            decision = decide(attempt, Outcome.CONTENT_INVALID, policy)
            self.assertIs(decision.action, Action.RETRY)
            self.assertEqual(decision.delay, 1.0)
        self.assertIs(decide(3, Outcome.TRANSPORT_ERROR, policy).action, Action.FAIL)


class FetchByTitleTests(unittest.TestCase):
    def setUp(self):
        self.sleeps = []

    def _orchestrator(self, client, builder=_view):
        return RetrievalOrchestrator(client, builder=builder, sleep=self.sleeps.append)

    def test_missing_page_exhausts_exactly_three_attempts(self):
        client = FakeWikiClient()
        orchestrator = self._orchestrator(client)
        with self.assertRaises(ExhaustedRetries) as ctx:
            orchestrator.fetch_by_title("Nowhere")
        self.assertEqual(client.page_requests, ["Nowhere"] * 3)
        self.assertEqual(ctx.exception.attempts, 3)
        self.assertIsInstance(ctx.exception.last_error, ContentInvalid)
        self.assertEqual(self.sleeps, [1.0, 1.0])

    def test_valid_page_returns_first_time(self):
        client = FakeWikiClient(pages={"Otter": RawPage(title="Otter", extract=LONG_TEXT)})
        view = self._orchestrator(client).fetch_by_title("Otter")
        self.assertEqual(view.title, "Otter")
        self.assertEqual(client.page_requests, ["Otter"])
        self.assertEqual(self.sleeps, [])

    def test_transport_error_is_retried(self):
        client = MagicMock()
        client.fetch_page.side_effect = [TransportError("boom"), RawPage(title="Otter", extract=LONG_TEXT)]
        view = self._orchestrator(client).fetch_by_title("Otter")
        self.assertEqual(view.title, "Otter")
        self.assertEqual(client.fetch_page.call_count, 2)
        self.assertEqual(self.sleeps, [1.0])

    def test_builder_only_runs_for_valid_pages(self):
        builder = MagicMock(side_effect=_view)
        client = FakeWikiClient(pages={"List of birds": RawPage(title="List of birds", extract=LONG_TEXT)})
        with self.assertRaises(ExhaustedRetries):
            self._orchestrator(client, builder=builder).fetch_by_title("List of birds")
        builder.assert_not_called()

    def test_cancelled_token_stops_before_fetching(self):
        client = FakeWikiClient()
        token = LoadToken()
        token.cancel()
        with self.assertRaises(LoadCancelled):
            self._orchestrator(client).fetch_by_title("Otter", token)
        self.assertEqual(client.page_requests, [])


class FetchRandomTests(unittest.TestCase):
    def setUp(self):
        self.sleeps = []

    def test_draws_new_title_after_sub_fetch_fails(self):
        client = FakeWikiClient(
            pages={"Good": RawPage(title="Good", extract=LONG_TEXT)},
            random_pool=["Stub one", "Good"],
        )
        orchestrator = RetrievalOrchestrator(client, builder=_view, sleep=self.sleeps.append)
        view = orchestrator.fetch_random()
        self.assertEqual(view.title, "Good")
        self.assertEqual(client.page_requests, ["Stub one"] * 3 + ["Good"])
        self.assertEqual(len(client.random_requests), 2)

    def test_gives_up_after_three_random_titles(self):
        client = FakeWikiClient(random_pool=["A", "B", "C", "D"])
        orchestrator = RetrievalOrchestrator(client, builder=_view, sleep=self.sleeps.append)
        with self.assertRaises(ExhaustedRetries) as ctx:
            orchestrator.fetch_random()
        self.assertEqual(ctx.exception.operation, "fetch_random")
        self.assertEqual(client.page_requests, ["A"] * 3 + ["B"] * 3 + ["C"] * 3)

    def test_random_transport_failure_consumes_attempt(self):
        client = FakeWikiClient()
        client.fail_random = True
        orchestrator = RetrievalOrchestrator(client, builder=_view, sleep=self.sleeps.append)
        with self.assertRaises(ExhaustedRetries):
            orchestrator.fetch_random()
        self.assertEqual(len(client.random_requests), 3)
        self.assertEqual(client.page_requests, [])


class FetchByQueryTests(unittest.TestCase):
    def test_short_query_is_ignored(self):
        client = MagicMock()
        orchestrator = RetrievalOrchestrator(client, builder=_view, sleep=lambda _: None)
        self.assertIsNone(orchestrator.fetch_by_query(" a "))
        client.search.assert_not_called()

    def test_loads_best_match(self):
        client = FakeWikiClient(
            pages={"Sea otter": RawPage(title="Sea otter", extract=LONG_TEXT)},
            search_results={"otters": ["Sea otter", "River otter"]},
        )
        orchestrator = RetrievalOrchestrator(client, builder=_view, sleep=lambda _: None)
        self.assertEqual(orchestrator.fetch_by_query("otters").title, "Sea otter")

    def test_no_results(self):
        orchestrator = RetrievalOrchestrator(FakeWikiClient(), builder=_view, sleep=lambda _: None)
        self.assertIsNone(orchestrator.fetch_by_query("zzzz"))


if __name__ == "__main__":
    unittest.main()
