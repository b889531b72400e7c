"""Tests for the BaseScraper per-target pipeline."""

import unittest

from stdpop.base import BaseScraper
from stdpop.metrics import MetricsCollector
from stdpop.models import Task

from fakes import FakeResponse, FakeScraper, imported_by_page


def _task(target="runtime/debug"):
    return Task(target=target, source_id="pkgsite", url="https://pkg.go.dev/" + target)


class TestBaseScraperValidation(unittest.TestCase):
    """Verify that BaseScraper.validate() catches invalid tasks."""

    def test_validate_raises_on_empty_url(self):
        """A task with an empty URL should raise ValueError."""

        class DummyScraper(BaseScraper):
            def fetch(self, task):
                return None

            def extract(self, body):
                return 0

        scraper = DummyScraper()
        task = Task(target="fmt", source_id="pkgsite", url="")
        with self.assertRaises(ValueError) as ctx:
            scraper.validate(task)
        self.assertIn("url", str(ctx.exception).lower())

    def test_validate_passes_with_valid_task(self):
        """A task with a target and URL should not raise."""
        scraper = FakeScraper({})
        scraper.validate(_task())


class TestBaseScraperRun(unittest.TestCase):
    """Verify that BaseScraper.run() turns every failure into an outcome."""

    def test_success_carries_count(self):
        scraper = FakeScraper({"runtime/debug": FakeResponse(200, imported_by_page("19,638"))})
        outcome = scraper.run(_task())
        self.assertTrue(outcome.success)
        self.assertEqual(outcome.count, 19638)
        self.assertEqual(outcome.status_code, 200)
        self.assertIsNone(outcome.error_type)

    def test_any_2xx_is_success(self):
        scraper = FakeScraper({"runtime/debug": FakeResponse(203, imported_by_page("3"))})
        self.assertTrue(scraper.run(_task()).success)

    def test_non_2xx_is_failure_and_body_is_not_extracted(self):
        calls = []

        class RecordingScraper(FakeScraper):
            def extract(self, body):
                calls.append(body)
                return super().extract(body)

        scraper = RecordingScraper({"runtime/debug": FakeResponse(404, imported_by_page("5"))})
        with self.assertLogs("stdpop.base", level="ERROR") as logs:
            outcome = scraper.run(_task())
        self.assertFalse(outcome.success)
        self.assertEqual(outcome.error_type, "HTTP_404")
        self.assertIsNone(outcome.count)
        self.assertEqual(calls, [])
        self.assertIn("runtime/debug", "\n".join(logs.output))

    def test_run_captures_exception_as_error_type(self):
        """If fetch() raises, run() should return a failed outcome."""
        scraper = FakeScraper({"runtime/debug": ConnectionError("network down")})
        outcome = scraper.run(_task())
        self.assertFalse(outcome.success)
        self.assertEqual(outcome.error_type, "ConnectionError")
        self.assertEqual(outcome.error, "network down")
        self.assertIsNone(outcome.count)

    def test_extraction_failure_is_logged_with_target(self):
        scraper = FakeScraper({"runtime/debug": FakeResponse(200, b"<html></html>")})
        with self.assertLogs("stdpop.base", level="ERROR") as logs:
            outcome = scraper.run(_task())
        self.assertEqual(outcome.error_type, "ExtractionError")
        self.assertTrue(any("runtime/debug" in line and "ERROR" in line for line in logs.output))

    def test_start_and_finish_are_logged(self):
        scraper = FakeScraper({"runtime/debug": FakeResponse(200, imported_by_page("1"))})
        with self.assertLogs("stdpop.base", level="INFO") as logs:
            scraper.run(_task())
        text = "\n".join(logs.output)
        self.assertIn("start request about package runtime/debug", text)
        self.assertIn("finish request about package runtime/debug", text)

    def test_outcomes_are_recorded_in_metrics(self):
        metrics = MetricsCollector()
        scraper = FakeScraper(
            {
                "fmt": FakeResponse(200, imported_by_page("10")),
                "os": FakeResponse(500),
            },
            metrics=metrics,
        )
        scraper.run(_task("fmt"))
        scraper.run(_task("os"))
        summary = metrics.summary()
        self.assertEqual(summary.total, 2)
        self.assertEqual(summary.success_count, 1)
        self.assertEqual(summary.http_error_count, 1)


if __name__ == "__main__":
    unittest.main()
