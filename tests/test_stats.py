import json
import tempfile
import unittest
from datetime import datetime, timedelta, timezone
from pathlib import Path

from quizcore.results.export import report_filename, write_report
from quizcore.results.schema import QuizSession, SessionSummary
from quizcore.stats.stats import completion_rate, format_duration, format_summary

from tests.helpers import make_service


class CompletionRateTests(unittest.TestCase):
    def test_values(self) -> None:
        self.assertEqual(completion_rate(7, 10), 70)
        self.assertEqual(completion_rate(2, 3), 67)
        self.assertEqual(completion_rate(1, 3), 33)
        self.assertEqual(completion_rate(0, 5), 0)
        self.assertEqual(completion_rate(5, 5), 100)

    def test_half_rounds_up(self) -> None:
        self.assertEqual(completion_rate(1, 8), 13)
        self.assertEqual(completion_rate(1, 200), 1)

    def test_zero_total(self) -> None:
        self.assertEqual(completion_rate(0, 0), 0)


class FormattingTests(unittest.TestCase):
    def test_duration(self) -> None:
        start = datetime(2024, 1, 1, tzinfo=timezone.utc)
        self.assertEqual(format_duration(start, start + timedelta(minutes=2, seconds=5, milliseconds=900)), "2 min 5s")
        self.assertEqual(format_duration(start, None), "N/A")

    def test_summary_text(self) -> None:
        start = datetime(2024, 1, 1, tzinfo=timezone.utc)
        text = format_summary(SessionSummary(10, 7, 70, start, start + timedelta(seconds=42)))
        self.assertIn("Answered: 7/10", text)
        self.assertIn("Completion: 70%", text)
        self.assertIn("0 min 42s", text)


class ExportTests(unittest.TestCase):
    def test_session_json_round_trip(self) -> None:
        s = QuizSession("x", 3, datetime(2024, 1, 1, tzinfo=timezone.utc), 1)
        self.assertEqual(QuizSession.from_json(s.to_json()), s)

    def test_write_report_into_directory(self) -> None:
        svc = make_service()
        svc.start_session("abc", 3)
        svc.submit_answer("abc", 1, "yes")
        report = svc.complete_session("abc")
        with tempfile.TemporaryDirectory() as tmp:
            path = write_report(report, tmp)
            self.assertEqual(path.name, report_filename("abc"))
            self.assertEqual(path.name, "quiz-results-abc.json")
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        self.assertEqual(data["summary"]["answeredQuestions"], 1)
        self.assertEqual(data["summary"]["completionRate"], 33)
        self.assertEqual(data["responses"][0]["answer"], "yes")


if __name__ == "__main__":
    unittest.main()
