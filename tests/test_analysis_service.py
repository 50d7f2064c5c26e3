import os
import sys
import unittest
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

from openai import OpenAIError

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from jobfit.schemas.analysis import AnalyzeRequest, SalaryRange  # noqa: E402
from jobfit.scoring.compensation import NOTE_MISSING, NOTE_OVERLAP  # noqa: E402
from jobfit.services.analysis_llm import (  # noqa: E402
    UNPARSEABLE_SUMMARY,
    AnalysisLLMError,
    request_narrative,
    safe_json_parse,
)
from jobfit.services.analysis_service import (  # noqa: E402
    HEURISTIC_SUMMARY,
    AnalysisInputError,
    analyze,
    clamp_text,
    coerce_narrative,
    format_salary_context,
)

RESUME = "Jane Doe\nBackend engineer\nPython SQL"
JD = "Requirements:\nPython SQL AWS"


def _completion(content: str) -> SimpleNamespace:
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


class ClampTextTests(unittest.TestCase):
    def test_collapses_whitespace_but_keeps_lines(self):
        self.assertEqual(
            clamp_text("  Hello   world \n\n\n Requirements:\n\t python  "),
            "Hello world\nRequirements:\npython",
        )

    def test_truncates_long_text(self):
        self.assertEqual(clamp_text("a" * 20, max_chars=10), "a" * 10 + "...")

    def test_salary_context(self):
        context = format_salary_context(SalaryRange(min=80000, max=110000), None)
        self.assertEqual(context, "Candidate expected range: $80000 - $110000\nRole range: not provided")


class HeuristicAnalyzeTests(unittest.TestCase):
    def setUp(self):
        patcher = patch("jobfit.services.analysis_service.analysis_llm_enabled", return_value=False)
        patcher.start()
        self.addCleanup(patcher.stop)
        env = patch.dict(os.environ, {"SKILL_WEIGHT": "0.8"})
        env.start()
        self.addCleanup(env.stop)

    def test_heuristic_result_without_salaries(self):
        result = analyze(AnalyzeRequest(cv_text=RESUME, jd_text=JD))
        analysis = result.analysis
        self.assertEqual(analysis.match_score, 67)
        self.assertEqual(analysis.summary, HEURISTIC_SUMMARY)
        self.assertEqual(analysis.keyword_matches, ["python", "sql"])
        self.assertEqual(analysis.missing_keywords, ["aws"])
        self.assertEqual(analysis.gap_analysis, ["Missing keyword: aws"])
        self.assertEqual(len(analysis.improvements), 3)
        self.assertEqual(analysis.bullet_rewrites, [])
        self.assertIsNone(analysis.compensation_fit)
        self.assertEqual(analysis.compensation_notes, [NOTE_MISSING])
        self.assertEqual(analysis.overall_score, analysis.match_score)
        self.assertEqual(result.meta.cv_chars, len(RESUME))
        self.assertEqual(result.meta.score_breakdown, analysis.score_breakdown)

    def test_salary_ranges_feed_overall_score(self):
        result = analyze(
            AnalyzeRequest(
                cv_text=RESUME,
                jd_text=JD,
                cv_salary_min="$80,000",
                cv_salary_max="110000",
                jd_salary_min=90000,
                jd_salary_max=120000,
            )
        )
        self.assertEqual(result.analysis.compensation_fit, 67)
        self.assertEqual(result.analysis.compensation_notes, [NOTE_OVERLAP])
        self.assertEqual(result.analysis.overall_score, 67)

    def test_blank_input_is_rejected(self):
        with self.assertRaises(AnalysisInputError):
            analyze(AnalyzeRequest(cv_text="   \n ", jd_text=JD))
        with self.assertRaises(AnalysisInputError):
            analyze(AnalyzeRequest(cv_text=RESUME, jd_text=""))


class LLMAnalyzeTests(unittest.TestCase):
    def setUp(self):
        patcher = patch("jobfit.services.analysis_service.analysis_llm_enabled", return_value=True)
        patcher.start()
        self.addCleanup(patcher.stop)
        env = patch.dict(os.environ, {"SKILL_WEIGHT": "0.8"})
        env.start()
        self.addCleanup(env.stop)

    def test_llm_narrative_is_merged_with_computed_scores(self):
        narrative = {
            "matchScore": 5,
            "summary": "Solid backend profile.",
            "keywordMatches": ["backend"],
            "missingKeywords": [],
            "improvements": ["Add AWS projects."],
            "compensationFit": 40,
            "compensationNotes": [],
        }
        with patch("jobfit.services.analysis_service.request_narrative", return_value=narrative) as mocked:
            result = analyze(
                AnalyzeRequest(
                    cv_text=RESUME,
                    jd_text=JD,
                    cv_salary_min=80000,
                    cv_salary_max=110000,
                    jd_salary_min=90000,
                    jd_salary_max=120000,
                )
            )
        salary_context = mocked.call_args.args[2]
        self.assertIn("Role range: $90000 - $120000", salary_context)

        analysis = result.analysis
        self.assertEqual(analysis.match_score, 67)
        self.assertEqual(analysis.summary, "Solid backend profile.")
        self.assertEqual(analysis.keyword_matches, ["backend"])
        self.assertEqual(analysis.missing_keywords, ["aws"])
        self.assertEqual(analysis.compensation_fit, 40)
        self.assertEqual(analysis.compensation_notes, [NOTE_OVERLAP])
        # 67 * 0.8 + 40 * 0.2
        self.assertEqual(analysis.overall_score, 62)

    def test_llm_failure_propagates(self):
        with patch(
            "jobfit.services.analysis_service.request_narrative",
            side_effect=AnalysisLLMError("LLM error: boom"),
        ):
            with self.assertRaises(AnalysisLLMError):
                analyze(AnalyzeRequest(cv_text=RESUME, jd_text=JD))


class NarrativeParsingTests(unittest.TestCase):
    def test_safe_json_parse(self):
        self.assertEqual(safe_json_parse('{"summary": "ok"}'), {"summary": "ok"})
        self.assertEqual(safe_json_parse('Here you go: {"summary": "ok"} thanks'), {"summary": "ok"})
        self.assertIsNone(safe_json_parse("no json here"))
        self.assertIsNone(safe_json_parse("[1, 2]"))

    def test_coerce_narrative_drops_malformed_fields(self):
        analysis = coerce_narrative(
            {
                "summary": 12,
                "gapAnalysis": "not a list",
                "improvements": ["Add X", None, 3, {"nested": True}],
                "compensationFit": 140.2,
            }
        )
        self.assertEqual(analysis.summary, "")
        self.assertEqual(analysis.gap_analysis, [])
        self.assertEqual(analysis.improvements, ["Add X", "3"])
        self.assertEqual(analysis.compensation_fit, 100)
        self.assertIsNone(coerce_narrative({"compensationFit": "high"}).compensation_fit)
        self.assertIsNone(coerce_narrative({"compensationFit": True}).compensation_fit)

    def test_request_narrative_returns_placeholder_for_unparseable_output(self):
        client = MagicMock()
        client.chat.completions.create.return_value = _completion("Sorry, I cannot help.")
        with patch("jobfit.services.analysis_llm._client", return_value=client):
            payload = request_narrative(RESUME, JD, "n/a")
        self.assertEqual(payload["summary"], UNPARSEABLE_SUMMARY)
        self.assertEqual(payload["raw"], "Sorry, I cannot help.")
        self.assertEqual(coerce_narrative(payload).raw, "Sorry, I cannot help.")

    def test_request_narrative_parses_fenced_json(self):
        client = MagicMock()
        client.chat.completions.create.return_value = _completion('```json\n{"summary": "Good fit"}\n```')
        with patch("jobfit.services.analysis_llm._client", return_value=client):
            payload = request_narrative(RESUME, JD, "n/a")
        self.assertEqual(payload, {"summary": "Good fit"})
        messages = client.chat.completions.create.call_args.kwargs["messages"]
        self.assertEqual(messages[0]["role"], "system")
        self.assertIn("JOB DESCRIPTION", messages[1]["content"])

    def test_request_narrative_wraps_api_errors(self):
        client = MagicMock()
        client.chat.completions.create.side_effect = OpenAIError("boom")
        with patch("jobfit.services.analysis_llm._client", return_value=client):
            with self.assertRaises(AnalysisLLMError):
                request_narrative(RESUME, JD, "n/a")


if __name__ == "__main__":
    unittest.main()
