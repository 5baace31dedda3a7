"""
Assessment grading tests.
"""

import pytest

from cpattrainer.classroom import grade_assessment
from cpattrainer.classroom.assessment import is_answer_correct
from cpattrainer.schemas import Assessment, Question


def make_assessment(n: int, passing_score: int = 80) -> Assessment:
    return Assessment(
        passing_score=passing_score,
        questions=[
            Question(id=f"q{i}", question=f"Question {i}?", options=["yes", "no"], correct="yes")
            for i in range(1, n + 1)
        ],
    )


class TestAnswerMatching:

    def test_exact_match(self):
        question = Question(id="q1", question="?", correct="Mitochondria")
        assert is_answer_correct(question, "Mitochondria")
        assert not is_answer_correct(question, "mitochondria")

    def test_whitespace_trimmed(self):
        question = Question(id="q1", question="?", correct="true")
        assert is_answer_correct(question, "  true \n")

    def test_list_accepts_any(self):
        question = Question(id="q1", question="?", correct=["a", "b"])
        assert is_answer_correct(question, "a")
        assert is_answer_correct(question, "b")
        assert not is_answer_correct(question, "c")

    def test_unanswered(self):
        question = Question(id="q1", question="?", correct="a")
        assert not is_answer_correct(question, None)


class TestGrading:

    def test_all_correct(self):
        result = grade_assessment(make_assessment(4), {f"q{i}": "yes" for i in range(1, 5)})
        assert result.correct == 4
        assert result.percent == 100
        assert result.passed
        assert result.incorrect_question_ids == []

    def test_unanswered_counts_wrong(self):
        result = grade_assessment(make_assessment(4), {"q1": "yes", "q2": "yes", "q3": "yes"})
        assert result.percent == 75
        assert not result.passed
        assert result.incorrect_question_ids == ["q4"]

    @pytest.mark.parametrize("n,correct,expected", [
        (3, 1, 33),
        (3, 2, 67),
        (8, 1, 13),
        (6, 5, 83),
    ])
    def test_percent_rounding(self, n, correct, expected):
        answers = {f"q{i}": "yes" for i in range(1, correct + 1)}
        assert grade_assessment(make_assessment(n), answers).percent == expected

    def test_threshold_inclusive(self):
        result = grade_assessment(
            make_assessment(4, passing_score=75), {"q1": "yes", "q2": "yes", "q3": "yes", "q4": "no"}
        )
        assert result.percent == 75
        assert result.passed

    def test_empty_assessment_passes(self):
        result = grade_assessment(Assessment(questions=[]), {})
        assert result.total == 0
        assert result.percent == 100
        assert result.passed

    def test_extra_answers_ignored(self):
        result = grade_assessment(make_assessment(1), {"q1": "yes", "q99": "no"})
        assert result.total == 1
        assert result.percent == 100


class TestBundledAssessments:

    def test_safety_module_requires_full_marks(self, curriculum):
        assessment = curriculum.get_module("04-safety-protocols").assessment
        result = grade_assessment(assessment, {"q1": "Stop the session", "q2": "true"})
        assert result.percent == 50
        assert not result.passed

    def test_list_answer_in_bundle(self, curriculum):
        assessment = curriculum.get_module("05-patient-assessment").assessment
        answers = {"q1": "Photosensitising medication", "q2": "After any adverse event"}
        assert grade_assessment(assessment, answers).percent == 100
