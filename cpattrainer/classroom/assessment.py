"""
Assessment grading.

Scores are integer percentages; a module is passed when its score reaches
the assessment's passing score.
"""

from dataclasses import dataclass

from cpattrainer.schemas import Assessment, Question
from cpattrainer.utils import percent


@dataclass
class AssessmentResult:
    correct: int
    total: int
    percent: int
    passed: bool
    passing_score: int
    incorrect_question_ids: list[str]


def is_answer_correct(question: Question, answer: str | None) -> bool:
    """Exact match after trimming whitespace; list answers accept any entry."""
    if answer is None:
        return False
    accepted = question.correct if isinstance(question.correct, list) else [question.correct]
    return answer.strip() in (a.strip() for a in accepted)


def grade_assessment(assessment: Assessment, answers: dict[str, str]) -> AssessmentResult:
    """
    Grade submitted answers.

    Args:
        assessment: Assessment being answered
        answers: question id -> chosen answer (unanswered questions are wrong)

    Returns:
        AssessmentResult; an assessment without questions scores 100
    """
    total = len(assessment.questions)
    incorrect = [
        q.id for q in assessment.questions
        if not is_answer_correct(q, answers.get(q.id))
    ]
    correct = total - len(incorrect)
    score = percent(correct, total) if total else 100

    return AssessmentResult(
        correct=correct,
        total=total,
        percent=score,
        passed=score >= assessment.passing_score,
        passing_score=assessment.passing_score,
        incorrect_question_ids=incorrect,
    )
