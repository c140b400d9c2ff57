"""
Quiz grading rules

Compares submitted answers against a module's question bank and produces
score, percentage, pass/fail and per-question explanations.
"""

import math
from dataclasses import dataclass, field
from fractions import Fraction
from typing import Any, Dict, Iterable, List, Optional

DEFAULT_QUESTION_POINTS = 10
PASS_THRESHOLD = 70
PASS_XP = 15


@dataclass(frozen=True)
class SubmittedAnswer:
    question_id: str
    selected_option: int


@dataclass
class AnsweredQuestion:
    question_id: str
    selected_option: int
    correct: bool
    points: int
    explanation: Optional[str] = None

    def to_record(self) -> Dict[str, Any]:
        """Shape stored on the quiz attempt"""
        return {
            "questionId": self.question_id,
            "selectedOption": self.selected_option,
            "correct": self.correct,
            "points": self.points,
        }


@dataclass
class GradingResult:
    score: int
    total_points: int
    percentage: int
    passed: bool
    xp_earned: int
    answers: List[AnsweredQuestion] = field(default_factory=list)

    @property
    def feedback(self) -> List[Dict[str, Any]]:
        return [
            {"questionId": a.question_id, "correct": a.correct, "explanation": a.explanation}
            for a in self.answers
        ]


def percentage_of(earned: int, total: int) -> int:
    """
    Rounded percentage, halves rounded up.

    A bank with no gradable points (empty bank, or only unknown question
    ids submitted) scores 0.
    """
    if total <= 0:
        return 0
    return math.floor(Fraction(earned * 100, total) + Fraction(1, 2))


def explanation_for(question: Any, selected_option: int, correct: bool) -> Optional[str]:
    if correct:
        return question.correct_explanation
    for entry in question.incorrect_explanations or []:
        if entry.get("optionIndex") == selected_option:
            return entry.get("explanation")
    return None


def grade(
    questions: Iterable[Any],
    answers: Iterable[SubmittedAnswer],
    pass_threshold: int = PASS_THRESHOLD,
    pass_xp: int = PASS_XP,
) -> GradingResult:
    """
    Grade a submission against a question bank.

    Args:
        questions: Question bank of one module (objects exposing
            ``question_id``, ``correct_answer``, ``points``,
            ``correct_explanation`` and ``incorrect_explanations``)
        answers: Submitted answers in submission order
        pass_threshold: Minimum percentage that passes
        pass_xp: XP granted for a pass

    Returns:
        GradingResult; answers whose question id is not in the bank are
        skipped and count towards neither total.
    """
    bank = {q.question_id: q for q in questions}

    total_points = 0
    earned_points = 0
    answered: List[AnsweredQuestion] = []

    for answer in answers:
        question = bank.get(answer.question_id)
        if question is None:
            continue

        is_correct = question.correct_answer == answer.selected_option
        points = question.points or DEFAULT_QUESTION_POINTS

        total_points += points
        if is_correct:
            earned_points += points

        answered.append(
            AnsweredQuestion(
                question_id=answer.question_id,
                selected_option=answer.selected_option,
                correct=is_correct,
                points=points,
                explanation=explanation_for(question, answer.selected_option, is_correct),
            )
        )

    percentage = percentage_of(earned_points, total_points)
    passed = percentage >= pass_threshold

    return GradingResult(
        score=earned_points,
        total_points=total_points,
        percentage=percentage,
        passed=passed,
        xp_earned=pass_xp if passed else 0,
        answers=answered,
    )
