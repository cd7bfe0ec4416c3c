"""Quiz phase: each question is answered once, the score counts correct answers."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from satslab.learning.models import Question


@dataclass(frozen=True)
class AnswerOutcome:
    question_index: int
    selected: int
    correct: bool
    correct_answer: int
    explanation: str


class QuizSession:
    def __init__(self, questions: Sequence[Question]) -> None:
        self.questions = tuple(questions)
        self.answers: dict[int, AnswerOutcome] = {}

    def answer(self, question_index: int, option_index: int) -> AnswerOutcome:
        """Answer a question. A second answer returns the first outcome unchanged.

        Raises IndexError for an unknown question or option.
        """
        if not 0 <= question_index < len(self.questions):
            raise IndexError(f"Question {question_index} does not exist")
        if question_index in self.answers:
            return self.answers[question_index]

        question = self.questions[question_index]
        if not 0 <= option_index < len(question.options):
            raise IndexError(f"Option {option_index} does not exist for question {question_index}")

        outcome = AnswerOutcome(
            question_index=question_index,
            selected=option_index,
            correct=option_index == question.correct_answer,
            correct_answer=question.correct_answer,
            explanation=question.explanation,
        )
        self.answers[question_index] = outcome
        return outcome

    @property
    def score(self) -> int:
        return sum(1 for a in self.answers.values() if a.correct)

    @property
    def total(self) -> int:
        return len(self.questions)

    def is_complete(self) -> bool:
        return len(self.answers) == len(self.questions)

    def mark_restored(self, score: int) -> None:
        """Treat the quiz as finished in a previous session with the saved score."""
        self.answers = {
            i: AnswerOutcome(
                question_index=i,
                selected=q.correct_answer if i < score else -1,
                correct=i < score,
                correct_answer=q.correct_answer,
                explanation=q.explanation,
            )
            for i, q in enumerate(self.questions)
        }

    def reset(self) -> None:
        self.answers = {}
