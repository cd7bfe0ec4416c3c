"""Module content definitions: tasks, questions, badges.

Content is immutable configuration, created when the catalog is built and
never mutated at runtime.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from satslab.validation.profiles import SIGNET_PROFILE, ValidationProfile
from satslab.validation.result import ValidationKind


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class ExternalLink(_Frozen):
    label: str
    url: str


class Task(_Frozen):
    """One guided hands-on exercise requiring a single validated submission."""

    id: str
    title: str
    description: str
    instructions: tuple[str, ...] = ()
    input_label: str = "Your answer"
    input_placeholder: str = ""
    validation_type: ValidationKind
    hints: tuple[str, ...] = ()
    external_links: tuple[ExternalLink, ...] = ()
    fee_field: bool = False


class Question(_Frozen):
    id: str
    question: str
    options: tuple[str, ...]
    correct_answer: int
    explanation: str = ""

    @model_validator(mode="after")
    def _answer_in_range(self) -> Question:
        if not 0 <= self.correct_answer < len(self.options):
            msg = f"Question {self.id}: correct_answer {self.correct_answer} out of range"
            raise ValueError(msg)
        return self


class BadgeTemplate(_Frozen):
    name: str
    description: str
    type: Literal["virtual", "ordinal"] = "virtual"
    image_url: str | None = None


class LearningModule(_Frozen):
    """A lesson unit: a quiz phase followed by a task phase."""

    id: int
    title: str
    description: str
    objectives: tuple[str, ...] = ()
    requires_login: bool = False
    estimated_minutes: int = 30
    difficulty: str = "Beginner"
    validation_profile: ValidationProfile = SIGNET_PROFILE
    questions: tuple[Question, ...] = ()
    tasks: tuple[Task, ...] = Field(min_length=1)
    badge: BadgeTemplate

    @model_validator(mode="after")
    def _unique_task_ids(self) -> LearningModule:
        ids = [t.id for t in self.tasks]
        if len(ids) != len(set(ids)):
            msg = f"Module {self.id}: duplicate task ids"
            raise ValueError(msg)
        return self
