"""Pydantic request and response models for the learning endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from satslab.learning.flow import Section
from satslab.learning.models import LearningModule
from satslab.learning.quiz import AnswerOutcome
from satslab.sessions.manager import LearnerSession
from satslab.validation.result import ValidationResult

# --- Requests ---


class NavigateRequest(BaseModel):
    target: Section


class AnswerRequest(BaseModel):
    option_index: int = Field(ge=0)


class SubmitRequest(BaseModel):
    input: str = Field(max_length=4096)


# --- Catalog ---


class ModuleSummaryResponse(BaseModel):
    id: int
    title: str
    description: str
    requires_login: bool
    estimated_minutes: int
    difficulty: str
    question_count: int
    task_count: int
    badge_name: str


class QuestionResponse(BaseModel):
    id: str
    question: str
    options: list[str]


class LinkResponse(BaseModel):
    label: str
    url: str


class TaskResponse(BaseModel):
    id: str
    title: str
    description: str
    instructions: list[str]
    input_label: str
    input_placeholder: str
    validation_type: str
    hint_count: int
    external_links: list[LinkResponse] = []


class ModuleDetailResponse(ModuleSummaryResponse):
    objectives: list[str]
    questions: list[QuestionResponse]
    tasks: list[TaskResponse]
    badge_description: str
    badge_image_url: str | None = None


# --- Session state ---


class ValidationResultResponse(BaseModel):
    success: bool
    verdict: str
    message: str
    data: dict | None = None


class AnswerResponse(BaseModel):
    question_index: int
    selected: int
    correct: bool
    correct_answer: int
    explanation: str


class QuizStateResponse(BaseModel):
    answers: list[AnswerResponse]
    score: int
    total: int
    complete: bool


class TaskStateResponse(BaseModel):
    index: int
    id: str
    status: str
    attempt_count: int
    revealed_hints: list[str]
    last_result: ValidationResultResponse | None = None


class TasksStateResponse(BaseModel):
    current_task_index: int
    completed_count: int
    total_tasks: int
    module_complete: bool
    can_request_hint: bool
    items: list[TaskStateResponse]


class SessionResponse(BaseModel):
    session_id: str
    module_id: int
    section: str
    guest: bool
    quiz: QuizStateResponse
    tasks: TasksStateResponse
    badge_eligible: bool
    badge_earned: bool
    time_spent: int


class SubmitResponse(BaseModel):
    result: ValidationResultResponse | None
    session: SessionResponse


class TallyResponse(BaseModel):
    completed_count: int
    total_tasks: int
    all_completed: bool
    session: SessionResponse


class HintResponse(BaseModel):
    granted: bool
    session: SessionResponse


class AdvanceResponse(BaseModel):
    moved: bool
    session: SessionResponse


# --- Learner records ---


class ProgressEntryResponse(BaseModel):
    module_id: int
    completed_task_ids: list[str]
    hints_used: list[str]
    time_spent: int
    attempts: int
    questions_completed: bool
    questions_score: int
    completed: bool
    badge_earned: bool


class ProgressResponse(BaseModel):
    modules: list[ProgressEntryResponse]


class EarnedBadgeResponse(BaseModel):
    module_id: int
    badge_name: str
    badge_type: str
    description: str | None = None
    image_url: str | None = None
    earned_at: datetime
    metadata: dict = {}


class BadgesResponse(BaseModel):
    earned: list[EarnedBadgeResponse]
    total_earned: int


# --- Builders ---


def module_summary(module: LearningModule) -> ModuleSummaryResponse:
    return ModuleSummaryResponse(
        id=module.id,
        title=module.title,
        description=module.description,
        requires_login=module.requires_login,
        estimated_minutes=module.estimated_minutes,
        difficulty=module.difficulty,
        question_count=len(module.questions),
        task_count=len(module.tasks),
        badge_name=module.badge.name,
    )


def module_detail(module: LearningModule) -> ModuleDetailResponse:
    """Public module content. Correct answers and hint texts stay server side."""
    return ModuleDetailResponse(
        **module_summary(module).model_dump(),
        objectives=list(module.objectives),
        questions=[QuestionResponse(id=q.id, question=q.question, options=list(q.options)) for q in module.questions],
        tasks=[
            TaskResponse(
                id=t.id,
                title=t.title,
                description=t.description,
                instructions=list(t.instructions),
                input_label=t.input_label,
                input_placeholder=t.input_placeholder,
                validation_type=t.validation_type.value,
                hint_count=len(t.hints),
                external_links=[LinkResponse(label=link.label, url=link.url) for link in t.external_links],
            )
            for t in module.tasks
        ],
        badge_description=module.badge.description,
        badge_image_url=module.badge.image_url,
    )


def result_response(result: ValidationResult | None) -> ValidationResultResponse | None:
    if result is None:
        return None
    return ValidationResultResponse(
        success=result.success,
        verdict=result.verdict.value,
        message=result.message,
        data=result.data,
    )


def answer_response(outcome: AnswerOutcome) -> AnswerResponse:
    return AnswerResponse(
        question_index=outcome.question_index,
        selected=outcome.selected,
        correct=outcome.correct,
        correct_answer=outcome.correct_answer,
        explanation=outcome.explanation,
    )


def session_response(session: LearnerSession) -> SessionResponse:
    flow = session.flow
    engine = flow.engine
    flow.refresh_hints()
    items = [
        TaskStateResponse(
            index=i,
            id=task.id,
            status=state.status.value,
            attempt_count=state.attempt_count,
            revealed_hints=[task.hints[h] for h in sorted(state.revealed_hints)],
            last_result=result_response(state.last_result),
        )
        for i, (task, state) in enumerate(zip(engine.tasks, engine.states))
    ]
    return SessionResponse(
        session_id=session.id,
        module_id=session.module.id,
        section=flow.section.value,
        guest=session.is_guest,
        quiz=QuizStateResponse(
            answers=[answer_response(a) for _, a in sorted(flow.quiz.answers.items())],
            score=flow.quiz.score,
            total=flow.quiz.total,
            complete=flow.quiz.is_complete(),
        ),
        tasks=TasksStateResponse(
            current_task_index=engine.current_task_index,
            completed_count=engine.completed_count,
            total_tasks=len(engine.tasks),
            module_complete=engine.is_module_complete(),
            can_request_hint=(
                flow.section is Section.TASKS
                and not engine.current_state.completed
                and engine.scheduler.can_request()
            ),
            items=items,
        ),
        badge_eligible=flow.badge_eligible(),
        badge_earned=session.badge_earned,
        time_spent=session.time_spent(),
    )
