"""Learner session endpoints — quiz, tasks, hints and completion."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from satslab.auth.dependencies import get_current_learner_optional
from satslab.catalog.modules import get_module
from satslab.dependencies import get_learning_service
from satslab.sessions.schemas import (
    AdvanceResponse,
    AnswerRequest,
    AnswerResponse,
    HintResponse,
    NavigateRequest,
    SessionResponse,
    SubmitRequest,
    SubmitResponse,
    TallyResponse,
    answer_response,
    result_response,
    session_response,
)
from satslab.sessions.service import LearningService, ModuleNotFound

router = APIRouter(prefix="/api/v1", tags=["Sessions"])


@router.post("/modules/{module_id}/sessions", response_model=SessionResponse, status_code=201)
async def start_session(
    module_id: int,
    user_id: str | None = Depends(get_current_learner_optional),
    svc: LearningService = Depends(get_learning_service),
) -> SessionResponse:
    """Open a module. Logged-in learners resume their saved progress."""
    module = get_module(module_id)
    if module is None:
        raise ModuleNotFound(module_id)
    if module.requires_login and user_id is None:
        raise HTTPException(401, "Authentication required")
    session = await svc.start_session(module_id, user_id=user_id)
    return session_response(session)


@router.get("/sessions/{session_id}", response_model=SessionResponse)
async def get_session_state(
    session_id: str,
    svc: LearningService = Depends(get_learning_service),
) -> SessionResponse:
    return session_response(svc.get_session(session_id))


@router.post("/sessions/{session_id}/navigate", response_model=SessionResponse)
async def navigate(
    session_id: str,
    body: NavigateRequest,
    svc: LearningService = Depends(get_learning_service),
) -> SessionResponse:
    await svc.navigate(session_id, body.target)
    return session_response(svc.get_session(session_id))


@router.post("/sessions/{session_id}/questions/{question_index}/answer", response_model=AnswerResponse)
async def answer_question(
    session_id: str,
    question_index: int,
    body: AnswerRequest,
    svc: LearningService = Depends(get_learning_service),
) -> AnswerResponse:
    try:
        outcome = await svc.answer_question(session_id, question_index, body.option_index)
    except IndexError as e:
        raise HTTPException(404, str(e)) from e
    return answer_response(outcome)


@router.post("/sessions/{session_id}/tasks/{task_index}/submit", response_model=SubmitResponse)
async def submit_task(
    session_id: str,
    task_index: int,
    body: SubmitRequest,
    svc: LearningService = Depends(get_learning_service),
) -> SubmitResponse:
    """Validate input for the current task. Misuse is a no-op, never an error."""
    result = await svc.submit(session_id, task_index, body.input)
    return SubmitResponse(
        result=result_response(result),
        session=session_response(svc.get_session(session_id)),
    )


@router.post("/sessions/{session_id}/tasks/advance", response_model=AdvanceResponse)
async def advance_task(
    session_id: str,
    svc: LearningService = Depends(get_learning_service),
) -> AdvanceResponse:
    moved = await svc.advance(session_id)
    return AdvanceResponse(moved=moved, session=session_response(svc.get_session(session_id)))


@router.post("/sessions/{session_id}/tasks/hints", response_model=HintResponse)
async def request_hint(
    session_id: str,
    svc: LearningService = Depends(get_learning_service),
) -> HintResponse:
    granted = svc.request_hint(session_id)
    return HintResponse(granted=granted, session=session_response(svc.get_session(session_id)))


@router.post("/sessions/{session_id}/tasks/complete", response_model=TallyResponse)
async def complete_tasks(
    session_id: str,
    svc: LearningService = Depends(get_learning_service),
) -> TallyResponse:
    """Report the task tally. Finishes the module and awards the badge when everything is done."""
    tally = await svc.complete_tasks(session_id)
    return TallyResponse(
        completed_count=tally.completed_count,
        total_tasks=tally.total_tasks,
        all_completed=tally.all_completed,
        session=session_response(svc.get_session(session_id)),
    )


@router.post("/sessions/{session_id}/restart", response_model=SessionResponse)
async def restart_module(
    session_id: str,
    svc: LearningService = Depends(get_learning_service),
) -> SessionResponse:
    return session_response(await svc.restart(session_id))


@router.delete("/sessions/{session_id}", status_code=204)
async def close_session(
    session_id: str,
    svc: LearningService = Depends(get_learning_service),
) -> None:
    await svc.close_session(session_id)
