"""
FastAPI application for church self-assessments
Uses Supabase REST API for persistence when configured, in-memory storage otherwise
"""
import logging
import time
from datetime import datetime
from typing import Any, Dict, Optional

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from auth import Member, get_current_member, get_optional_member
from collector.collector import ResponseCollector, Submission
from config import configure_logging, get_settings
from core.errors import (
    AssessmentError,
    IdentityRequired,
    IncompleteResponseSet,
    PersistenceFailure,
    ValidationError,
)
from core.respondent import Respondent, ViewerTier, normalize_email
from inference.answer_converter import coerce_answer
from presentation.renderer import render
from questionnaires.banks import get_assessment, list_assessments
from questionnaires.questions import Assessment
from storage.history import summarize_history
from storage.memory_store import InMemoryLeadSink, InMemoryResponseStore
from storage.ports import ILeadSink, IResponseStore
from storage.supabase_client import get_supabase_client
from storage.supabase_store import SupabaseLeadSink, SupabaseResponseStore

settings = get_settings()
configure_logging(settings)
logger = logging.getLogger(__name__)

app = FastAPI(title="Church Assessments API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# STORAGE
# ============================================================================

_memory_store = InMemoryResponseStore()
_memory_leads = InMemoryLeadSink()


def get_store() -> IResponseStore:
    if settings.uses_supabase:
        return SupabaseResponseStore(get_supabase_client())
    return _memory_store


def get_leads() -> ILeadSink:
    if settings.uses_supabase:
        return SupabaseLeadSink(get_supabase_client())
    return _memory_leads


# ============================================================================
# REQUEST/RESPONSE MODELS
# ============================================================================

class AssessmentSubmission(BaseModel):
    """Assessment answers from frontend (question id -> 1..5)"""
    answers: Dict[str, Any]
    email: Optional[str] = None


class ProgressSave(BaseModel):
    answers: Dict[str, Any]
    current_question: int = 0
    email: Optional[str] = None


class LeadRequest(BaseModel):
    email: str


class SubmissionResponse(BaseModel):
    success: bool
    message: str
    result_id: Optional[str] = None
    results: Dict
    saved: bool
    notice: Optional[str] = None
    retake_number: Optional[int] = None
    is_retake: bool = False
    comparison: Optional[Dict] = None
    quality: Dict


# ============================================================================
# HELPERS
# ============================================================================

def require_assessment(assessment_id: str) -> Assessment:
    assessment = get_assessment(assessment_id)
    if assessment is None:
        raise HTTPException(status_code=404, detail=f"Assessment not found: {assessment_id}")
    return assessment


def to_http_error(error: AssessmentError) -> HTTPException:
    if isinstance(error, IncompleteResponseSet):
        return HTTPException(
            status_code=400,
            detail={"message": "Missing required questions", "missing": error.missing},
        )
    if isinstance(error, IdentityRequired):
        return HTTPException(status_code=400, detail=str(error))
    if isinstance(error, ValidationError):
        return HTTPException(status_code=400, detail=str(error))
    if isinstance(error, PersistenceFailure):
        return HTTPException(
            status_code=503,
            detail="Storage is temporarily unavailable. Your answers were not lost; please try again.",
        )
    return HTTPException(status_code=500, detail=str(error))


def respondent_for(member: Optional[Member], email: Optional[str]) -> Respondent:
    """Members are always keyed by member id; anonymous callers by email."""
    if member is not None:
        return member.as_respondent()
    if email:
        return Respondent(email=normalize_email(email))
    return Respondent()


async def collect_and_submit(
        assessment: Assessment,
        respondent: Respondent,
        answers: Dict[str, Any],
        store: IResponseStore,
        leads: ILeadSink,
) -> Submission:
    collector = ResponseCollector(assessment, respondent, store, leads, settings)
    for question_id, value in answers.items():
        collector.record_answer(question_id, coerce_answer(value))
    return await collector.submit()


def submission_response(submission: Submission, tier: ViewerTier) -> SubmissionResponse:
    view = render(submission.result, tier)
    retake_number = submission.retake_number
    return SubmissionResponse(
        success=True,
        message="Assessment submitted successfully",
        result_id=submission.result_id,
        results=view.model_dump(),
        saved=submission.save.saved,
        notice=submission.save.notice,
        retake_number=retake_number,
        is_retake=bool(retake_number and retake_number > 1),
        comparison=submission.comparison,
        quality=submission.result.quality,
    )


# ============================================================================
# HEALTH CHECK
# ============================================================================

@app.get("/")
@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring"""
    return {
        "status": "healthy",
        "service": "assessments-backend",
        "store": settings.assessment_store,
        "timestamp": datetime.now().isoformat()
    }


# ============================================================================
# QUESTION BANK
# ============================================================================

@app.get("/assessments")
async def get_assessments():
    return {"assessments": [a.to_dict() for a in list_assessments()]}


@app.get("/assessments/{assessment_id}/questions")
async def get_assessment_questions(assessment_id: str):
    assessment = require_assessment(assessment_id)
    return assessment.to_dict(include_questions=True)


# ============================================================================
# PROGRESS
# ============================================================================

@app.post("/assessments/{assessment_id}/progress")
async def save_progress(
        assessment_id: str,
        request: ProgressSave,
        member: Optional[Member] = Depends(get_optional_member),
        store: IResponseStore = Depends(get_store),
):
    """Save partial answers for a member or an email-identified respondent"""
    assessment = require_assessment(assessment_id)
    try:
        respondent = respondent_for(member, request.email)
        if not respondent.is_identified:
            raise HTTPException(status_code=401, detail="Sign in or provide an email to save progress")

        collector = ResponseCollector(assessment, respondent, store, settings=settings)
        for question_id, value in request.answers.items():
            collector.record_answer(question_id, coerce_answer(value))
        collector.restore(collector.response_set.answers, request.current_question)
    except AssessmentError as e:
        raise to_http_error(e)

    outcome = await collector.persist_partial()
    if not outcome.saved:
        raise HTTPException(status_code=503, detail=outcome.notice)

    return {
        "success": True,
        "message": "Progress saved successfully",
        "current_question": collector.cursor,
        "saved_at": outcome.saved_at.isoformat(),
    }


@app.get("/assessments/{assessment_id}/progress")
async def load_progress(
        assessment_id: str,
        email: Optional[str] = None,
        member: Optional[Member] = Depends(get_optional_member),
        store: IResponseStore = Depends(get_store),
):
    assessment = require_assessment(assessment_id)
    try:
        respondent = respondent_for(member, email)
        if not respondent.is_identified:
            raise HTTPException(status_code=401, detail="Sign in or provide an email to load progress")
        collector = await ResponseCollector.resume(assessment, respondent, store, settings=settings)
    except AssessmentError as e:
        raise to_http_error(e)

    answers = dict(collector.response_set.answers)
    return {
        "success": True,
        "has_progress": bool(answers),
        "answers": answers,
        "current_question": collector.cursor,
        "progress": collector.progress,
    }


@app.delete("/assessments/{assessment_id}/progress")
async def clear_progress(
        assessment_id: str,
        email: Optional[str] = None,
        member: Optional[Member] = Depends(get_optional_member),
        store: IResponseStore = Depends(get_store),
):
    require_assessment(assessment_id)
    try:
        respondent = respondent_for(member, email)
        if not respondent.is_identified:
            raise HTTPException(status_code=401, detail="Sign in or provide an email to clear progress")
        await store.clear_progress(assessment_id, respondent.key)
    except AssessmentError as e:
        raise to_http_error(e)
    return {"success": True, "message": "Progress cleared"}


@app.post("/assessments/{assessment_id}/lead")
async def capture_lead(
        assessment_id: str,
        request: LeadRequest,
        leads: ILeadSink = Depends(get_leads),
):
    """Email captured at the progress gate"""
    require_assessment(assessment_id)
    try:
        email = normalize_email(request.email)
        await leads.capture_lead(email, f"assessment-progress: {assessment_id}")
    except AssessmentError as e:
        raise to_http_error(e)
    return {"success": True, "message": "Thanks! We'll save your progress."}


# ============================================================================
# GUEST ENDPOINTS
# ============================================================================

@app.post("/guest/assessment/{assessment_id}", response_model=SubmissionResponse)
async def guest_assessment(
        assessment_id: str,
        submission: AssessmentSubmission,
        store: IResponseStore = Depends(get_store),
        leads: ILeadSink = Depends(get_leads),
):
    """Anonymous submission (no auth required)"""
    start_time = time.time()
    assessment = require_assessment(assessment_id)

    try:
        respondent = respondent_for(None, submission.email)
        result = await collect_and_submit(assessment, respondent, submission.answers, store, leads)
    except AssessmentError as e:
        raise to_http_error(e)

    logger.info(f"[TIMING] Guest {assessment_id} submission: {time.time() - start_time:.2f}s")
    return submission_response(result, ViewerTier.ANONYMOUS)


# ============================================================================
# MEMBER ENDPOINTS
# ============================================================================

@app.post("/member/assessment/{assessment_id}", response_model=SubmissionResponse)
async def member_assessment(
        assessment_id: str,
        submission: AssessmentSubmission,
        member: Member = Depends(get_current_member),
        store: IResponseStore = Depends(get_store),
        leads: ILeadSink = Depends(get_leads),
):
    """Member submits an assessment; retakes are numbered and compared"""
    start_time = time.time()
    assessment = require_assessment(assessment_id)

    try:
        result = await collect_and_submit(
            assessment, member.as_respondent(), submission.answers, store, leads
        )
    except AssessmentError as e:
        raise to_http_error(e)

    logger.info(f"[TIMING] Member {assessment_id} submission: {time.time() - start_time:.2f}s")
    return submission_response(result, member.tier)


@app.get("/member/assessments/history")
async def member_history(
        member: Member = Depends(get_current_member),
        store: IResponseStore = Depends(get_store),
):
    try:
        rows = await store.list_results(member.id)
    except AssessmentError as e:
        raise to_http_error(e)

    history = summarize_history(rows)
    return {
        "success": True,
        "member": {"id": member.id, "email": member.email, "tier": member.tier.value},
        **history,
    }


@app.get("/results/{result_id}")
async def get_result(
        result_id: str,
        member: Optional[Member] = Depends(get_optional_member),
        store: IResponseStore = Depends(get_store),
):
    """Stored result, rendered for the caller's tier"""
    try:
        stored = await store.get_result(result_id)
    except AssessmentError as e:
        raise to_http_error(e)

    # members' results are private to them
    if stored is None or (stored.member_id and (member is None or member.id != stored.member_id)):
        raise HTTPException(status_code=404, detail="Result not found")

    tier = member.tier if member is not None else ViewerTier.ANONYMOUS
    return {
        "success": True,
        "result_id": stored.id,
        "completed_at": stored.completed_at.isoformat(),
        "retake_number": stored.retake_number,
        "results": render(stored.result, tier).model_dump(),
    }


# ============================================================================
# RUN SERVER
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
