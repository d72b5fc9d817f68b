import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

from core.errors import PersistenceFailure
from core.respondent import Respondent
from core.response_set import ResponseSet
from core.result import AssessmentResult
from storage.ports import ILeadSink, IResponseStore, SavedProgress, StoredResult
from storage.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

PROGRESS_TABLE = "assessment_progress"
MEMBER_RESULTS_TABLE = "member_assessment_results"
ANONYMOUS_RESULTS_TABLE = "assessment_responses_anonymous"
LEADS_TABLE = "leads"


def _check(result: Dict, action: str) -> List[Dict]:
    if result.get("error"):
        raise PersistenceFailure(f"Failed to {action}: {result['error']}")
    return result.get("data") or []


def _parse_time(value) -> datetime:
    if isinstance(value, datetime):
        return value
    if not value:
        return datetime.now(timezone.utc)
    # PostgREST returns "...Z" or "+00:00"
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


def _stored_from_row(row: Dict, member_id: Optional[str]) -> StoredResult:
    return StoredResult(
        id=str(row["id"]),
        assessment_id=row["assessment_id"],
        member_id=member_id,
        email=row.get("email"),
        retake_number=row.get("retake_number") or 1,
        completed_at=_parse_time(row.get("completed_at")),
        answers=row.get("responses_json") or {},
        result=AssessmentResult.from_dict(row["results_json"]),
    )


class SupabaseResponseStore(IResponseStore):
    def __init__(self, client: SupabaseClient):
        self.client = client

    async def upsert_progress(self, response_set: ResponseSet, cursor: int) -> datetime:
        saved_at = datetime.now(timezone.utc)
        respondent = response_set.respondent
        row = {
            "assessment_id": response_set.assessment_id,
            "respondent_key": respondent.key,
            "member_id": respondent.member_id,
            "email": respondent.email,
            "answers": dict(response_set.answers),
            "cursor": cursor,
            "saved_at": saved_at.isoformat(),
        }
        result = await self.client.query(PROGRESS_TABLE).upsert(
            row, on_conflict="assessment_id,respondent_key"
        ).execute()
        _check(result, "save progress")
        return saved_at

    async def load_progress(self, assessment_id: str, respondent_key: str) -> Optional[SavedProgress]:
        result = await self.client.query(PROGRESS_TABLE).select("*") \
            .eq("assessment_id", assessment_id) \
            .eq("respondent_key", respondent_key) \
            .limit(1) \
            .execute()
        rows = _check(result, "load progress")
        if not rows:
            return None

        row = rows[0]
        response_set = ResponseSet(
            assessment_id=assessment_id,
            respondent=Respondent(member_id=row.get("member_id"), email=row.get("email")),
            answers=row.get("answers") or {},
        )
        return SavedProgress(
            response_set=response_set,
            cursor=row.get("cursor") or 0,
            saved_at=_parse_time(row.get("saved_at")),
        )

    async def clear_progress(self, assessment_id: str, respondent_key: str) -> None:
        result = await self.client.query(PROGRESS_TABLE).delete() \
            .eq("assessment_id", assessment_id) \
            .eq("respondent_key", respondent_key) \
            .execute()
        _check(result, "clear progress")

    async def _next_retake_number(self, member_id: str, assessment_id: str) -> int:
        result = await self.client.query(MEMBER_RESULTS_TABLE).select("retake_number") \
            .eq("member_id", member_id) \
            .eq("assessment_id", assessment_id) \
            .order("retake_number", desc=True) \
            .limit(1) \
            .execute()
        rows = _check(result, "read previous results")
        return (rows[0].get("retake_number") or 0) + 1 if rows else 1

    async def insert_result(self, response_set: ResponseSet, result: AssessmentResult) -> StoredResult:
        respondent = response_set.respondent
        completed_at = response_set.completed_at or datetime.now(timezone.utc)
        row = {
            "assessment_id": response_set.assessment_id,
            "responses_json": dict(response_set.answers),
            "results_json": result.to_dict(),
            "completed_at": completed_at.isoformat(),
        }

        if respondent.member_id:
            table = MEMBER_RESULTS_TABLE
            row["member_id"] = respondent.member_id
            row["retake_number"] = await self._next_retake_number(
                respondent.member_id, response_set.assessment_id
            )
        else:
            table = ANONYMOUS_RESULTS_TABLE
            row["email"] = respondent.email

        inserted = _check(await self.client.query(table).insert(row).execute(), "save result")
        if not inserted:
            raise PersistenceFailure(f"Insert into {table} returned no row")

        logger.info("[STORE] saved %s result %s", response_set.assessment_id, inserted[0].get("id"))
        return _stored_from_row({**row, **inserted[0]}, respondent.member_id)

    async def list_results(self, member_id: str, assessment_id: Optional[str] = None) -> List[StoredResult]:
        query = self.client.query(MEMBER_RESULTS_TABLE).select("*").eq("member_id", member_id)
        if assessment_id:
            query = query.eq("assessment_id", assessment_id)
        rows = _check(
            await query.order("retake_number", desc=True).order("completed_at", desc=True).execute(),
            "list results",
        )
        return [_stored_from_row(row, member_id) for row in rows]

    async def get_result(self, result_id: str) -> Optional[StoredResult]:
        for table in (MEMBER_RESULTS_TABLE, ANONYMOUS_RESULTS_TABLE):
            rows = _check(
                await self.client.query(table).select("*").eq("id", result_id).limit(1).execute(),
                "load result",
            )
            if rows:
                return _stored_from_row(rows[0], rows[0].get("member_id"))
        return None


class SupabaseLeadSink(ILeadSink):
    def __init__(self, client: SupabaseClient):
        self.client = client

    async def capture_lead(self, email: str, source: str) -> None:
        result = await self.client.query(LEADS_TABLE).insert(
            {"email": email, "source": source, "status": "new"}
        ).execute()
        _check(result, "capture lead")
