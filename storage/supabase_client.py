"""
Minimal async client for the Supabase REST (PostgREST) API over httpx.

    result = await supabase_client.query("leads").select("id").eq("email", e).execute()
    result["data"], result["error"]
"""
import json
import logging
from typing import Any, Dict, List, Optional, Union

import httpx

from config import get_settings

logger = logging.getLogger(__name__)


class QueryBuilder:
    def __init__(self, client: "SupabaseClient", table: str):
        self._client = client
        self._table = table
        self._method = "GET"
        self._params: List[tuple] = []
        self._body: Any = None
        self._prefer: List[str] = []

    # ── reads ──────────────────────────────────────────────────────

    def select(self, columns: str = "*") -> "QueryBuilder":
        self._params.append(("select", columns))
        return self

    def eq(self, column: str, value: Any) -> "QueryBuilder":
        self._params.append((column, f"eq.{value}"))
        return self

    def in_(self, column: str, values: List[Any]) -> "QueryBuilder":
        self._params.append((column, f"in.({','.join(str(v) for v in values)})"))
        return self

    def order(self, column: str, desc: bool = False) -> "QueryBuilder":
        self._params.append(("order", f"{column}.{'desc' if desc else 'asc'}"))
        return self

    def limit(self, count: int) -> "QueryBuilder":
        self._params.append(("limit", str(count)))
        return self

    # ── writes ─────────────────────────────────────────────────────

    def insert(self, rows: Union[Dict, List[Dict]]) -> "QueryBuilder":
        self._method = "POST"
        self._body = rows
        self._prefer.append("return=representation")
        return self

    def upsert(self, rows: Union[Dict, List[Dict]], on_conflict: Optional[str] = None) -> "QueryBuilder":
        self._method = "POST"
        self._body = rows
        self._prefer.extend(["resolution=merge-duplicates", "return=representation"])
        if on_conflict:
            self._params.append(("on_conflict", on_conflict))
        return self

    def update(self, data: Dict) -> "QueryBuilder":
        self._method = "PATCH"
        self._body = data
        self._prefer.append("return=representation")
        return self

    def delete(self) -> "QueryBuilder":
        self._method = "DELETE"
        return self

    async def execute(self) -> Dict[str, Any]:
        headers = self._client.headers()
        if self._prefer:
            headers["Prefer"] = ",".join(self._prefer)

        try:
            response = await self._client.http.request(
                self._method,
                f"{self._client.rest_url}/{self._table}",
                params=self._params,
                headers=headers,
                content=json.dumps(self._body) if self._body is not None else None,
            )
        except httpx.HTTPError as e:
            logger.error("[STORE] %s %s failed: %s", self._method, self._table, e)
            return {"data": None, "error": str(e)}

        if response.status_code >= 400:
            logger.error("[STORE] %s %s -> %s %s", self._method, self._table, response.status_code, response.text)
            return {"data": None, "error": response.text or f"HTTP {response.status_code}"}

        if not response.content:
            return {"data": [], "error": None}
        try:
            data = response.json()
        except ValueError as e:
            logger.error("[STORE] %s %s returned a non-JSON body: %s", self._method, self._table, e)
            return {"data": None, "error": f"Invalid JSON response: {e}"}
        return {"data": data, "error": None}


class SupabaseClient:
    def __init__(self, url: str, key: str, http: Optional[httpx.AsyncClient] = None):
        self.url = url.rstrip("/")
        self.rest_url = f"{self.url}/rest/v1"
        self.key = key
        self.http = http or httpx.AsyncClient(timeout=10.0)

    def headers(self) -> Dict[str, str]:
        return {
            "apikey": self.key,
            "Authorization": f"Bearer {self.key}",
            "Content-Type": "application/json",
        }

    def query(self, table: str) -> QueryBuilder:
        return QueryBuilder(self, table)

    async def aclose(self) -> None:
        await self.http.aclose()


_client: Optional[SupabaseClient] = None


def get_supabase_client() -> SupabaseClient:
    """Process-wide client built from SUPABASE_URL / SUPABASE_SECRET_KEY."""
    global _client
    if _client is None:
        settings = get_settings()
        if not settings.supabase_url or not settings.supabase_secret_key:
            raise RuntimeError("SUPABASE_URL and SUPABASE_SECRET_KEY must be set")
        _client = SupabaseClient(settings.supabase_url, settings.supabase_secret_key)
    return _client
