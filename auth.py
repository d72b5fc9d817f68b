"""
Bearer-token authentication against the Supabase auth API.
"""
import logging
from typing import Optional

import httpx
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from config import get_settings
from core.respondent import Respondent, ViewerTier
from storage.supabase_client import get_supabase_client

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


class AuthUser(BaseModel):
    user_id: str
    email: Optional[str] = None
    token: str


class Member(BaseModel):
    id: str
    email: Optional[str] = None
    tier: ViewerTier = ViewerTier.FREE

    def as_respondent(self) -> Respondent:
        return Respondent(member_id=self.id, email=self.email, tier=self.tier)


async def verify_token(token: str) -> AuthUser:
    settings = get_settings()
    if not settings.supabase_url:
        raise HTTPException(status_code=401, detail="Authentication is not configured")

    try:
        async with httpx.AsyncClient(timeout=10.0) as client:
            response = await client.get(
                f"{settings.supabase_url}/auth/v1/user",
                headers={
                    "apikey": settings.supabase_secret_key or "",
                    "Authorization": f"Bearer {token}",
                },
            )
    except httpx.HTTPError as e:
        logger.error("[AUTH] token check failed: %s", e)
        raise HTTPException(status_code=401, detail="Could not verify credentials")

    if response.status_code != 200:
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    data = response.json()
    return AuthUser(user_id=data["id"], email=data.get("email"), token=token)


async def lookup_member(user: AuthUser) -> Member:
    result = await get_supabase_client().query("members") \
        .select("id, email, tier") \
        .eq("user_id", user.user_id) \
        .limit(1) \
        .execute()
    if result.get("error") or not result.get("data"):
        raise HTTPException(status_code=404, detail="Member not found")

    row = result["data"][0]
    return Member(
        id=str(row["id"]),
        email=row.get("email") or user.email,
        tier=ViewerTier.from_member_tier(row.get("tier")),
    )


async def get_current_user(
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> AuthUser:
    if credentials is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return await verify_token(credentials.credentials)


async def get_current_member(user: AuthUser = Depends(get_current_user)) -> Member:
    return await lookup_member(user)


async def get_optional_member(
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[Member]:
    """Member for a signed-in caller, None for anonymous callers."""
    if credentials is None:
        return None
    user = await verify_token(credentials.credentials)
    return await lookup_member(user)
