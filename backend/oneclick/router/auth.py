"""
Auth Router
Google sign-in, JWT identity and session logout
"""

from datetime import datetime
from typing import Optional

import httpx
from fastapi import APIRouter, Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials
from pydantic import BaseModel

from oneclick.core.config import (
    GOOGLE_CLIENT_ID,
    GOOGLE_CLIENT_SECRET,
    GOOGLE_REDIRECT_URI,
    GOOGLE_TOKEN_URL,
    GOOGLE_USERINFO_URL,
    HTTP_TIMEOUT_SECONDS,
)
from oneclick.core.security import create_access_token, decode_access_token, get_session_id, security
from oneclick.db.database import get_users_collection, is_database_configured
from oneclick.models.user import User
from oneclick.services.session_cache import SessionPlanCache, get_session_cache

router = APIRouter(prefix="/auth", tags=["authentication"])


class GoogleTokenRequest(BaseModel):
    code: str


class UserInfo(BaseModel):
    id: str
    email: str
    name: str
    given_name: Optional[str] = None
    family_name: Optional[str] = None
    picture: Optional[str] = None
    email_verified: bool = False

    @classmethod
    def from_google(cls, profile: dict) -> "UserInfo":
        return cls(
            id=profile["id"],
            email=profile["email"],
            name=profile.get("name", ""),
            given_name=profile.get("given_name"),
            family_name=profile.get("family_name"),
            picture=profile.get("picture"),
            email_verified=profile.get("verified_email", False),
        )


class AuthResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserInfo


async def _fetch_google_profile(code: str) -> dict:
    """
    Trade an authorization code for a Google access token, then read the profile with it.
    """
    async with httpx.AsyncClient(timeout=HTTP_TIMEOUT_SECONDS) as client:
        exchange = await client.post(
            GOOGLE_TOKEN_URL,
            data={
                "code": code,
                "client_id": GOOGLE_CLIENT_ID,
                "client_secret": GOOGLE_CLIENT_SECRET,
                "redirect_uri": GOOGLE_REDIRECT_URI,
                "grant_type": "authorization_code",
            },
        )
        if exchange.status_code != 200:
            raise HTTPException(status_code=400, detail=f"Failed to exchange code: {exchange.text}")

        profile = await client.get(
            GOOGLE_USERINFO_URL,
            headers={"Authorization": f"Bearer {exchange.json().get('access_token')}"},
        )
        if profile.status_code != 200:
            raise HTTPException(status_code=400, detail="Failed to fetch user info from Google")
        return profile.json()


async def _upsert_user(user_info: UserInfo) -> None:
    """Create or refresh the user document, keeping its first created_at."""
    users = get_users_collection()
    existing = await users.find_one({"google_id": user_info.id})
    now = datetime.utcnow()

    doc = User(
        google_id=user_info.id,
        **user_info.model_dump(exclude={"id"}),
        created_at=(existing or {}).get("created_at", now),
        updated_at=now,
        last_login=now,
    )
    if existing:
        result = await users.update_one({"google_id": user_info.id}, {"$set": doc.model_dump(exclude={"created_at"})})
        print(f"[auth] 💾 Updated user {user_info.id}: modified={result.modified_count}")
    else:
        result = await users.insert_one(doc.model_dump())
        print(f"[auth] 💾 Created user {user_info.id}: inserted_id={result.inserted_id}")


@router.post("/google", response_model=AuthResponse)
async def google_auth(token_request: GoogleTokenRequest):
    """
    Sign in with a Google authorization code.

    The user document is upserted when MongoDB is configured, and the response
    carries our own JWT. The frontend follows up with POST /api/plan/migrate to
    move the anonymous draft plan into the user's storage.
    """
    try:
        user_info = UserInfo.from_google(await _fetch_google_profile(token_request.code))
        print(f"[auth] Signed in Google user {user_info.id} ({user_info.email})")

        if is_database_configured():
            await _upsert_user(user_info)

        token = create_access_token(user_info.id, user_info.email, user_info.name, user_info.picture)
        return AuthResponse(access_token=token, user=user_info)
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Authentication failed: {str(e)}")


@router.get("/me", response_model=UserInfo)
async def get_current_user(credentials: HTTPAuthorizationCredentials = Depends(security)):
    """Identity carried by the bearer JWT; the frontend calls this on load."""
    claims = decode_access_token(credentials.credentials)
    return UserInfo(
        id=claims["sub"],
        email=claims.get("email", ""),
        name=claims.get("name", ""),
        picture=claims.get("picture"),
        email_verified=True,
    )


@router.post("/logout")
async def logout(
    session_id: str = Depends(get_session_id),
    cache: SessionPlanCache = Depends(get_session_cache),
):
    """
    The client drops its JWT; the server forgets this browser's draft plan.
    """
    cache.discard(session_id)
    return {"success": True, "message": "Logged out successfully"}


@router.get("/config")
async def get_auth_config():
    """Public OAuth settings the frontend needs to start the Google flow."""
    if not GOOGLE_CLIENT_ID or not GOOGLE_REDIRECT_URI:
        raise HTTPException(status_code=500, detail="Google OAuth is not configured")

    return {
        "google_client_id": GOOGLE_CLIENT_ID,
        "redirect_uri": GOOGLE_REDIRECT_URI,
        "scopes": ["openid", "email", "profile"],
    }
