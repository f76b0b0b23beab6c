"""
Request identity: bearer JWT for the signed-in user, cookie for the browser session
"""

from datetime import datetime, timedelta

from fastapi import Depends, HTTPException, Request, Response
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from oneclick.core.config import (
    JWT_ALGORITHM,
    JWT_EXPIRATION_HOURS,
    JWT_SECRET,
    SESSION_COOKIE_NAME,
    SESSION_TTL_SECONDS,
)
from oneclick.services.session_cache import new_session_id

security = HTTPBearer()
optional_security = HTTPBearer(auto_error=False)


def create_access_token(user_id: str, email: str, name: str, picture: str | None = None) -> str:
    payload = {
        "sub": user_id,  # Subject (user ID)
        "email": email,
        "name": name,
        "picture": picture,
        "exp": datetime.utcnow() + timedelta(hours=JWT_EXPIRATION_HOURS),
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    """
    Validate a JWT issued by /auth/google. Expired or tampered tokens are 401s.
    """
    try:
        payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except JWTError as e:
        raise HTTPException(status_code=401, detail=f"Invalid authentication token: {str(e)}")
    if not payload.get("sub"):
        raise HTTPException(status_code=401, detail="Invalid authentication token: missing subject")
    return payload


async def get_current_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(optional_security),
) -> str | None:
    """User id of the signed-in caller, or None for anonymous sessions."""
    if credentials is None:
        return None
    return decode_access_token(credentials.credentials)["sub"]


async def require_identity(identity: str | None = Depends(get_current_identity)) -> str:
    if identity is None:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return identity


def get_session_id(request: Request, response: Response) -> str:
    """
    Session id from the session cookie; a new one is issued when absent.
    """
    session_id = request.cookies.get(SESSION_COOKIE_NAME)
    if not session_id:
        session_id = new_session_id()
        response.set_cookie(
            SESSION_COOKIE_NAME,
            session_id,
            max_age=SESSION_TTL_SECONDS,
            httponly=True,
            samesite="lax",
        )
    return session_id
