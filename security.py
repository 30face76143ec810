"""
Authentication & authorization helpers.
Handles password hashing, JWT creation/decoding and the FastAPI
dependencies that guard routes.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
import jwt
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from config import BCRYPT_ROUNDS, JWT_ALGORITHM, JWT_EXPIRY_MINUTES, SECRET_KEY
from database import find_by_id
from schemas import Role

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


# --------------- Passwords -------------------------------------------------

def hash_password(plain: str) -> str:
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # malformed hash or over-long password
        return False


# --------------- Tokens ----------------------------------------------------

def create_access_token(user: Dict[str, Any]) -> str:
    payload = {
        "email": user["email"],
        "sub": str(user["_id"]),
        "role": user["role"],
        "exp": datetime.now(timezone.utc) + timedelta(minutes=JWT_EXPIRY_MINUTES),
    }
    return jwt.encode(payload, SECRET_KEY, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Verify and decode a token. Returns None if it is invalid or expired."""
    try:
        return jwt.decode(token, SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        logger.info("Rejected expired token")
        return None
    except jwt.InvalidTokenError:
        logger.warning("Rejected invalid token")
        return None


# --------------- Redirects -------------------------------------------------

def redirect_after_login(role: str, next_path: Optional[str] = None) -> str:
    """Where the client should land after signing in.

    Admins always go to the admin panel. Clients return to the route they
    were bounced from when it is a local, non-admin path.
    """
    if role == Role.ADMIN.value:
        return "/admin"
    if next_path and next_path.startswith("/") and not next_path.startswith("//"):
        if not next_path.startswith("/admin") and not next_path.startswith("/login"):
            return next_path
    return "/"


# --------------- Dependencies ----------------------------------------------

def _unauthorized(detail: str = "Unauthorized") -> HTTPException:
    return HTTPException(status_code=401, detail=detail, headers={"WWW-Authenticate": "Bearer"})


def optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[Dict[str, Any]]:
    if credentials is None:
        return None
    data = decode_access_token(credentials.credentials)
    if data is None:
        raise _unauthorized("Invalid or expired token")
    user = find_by_id("user", data.get("sub", ""))
    if user is None:
        raise _unauthorized("User no longer exists")
    return user


def get_current_user(user: Optional[Dict[str, Any]] = Depends(optional_user)) -> Dict[str, Any]:
    if user is None:
        raise _unauthorized()
    return user


def require_admin(user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
    if user.get("role") != Role.ADMIN.value:
        logger.warning("Non-admin user %s attempted an admin action", user.get("email"))
        raise HTTPException(status_code=403, detail="Admin access required")
    return user


def is_admin(user: Optional[Dict[str, Any]]) -> bool:
    return bool(user) and user.get("role") == Role.ADMIN.value
