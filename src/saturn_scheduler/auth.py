"""Recruiter authentication: bcrypt password hashes and HS256 bearer tokens."""

from __future__ import annotations

import os
from datetime import datetime, timedelta, timezone

import bcrypt
import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from saturn_scheduler import database as db
from saturn_scheduler.errors import AuthenticationError

JWT_SECRET = os.environ.get("JWT_SECRET", "saturn-scheduler-dev-secret-change-me")
JWT_ALGORITHM = "HS256"
TOKEN_LIFETIME = timedelta(days=7)

# auto_error=False: a missing header must surface as 401, not FastAPI's 403
_bearer = HTTPBearer(auto_error=False)


# ── Passwords ─────────────────────────────────────────────────────────────

def hash_password(password: str) -> str:
    digest = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt())
    return digest.decode("ascii")


def verify_password(password: str, password_hash: str) -> bool:
    if not password_hash:
        return False
    return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("ascii"))


# ── Tokens ────────────────────────────────────────────────────────────────

def create_token(user_id: str, email: str, lifetime: timedelta = TOKEN_LIFETIME) -> str:
    issued = datetime.now(timezone.utc)
    claims = {"sub": user_id, "email": email, "iat": issued, "exp": issued + lifetime}
    return jwt.encode(claims, JWT_SECRET, algorithm=JWT_ALGORITHM)


def decode_token(token: str) -> dict:
    """Claims of a valid token; AuthenticationError for anything else."""
    try:
        return jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Token expired")
    except jwt.InvalidTokenError:
        raise AuthenticationError("Invalid token")


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> dict:
    if credentials is None:
        raise AuthenticationError("Authentication required")
    claims = decode_token(credentials.credentials)
    user = db.get_user_by_id(claims.get("sub", ""))
    if not user:
        raise AuthenticationError("User not found")
    return user
