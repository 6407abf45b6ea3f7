"""Recruiter accounts: register, login and the current user."""

import logging
import sqlite3

from fastapi import APIRouter, Depends, HTTPException, status

from saturn_scheduler import database as db
from saturn_scheduler.auth import create_token, get_current_user, hash_password, verify_password
from saturn_scheduler.errors import AuthenticationError, InvalidRequestError
from saturn_scheduler.models import User, UserLogin, UserRegister

log = logging.getLogger(__name__)

router = APIRouter()


def _signed_in(user: User) -> dict:
    return {"token": create_token(user.id, user.email), "user": user.model_dump()}


def _email_taken() -> HTTPException:
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")


@router.post("/register")
async def register(req: UserRegister):
    email = req.email.strip().lower()
    if not email or not req.password:
        raise InvalidRequestError("Email and password are required")
    if db.get_user_by_email(email):
        raise _email_taken()

    user = User(email=email, name=req.name.strip())
    try:
        db.insert_user({**user.model_dump(), "password_hash": hash_password(req.password)})
    except sqlite3.IntegrityError:
        # concurrent registration for the same address
        raise _email_taken() from None
    log.info("Registered recruiter %s", user.id)
    return _signed_in(user)


@router.post("/login")
async def login(req: UserLogin):
    row = db.get_user_by_email(req.email.strip().lower())
    if row is None or not verify_password(req.password, row["password_hash"]):
        raise AuthenticationError("Invalid email or password")
    return _signed_in(User.model_validate({**row, "name": row["name"] or ""}))


@router.get("/me", response_model=User)
async def me(current_user: dict = Depends(get_current_user)):
    return User.model_validate({**current_user, "name": current_user["name"] or ""})
