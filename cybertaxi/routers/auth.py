# cybertaxi/routers/auth.py
"""Signup, login (by player_id or username) and password reset."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from cybertaxi.database import get_db
from cybertaxi.schemas.auth import (
    SignupRequest, LoginRequest, UsernameLoginRequest, ResetPasswordRequest,
)
from cybertaxi.services import auth_service
from cybertaxi.services.identity_service import guard_target
from cybertaxi.utils.security import TokenClaims, get_current_player

router = APIRouter(prefix="/auth")


@router.post("/signup", status_code=status.HTTP_201_CREATED, summary="Create a player account")
def signup(body: SignupRequest, db: Session = Depends(get_db)):
    """New players get the next public player_id and the starting bank balance."""
    result = auth_service.signup(db, body)
    return {"status": "Success", **result}


@router.post("/login", summary="Log in with player_id + password")
def login(body: LoginRequest, db: Session = Depends(get_db)):
    result = auth_service.login_with_player_id(db, body.player_id, body.password)
    return {"status": "Success", **result}


@router.post("/login/username", summary="Log in with username + password")
def login_username(body: UsernameLoginRequest, db: Session = Depends(get_db)):
    result = auth_service.login_with_username(db, body.username, body.password)
    return {"status": "Success", **result}


@router.post("/reset-password", summary="Change the caller's own password")
def reset_password(
    body: ResetPasswordRequest,
    claims: TokenClaims = Depends(get_current_player),
    db: Session = Depends(get_db),
):
    identity = guard_target(db, claims, body.username, "Unauthorized to reset password for this user")
    auth_service.reset_password(db, identity, body.new_password)
    return {"status": "Success", "message": "Password updated"}
