# cybertaxi/services/auth_service.py
"""
Signup, login and password reset.

Public player_ids are allocated as 1 + max(player_id) inside the inserting
transaction. The unique index on players.player_id rejects a concurrent
duplicate and the allocation is retried a bounded number of times.
"""

from datetime import datetime

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from cybertaxi.config import settings
from cybertaxi.models.player import Player
from cybertaxi.schemas.auth import SignupRequest
from cybertaxi.services.identity_service import ResolvedIdentity, next_public_player_id
from cybertaxi.utils.errors import Conflict, Unauthenticated
from cybertaxi.utils.security import create_access_token, hash_password, verify_password
from cybertaxi.utils.logger import get_logger

logger = get_logger(__name__)


def _credentials_taken(db: Session, username: str, email: str) -> bool:
    return db.query(Player.id).filter(
        or_(Player.username == username, Player.email == email)
    ).first() is not None


def signup(db: Session, body: SignupRequest) -> dict:
    if _credentials_taken(db, body.username, body.email):
        raise Conflict("Username or email already exists")

    password_hash = hash_password(body.password)
    balance = body.bank_balance if body.bank_balance is not None else settings.STARTING_BALANCE

    for attempt in range(1, settings.ID_ALLOCATION_ATTEMPTS + 1):
        player_id = next_public_player_id(db)
        now = datetime.utcnow()
        db.add(Player(
            player_id=player_id,
            username=body.username,
            email=body.email,
            password_hash=password_hash,
            bank_balance=balance,
            score=0,
            created_at=now,
            updated_at=now,
        ))
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            if _credentials_taken(db, body.username, body.email):
                raise Conflict("Username or email already exists")
            logger.warning(f"[AUTH] player_id {player_id} taken concurrently (attempt {attempt})")
            continue

        logger.info(f"[AUTH] Signed up '{body.username}' as player_id={player_id}")
        return {
            "token": create_access_token(player_id),
            "player_id": player_id,
            "username": body.username,
        }

    raise Conflict("Could not allocate a player id, please retry")


def _check_password(player, password: str, who: str):
    if player is None or not verify_password(password, player.password_hash):
        logger.warning(f"[AUTH] Failed login for {who}")
        raise Unauthenticated("Invalid credentials")


def login_with_player_id(db: Session, player_id: int, password: str) -> dict:
    player = db.query(Player).filter(Player.player_id == player_id).first()
    _check_password(player, password, f"player_id={player_id}")
    logger.info(f"[AUTH] player_id={player_id} logged in")
    return {"token": create_access_token(player.player_id)}


def login_with_username(db: Session, username: str, password: str) -> dict:
    player = db.query(Player).filter(Player.username == username).first()
    _check_password(player, password, f"username={username!r}")
    logger.info(f"[AUTH] '{username}' logged in as player_id={player.player_id}")
    return {"token": create_access_token(player.player_id), "player_id": player.player_id}


def reset_password(db: Session, identity: ResolvedIdentity, new_password: str):
    player = db.query(Player).filter(Player.id == identity.surrogate_key).first()
    player.password_hash = hash_password(new_password)
    player.updated_at = datetime.utcnow()
    db.commit()
    logger.info(f"[AUTH] Password reset for '{identity.username}'")
