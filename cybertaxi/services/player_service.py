# cybertaxi/services/player_service.py
"""
Player profile, balance and slot queries, plus the atomic balance debit
used by vehicle and garage purchases.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import func, update
from sqlalchemy.orm import Session

from cybertaxi.models.garage import Garage
from cybertaxi.models.player import Player
from cybertaxi.models.vehicle import Vehicle
from cybertaxi.services.identity_service import ResolvedIdentity
from cybertaxi.utils.errors import InsufficientFunds, NotFound
from cybertaxi.utils.logger import get_logger

logger = get_logger(__name__)


def to_float(value, default: float = 0.0) -> float:
    """DECIMAL columns come back as Decimal (or str on some drivers); JSON wants numbers."""
    if value is None:
        return default
    return float(value)


def get_profile(db: Session, identity: ResolvedIdentity) -> dict:
    player = db.query(Player).filter(Player.id == identity.surrogate_key).first()
    if not player:
        raise NotFound("Player not found")
    return {
        "player_id": player.player_id,
        "username": player.username,
        "email": player.email,
        "bank_balance": to_float(player.bank_balance),
        "score": to_float(player.score),
    }


def get_balance(db: Session, identity: ResolvedIdentity) -> float:
    balance = db.query(Player.bank_balance).filter(Player.id == identity.surrogate_key).scalar()
    if balance is None:
        raise NotFound("Player not found")
    return to_float(balance)


def get_slots(db: Session, identity: ResolvedIdentity) -> dict:
    """Parking slots = garage capacity; every owned vehicle uses one slot."""
    total_slots = db.query(func.coalesce(func.sum(Garage.capacity), 0)).filter(
        Garage.player_id == identity.surrogate_key
    ).scalar()
    used_slots = db.query(func.count(Vehicle.id)).filter(
        Vehicle.player_id == identity.surrogate_key
    ).scalar()
    total_slots, used_slots = int(total_slots or 0), int(used_slots or 0)
    return {
        "total_slots": total_slots,
        "used_slots": used_slots,
        "available_slots": total_slots - used_slots,
    }


def debit_balance(db: Session, identity: ResolvedIdentity, amount: Decimal):
    """
    Subtract `amount` in one conditional UPDATE. Zero matched rows means the
    balance was too low at the moment of the write. Does not commit: the caller
    commits the debit together with the row it pays for.
    """
    result = db.execute(
        update(Player)
        .where(Player.id == identity.surrogate_key, Player.bank_balance >= amount)
        .values(bank_balance=Player.bank_balance - amount, updated_at=datetime.utcnow())
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        logger.info(f"[BALANCE] Insufficient funds for player_id={identity.public_player_id} amount={amount}")
        raise InsufficientFunds("Insufficient funds")
