# cybertaxi/services/garage_service.py
"""Garage / lot listings and purchases. Garage capacity provides vehicle slots."""

import json
from datetime import datetime

from sqlalchemy.orm import Session

from cybertaxi.models.garage import Garage
from cybertaxi.schemas.garage import GarageCreate
from cybertaxi.services.identity_service import ResolvedIdentity
from cybertaxi.services.player_service import debit_balance, get_balance, to_float
from cybertaxi.utils.logger import get_logger

logger = get_logger(__name__)


def _decode_coords(raw):
    if not raw:
        return None
    try:
        lat, lng = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning(f"[GARAGES] Unreadable coords column: {raw!r}")
        return None
    return [float(lat), float(lng)]


def serialize_garage(garage: Garage, public_player_id: int) -> dict:
    return {
        "id": garage.id,
        "player_id": public_player_id,
        "name": garage.name,
        "coords": _decode_coords(garage.coords),
        "capacity": garage.capacity,
        "type": garage.type,
        "cost_monthly": to_float(garage.cost_monthly),
    }


def list_garages(db: Session, identity: ResolvedIdentity) -> list:
    garages = (
        db.query(Garage)
        .filter(Garage.player_id == identity.surrogate_key)
        .order_by(Garage.id)
        .all()
    )
    return [serialize_garage(g, identity.public_player_id) for g in garages]


def purchase_garage(db: Session, identity: ResolvedIdentity, body: GarageCreate) -> dict:
    """First month's cost is debited in the same transaction as the insert."""
    garage = Garage(
        player_id=identity.surrogate_key,
        name=body.name,
        coords=json.dumps(body.coords),
        capacity=body.capacity,
        type=body.type,
        cost_monthly=body.cost_monthly,
        created_at=datetime.utcnow(),
    )
    try:
        debit_balance(db, identity, body.cost_monthly)
        db.add(garage)
        db.commit()
    except Exception:
        db.rollback()
        raise

    balance = get_balance(db, identity)
    logger.info(
        f"[GARAGES] {body.type} '{body.name}' (capacity {body.capacity}) bought by "
        f"player_id={identity.public_player_id}, balance now {balance}"
    )
    return {"garage_id": garage.id, "bank_balance": balance}
