# cybertaxi/services/vehicle_service.py
"""
Vehicle fleet queries and the purchase flow.

Purchase: validated body → conditional debit → insert CT-### row → commit.
The debit and the insert share one transaction, so a failed insert never
leaves the player charged.
"""

from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from cybertaxi.config import settings
from cybertaxi.models.player import Player
from cybertaxi.models.vehicle import Vehicle
from cybertaxi.schemas.vehicle import VehicleCreate
from cybertaxi.services.identity_service import ResolvedIdentity, next_vehicle_id
from cybertaxi.services.player_service import debit_balance, get_balance, to_float
from cybertaxi.utils.errors import Conflict, ValidationFailed
from cybertaxi.utils.vehicle_status import VEHICLE_STATUSES, normalise_status
from cybertaxi.utils.logger import get_logger

logger = get_logger(__name__)


def _pair(a, b) -> Optional[list]:
    if a is None or b is None:
        return None
    return [float(a), float(b)]


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def serialize_vehicle(vehicle: Vehicle, public_player_id: int) -> dict:
    return {
        "id": vehicle.id,
        "player_id": public_player_id,
        "type": vehicle.type,
        "status": vehicle.status,
        "wear": to_float(vehicle.wear),
        "battery": to_float(vehicle.battery, 100.0),
        "mileage": to_float(vehicle.mileage),
        "tire_mileage": to_float(vehicle.tire_mileage),
        "cost": to_float(vehicle.cost),
        "coords": _pair(vehicle.lat, vehicle.lng),
        "dest": _pair(vehicle.dest_lat, vehicle.dest_lng),
        "purchase_date": _iso(vehicle.purchase_date),
        "delivery_timestamp": _iso(vehicle.delivery_timestamp),
        "created_at": _iso(vehicle.created_at),
        "updated_at": _iso(vehicle.updated_at),
    }


def _vehicle_id_taken(db: Session, vehicle_id: str) -> bool:
    return db.query(Vehicle.id).filter(Vehicle.id == vehicle_id).first() is not None


def check_status_filter(status: Optional[str]) -> Optional[str]:
    if status is None or status == "":
        return None
    status = normalise_status(status)
    if status not in VEHICLE_STATUSES:
        raise ValidationFailed(f"Invalid status, must be one of: {', '.join(VEHICLE_STATUSES)}")
    return status


def list_owned_vehicles(db: Session, identity: ResolvedIdentity, status: Optional[str] = None) -> list:
    """Vehicles owned by `identity`. Read-only: listing never mutates rows."""
    status = check_status_filter(status)
    q = db.query(Vehicle).filter(Vehicle.player_id == identity.surrogate_key)
    if status:
        q = q.filter(Vehicle.status == status)
    vehicles = q.order_by(Vehicle.id).all()
    logger.debug(f"[VEHICLES] {len(vehicles)} vehicles for player_id={identity.public_player_id}")
    return [serialize_vehicle(v, identity.public_player_id) for v in vehicles]


def list_other_vehicles(db: Session, identity: ResolvedIdentity, status: Optional[str] = None) -> list:
    """Every vehicle not owned by `identity`, for the shared map."""
    status = check_status_filter(status)
    q = (
        db.query(Vehicle, Player.player_id)
        .join(Player, Vehicle.player_id == Player.id)
        .filter(Vehicle.player_id != identity.surrogate_key)
    )
    if status:
        q = q.filter(Vehicle.status == status)
    rows = q.order_by(Vehicle.id).all()
    return [serialize_vehicle(vehicle, public_id) for vehicle, public_id in rows]


def purchase_vehicle(db: Session, identity: ResolvedIdentity, body: VehicleCreate) -> dict:
    now = datetime.utcnow()
    # Vehicles bought already active are on the road; anything else waits for delivery.
    delivery = None if body.status == "active" else now + timedelta(hours=settings.DELIVERY_DELAY_HOURS)
    dest_lat, dest_lng = body.dest if body.dest else (None, None)

    for attempt in range(1, settings.ID_ALLOCATION_ATTEMPTS + 1):
        vehicle_id = next_vehicle_id(db)
        try:
            debit_balance(db, identity, body.cost)
            db.add(Vehicle(
                id=vehicle_id,
                player_id=identity.surrogate_key,
                type=body.type,
                status=body.status,
                wear=body.wear,
                battery=body.battery,
                mileage=body.mileage,
                tire_mileage=body.tire_mileage,
                cost=body.cost,
                lat=body.coords[0],
                lng=body.coords[1],
                dest_lat=dest_lat,
                dest_lng=dest_lng,
                purchase_date=now,
                delivery_timestamp=delivery,
                created_at=now,
                updated_at=now,
            ))
            db.commit()
        except IntegrityError:
            db.rollback()
            if not _vehicle_id_taken(db, vehicle_id):
                raise
            logger.warning(f"[VEHICLES] {vehicle_id} taken by a concurrent purchase (attempt {attempt})")
            continue
        except Exception:
            db.rollback()
            raise

        balance = get_balance(db, identity)
        logger.info(
            f"[VEHICLES] {vehicle_id} ({body.type}) bought by player_id={identity.public_player_id} "
            f"for {body.cost}, balance now {balance}"
        )
        return {"vehicle_id": vehicle_id, "bank_balance": balance}

    raise Conflict("Could not allocate a vehicle id, please retry")
