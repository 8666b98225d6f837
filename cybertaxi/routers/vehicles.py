# cybertaxi/routers/vehicles.py
"""Vehicle fleet listing and purchase."""

from typing import Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from cybertaxi.database import get_db
from cybertaxi.schemas.vehicle import VehicleCreate
from cybertaxi.services import vehicle_service
from cybertaxi.services.identity_service import guard_target, resolve_identity
from cybertaxi.utils.security import TokenClaims, get_current_player

router = APIRouter(prefix="/vehicles")

FORBIDDEN_MESSAGE = "Unauthorized access to player vehicles"


# Registered before /{player_id} so "others" is not parsed as an id
@router.get("/others", summary="Vehicles of every other player")
def list_other_vehicles(status: Optional[str] = None,
                        claims: TokenClaims = Depends(get_current_player),
                        db: Session = Depends(get_db)):
    identity = resolve_identity(db, claims.player_id)
    return {"status": "Success", "vehicles": vehicle_service.list_other_vehicles(db, identity, status)}


@router.get("/{player_id:int}", summary="Vehicles of one player (must be the caller)")
def list_vehicles(player_id: int, status: Optional[str] = None,
                  claims: TokenClaims = Depends(get_current_player),
                  db: Session = Depends(get_db)):
    identity = guard_target(db, claims, player_id, FORBIDDEN_MESSAGE)
    return {"status": "Success", "vehicles": vehicle_service.list_owned_vehicles(db, identity, status)}


@router.post("", status_code=status.HTTP_201_CREATED, summary="Buy a vehicle")
def purchase_vehicle(body: VehicleCreate,
                     claims: TokenClaims = Depends(get_current_player),
                     db: Session = Depends(get_db)):
    """Debits the cost from the caller's balance. The optional body player_id must be the caller."""
    target = body.player_id if body.player_id is not None else claims.player_id
    identity = guard_target(db, claims, target, "Unauthorized to purchase for another player")
    result = vehicle_service.purchase_vehicle(db, identity, body)
    return {"status": "Success", **result}
