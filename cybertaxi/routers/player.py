# cybertaxi/routers/player.py
"""
Player endpoints. /player/{player_id} takes the numeric public id;
the balance/slots/vehicles/garages endpoints take the username.
"""

from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from cybertaxi.database import get_db
from cybertaxi.services import garage_service, player_service, vehicle_service
from cybertaxi.services.identity_service import guard_target
from cybertaxi.utils.security import TokenClaims, get_current_player

router = APIRouter(prefix="/player")

FORBIDDEN_MESSAGE = "Unauthorized access to player data"


@router.get("/{player_id:int}", summary="Player profile by public player_id")
def get_player(player_id: int, claims: TokenClaims = Depends(get_current_player),
               db: Session = Depends(get_db)):
    identity = guard_target(db, claims, player_id, FORBIDDEN_MESSAGE)
    return {"status": "Success", "player": player_service.get_profile(db, identity)}


@router.get("/{username}/balance", summary="Bank balance by username")
def get_balance(username: str, claims: TokenClaims = Depends(get_current_player),
                db: Session = Depends(get_db)):
    identity = guard_target(db, claims, username, FORBIDDEN_MESSAGE)
    return {"status": "Success", "bank_balance": player_service.get_balance(db, identity)}


@router.get("/{username}/slots", summary="Parking slots by username")
def get_slots(username: str, claims: TokenClaims = Depends(get_current_player),
              db: Session = Depends(get_db)):
    identity = guard_target(db, claims, username, FORBIDDEN_MESSAGE)
    return {"status": "Success", **player_service.get_slots(db, identity)}


@router.get("/{username}/vehicles", summary="Player's fleet by username")
def get_vehicles(username: str, status: Optional[str] = None,
                 claims: TokenClaims = Depends(get_current_player),
                 db: Session = Depends(get_db)):
    identity = guard_target(db, claims, username, FORBIDDEN_MESSAGE)
    return {"status": "Success", "vehicles": vehicle_service.list_owned_vehicles(db, identity, status)}


@router.get("/{username}/garages", summary="Player's garages and lots by username")
def get_garages(username: str, claims: TokenClaims = Depends(get_current_player),
                db: Session = Depends(get_db)):
    identity = guard_target(db, claims, username, FORBIDDEN_MESSAGE)
    return {"status": "Success", "garages": garage_service.list_garages(db, identity)}
