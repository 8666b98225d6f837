# cybertaxi/routers/garages.py
"""Garage / lot listing and purchase."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from cybertaxi.database import get_db
from cybertaxi.schemas.garage import GarageCreate
from cybertaxi.services import garage_service
from cybertaxi.services.identity_service import guard_target
from cybertaxi.utils.security import TokenClaims, get_current_player

router = APIRouter(prefix="/garages")


@router.get("/{player_id:int}", summary="Garages of one player (must be the caller)")
def list_garages(player_id: int, claims: TokenClaims = Depends(get_current_player),
                 db: Session = Depends(get_db)):
    identity = guard_target(db, claims, player_id, "Unauthorized access to player garages")
    return {"status": "Success", "garages": garage_service.list_garages(db, identity)}


@router.post("", status_code=status.HTTP_201_CREATED, summary="Buy a garage or lot")
def purchase_garage(body: GarageCreate, claims: TokenClaims = Depends(get_current_player),
                    db: Session = Depends(get_db)):
    target = body.player_id if body.player_id is not None else claims.player_id
    identity = guard_target(db, claims, target, "Unauthorized to purchase for another player")
    result = garage_service.purchase_garage(db, identity, body)
    return {"status": "Success", **result}
