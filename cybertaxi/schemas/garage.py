# cybertaxi/schemas/garage.py
from pydantic import BaseModel, Field, field_validator
from decimal import Decimal
from typing import Optional, List
from cybertaxi.schemas.coords import validate_coords
from cybertaxi.schemas.vehicle import MAX_AMOUNT
from cybertaxi.utils.vehicle_status import GARAGE_TYPES


class GarageCreate(BaseModel):
    player_id: Optional[int] = None
    name: str = Field(..., min_length=1, max_length=100)
    coords: List[float]
    capacity: int = Field(..., ge=1)
    type: str = "garage"                 # garage | lot
    cost_monthly: Decimal = Field(..., ge=0, le=MAX_AMOUNT, decimal_places=2)

    @field_validator("type")
    @classmethod
    def check_type(cls, v):
        if v not in GARAGE_TYPES:
            raise ValueError("Invalid garage type, must be garage or lot")
        return v

    @field_validator("coords", mode="before")
    @classmethod
    def check_coords(cls, v):
        return validate_coords(v, "coords")
