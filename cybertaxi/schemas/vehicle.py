# cybertaxi/schemas/vehicle.py
from pydantic import BaseModel, Field, field_validator
from decimal import Decimal
from typing import Optional, List
from cybertaxi.schemas.coords import validate_coords
from cybertaxi.utils.vehicle_status import (
    VEHICLE_TYPES, VEHICLE_STATUSES, DEFAULT_PURCHASE_STATUS, normalise_status,
)

MAX_AMOUNT = Decimal("99999999.99")     # NUMERIC(10,2) columns: cost, mileage, cost_monthly


class VehicleCreate(BaseModel):
    player_id: Optional[int] = None      # Must match the token subject when given
    type: str
    cost: Decimal = Field(..., ge=0, le=MAX_AMOUNT, decimal_places=2)
    status: str = DEFAULT_PURCHASE_STATUS
    coords: List[float]
    dest: Optional[List[float]] = None
    wear: Decimal = Field(Decimal("0"), ge=0, le=100)
    battery: Decimal = Field(Decimal("100"), ge=0, le=100)
    mileage: Decimal = Field(Decimal("0"), ge=0, le=MAX_AMOUNT)
    tire_mileage: Decimal = Field(Decimal("0"), ge=0, le=MAX_AMOUNT)

    @field_validator("type")
    @classmethod
    def check_type(cls, v):
        if v not in VEHICLE_TYPES:
            raise ValueError(f"Invalid vehicle type, must be one of: {', '.join(VEHICLE_TYPES)}")
        return v

    @field_validator("status", mode="before")
    @classmethod
    def check_status(cls, v):
        status = normalise_status(v)
        if status not in VEHICLE_STATUSES:
            raise ValueError(f"Invalid status, must be one of: {', '.join(VEHICLE_STATUSES)}")
        return status

    @field_validator("coords", mode="before")
    @classmethod
    def check_coords(cls, v):
        return validate_coords(v, "coords")

    @field_validator("dest", mode="before")
    @classmethod
    def check_dest(cls, v):
        if v is None:
            return None
        return validate_coords(v, "dest")
