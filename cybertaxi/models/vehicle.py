# cybertaxi/models/vehicle.py
"""
Vehicles table: one row per taxi in a player's fleet.
`id` is the human-readable CT-### key. `player_id` holds players.id (surrogate key).
Coordinates are stored as separate lat/lng columns and serialised as [lat, lng].
"""

from sqlalchemy import Column, Integer, String, DateTime, Numeric, ForeignKey, Index
from cybertaxi.database import Base


class Vehicle(Base):
    __tablename__ = "vehicles"
    __table_args__ = (Index("idx_coords", "lat", "lng"),)

    id = Column(String(20), primary_key=True)
    player_id = Column(Integer, ForeignKey("players.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String(20), nullable=False)
    status = Column(String(20), nullable=False, default="new", index=True)
    wear = Column(Numeric(5, 2), nullable=False, default=0)
    battery = Column(Numeric(5, 2), nullable=False, default=100)
    mileage = Column(Numeric(10, 2), nullable=False, default=0)
    tire_mileage = Column(Numeric(10, 2), nullable=False, default=0)
    cost = Column(Numeric(10, 2), nullable=False)
    lat = Column(Numeric(10, 7))
    lng = Column(Numeric(10, 7))
    dest_lat = Column(Numeric(10, 7))
    dest_lng = Column(Numeric(10, 7))
    purchase_date = Column(DateTime)
    delivery_timestamp = Column(DateTime)
    created_at = Column(DateTime)
    updated_at = Column(DateTime)

    def __repr__(self):
        return f"<Vehicle {self.id} type={self.type} status={self.status}>"
