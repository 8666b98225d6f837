# cybertaxi/models/garage.py
"""
Garages / lots owned by a player. Capacity defines the player's parking slots.
`coords` is a JSON-encoded [lat, lng] pair.
"""

from sqlalchemy import Column, Integer, String, DateTime, Numeric, Text, ForeignKey
from cybertaxi.database import Base


class Garage(Base):
    __tablename__ = "garages"

    id = Column(Integer, primary_key=True, autoincrement=True)
    player_id = Column(Integer, ForeignKey("players.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    coords = Column(Text, nullable=False)
    capacity = Column(Integer, nullable=False)
    type = Column(String(10), nullable=False)  # garage | lot
    cost_monthly = Column(Numeric(10, 2), nullable=False)
    created_at = Column(DateTime)

    def __repr__(self):
        return f"<Garage {self.id} name={self.name} capacity={self.capacity}>"
