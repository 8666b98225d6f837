# cybertaxi/models/player.py
"""
Players table: the credential store.
`id` is the surrogate key that every resource table references.
`player_id` is the public number carried in tokens and URLs; never use it as a foreign key.
"""

from sqlalchemy import Column, Integer, String, DateTime, Numeric
from cybertaxi.database import Base


class Player(Base):
    __tablename__ = "players"

    id = Column(Integer, primary_key=True, autoincrement=True)
    player_id = Column(Integer, unique=True, nullable=False, index=True)
    username = Column(String(50), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    bank_balance = Column(Numeric(12, 2), default=0, nullable=False)
    score = Column(Numeric(12, 2), default=0, nullable=False)
    created_at = Column(DateTime)
    updated_at = Column(DateTime)

    def __repr__(self):
        return f"<Player {self.player_id} username={self.username}>"
