# cybertaxi/services/identity_service.py
"""
Identity resolution and ownership checks.

Resource tables (vehicles, garages) key on players.id, the surrogate key.
URLs and tokens carry the public player_id or the username. Every handler
that touches a resource table goes through resolve_identity() first and
queries with ResolvedIdentity.surrogate_key, never with the public id.
"""

from dataclasses import dataclass
from typing import Union

from sqlalchemy import Integer, cast, func
from sqlalchemy.orm import Session

from cybertaxi.models.player import Player
from cybertaxi.models.vehicle import Vehicle
from cybertaxi.utils.errors import Forbidden, NotFound
from cybertaxi.utils.security import TokenClaims
from cybertaxi.utils.logger import get_logger

logger = get_logger(__name__)

VEHICLE_ID_PREFIX = "CT-"


@dataclass(frozen=True)
class ResolvedIdentity:
    surrogate_key: int
    public_player_id: int
    username: str


def resolve_identity(db: Session, player_id_or_username: Union[int, str]) -> ResolvedIdentity:
    """Look up a player by public id (int) or username (str). Raises NotFound."""
    if isinstance(player_id_or_username, int):
        row = db.query(Player.id, Player.player_id, Player.username).filter(
            Player.player_id == player_id_or_username
        ).first()
    else:
        row = db.query(Player.id, Player.player_id, Player.username).filter(
            Player.username == player_id_or_username
        ).first()

    if row is None:
        logger.info(f"[IDENTITY] No player for {player_id_or_username!r}")
        raise NotFound("Player not found")
    return ResolvedIdentity(surrogate_key=row.id, public_player_id=row.player_id, username=row.username)


def authorize(claims: TokenClaims, public_player_id: int, message: str = Forbidden.default_message):
    if claims.player_id != public_player_id:
        logger.warning(
            f"[AUTH] Forbidden: token player_id={claims.player_id} target player_id={public_player_id}"
        )
        raise Forbidden(message)


def guard_target(
    db: Session,
    claims: TokenClaims,
    target: Union[int, str],
    message: str = Forbidden.default_message,
) -> ResolvedIdentity:
    """
    Resolve the path target and make sure the token subject owns it.

    A numeric target already is a public id, so it is compared before the
    lookup (a foreign id is 403 even if it does not exist). A username has to
    be resolved before its public id is known, so a missing username is 404.
    """
    if isinstance(target, int):
        authorize(claims, target, message)
        return resolve_identity(db, target)

    identity = resolve_identity(db, target)
    authorize(claims, identity.public_player_id, message)
    return identity


# ── Id allocation ────────────────────────────────────────────────────────────

def next_public_player_id(db: Session) -> int:
    """1 + max(player_id). Unique constraint on players.player_id catches races."""
    current = db.query(func.max(Player.player_id)).scalar()
    return (current or 0) + 1


def next_vehicle_id(db: Session) -> str:
    """CT-### with the numeric suffix one past the highest in use."""
    suffix = cast(func.substr(Vehicle.id, len(VEHICLE_ID_PREFIX) + 1), Integer)
    highest = db.query(func.max(suffix)).filter(Vehicle.id.like(f"{VEHICLE_ID_PREFIX}%")).scalar()
    return f"{VEHICLE_ID_PREFIX}{(highest or 0) + 1:03d}"
