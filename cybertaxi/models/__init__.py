# CyberTaxi: Database Models
# Import all models here for SQLAlchemy discovery

from cybertaxi.models.player import Player     # noqa
from cybertaxi.models.vehicle import Vehicle   # noqa
from cybertaxi.models.garage import Garage     # noqa
