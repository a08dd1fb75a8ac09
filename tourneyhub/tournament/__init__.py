"""Tournament blueprint."""

from flask import Blueprint

bp = Blueprint("tournament", __name__, url_prefix="/tournaments")

from . import routes  # noqa: E402, F401
from .join import JoinCoordinator, JoinResult  # noqa: E402
from .models import Fixture, Participant, Tournament  # noqa: E402
from .repair import RepairReport, RepairService  # noqa: E402
from .services import TournamentService  # noqa: E402

__all__ = [
    "Fixture",
    "JoinCoordinator",
    "JoinResult",
    "Participant",
    "RepairReport",
    "RepairService",
    "Tournament",
    "TournamentService",
    "routes",
]
