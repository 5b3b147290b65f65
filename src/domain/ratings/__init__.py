"""Pool rating engine: Glicko-2 replay over verified games."""

from domain.ratings.common import (
    DOUBLES_FORMAT,
    SINGLES_FORMAT,
    TEAM_SEPARATOR,
    VERIFIED_STATUS,
    PlayerRatingState,
    PoolGameResult,
    RatingHistory,
    RatingSnapshot,
)
from domain.ratings.replay import (
    ReplayResult,
    compute_final_ratings,
    compute_rating_history,
    replay_games,
)
from domain.ratings.teams import parse_team

__all__ = [
    "DOUBLES_FORMAT",
    "PlayerRatingState",
    "PoolGameResult",
    "RatingHistory",
    "RatingSnapshot",
    "ReplayResult",
    "SINGLES_FORMAT",
    "TEAM_SEPARATOR",
    "VERIFIED_STATUS",
    "compute_final_ratings",
    "compute_rating_history",
    "parse_team",
    "replay_games",
]
