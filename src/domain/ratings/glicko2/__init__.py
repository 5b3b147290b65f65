"""Glicko-2 rating modules."""

from domain.ratings.glicko2.calculator import (
    Glicko2OpponentResult,
    Glicko2Parameters,
    RatingIntegrityError,
    VolatilityConvergenceError,
    calculate_expected_score,
    expected,
    g,
    solve_volatility,
    update_glicko2_player,
)
from domain.ratings.glicko2.config import Glicko2SystemConfig, load_glicko2_system_configs
from domain.ratings.glicko2.player_calculator import PlayerGlicko2Calculator, PlayerGlicko2Event

__all__ = [
    "Glicko2OpponentResult",
    "Glicko2Parameters",
    "Glicko2SystemConfig",
    "PlayerGlicko2Calculator",
    "PlayerGlicko2Event",
    "RatingIntegrityError",
    "VolatilityConvergenceError",
    "calculate_expected_score",
    "expected",
    "g",
    "load_glicko2_system_configs",
    "solve_volatility",
    "update_glicko2_player",
]
