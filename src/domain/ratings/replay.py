"""Full-history replay entry points.

Every call starts from default ratings and walks the whole eligible history
again; nothing is cached between calls.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from domain.ratings.common import PlayerRatingState, PoolGameResult, RatingHistory, RatingSnapshot
from domain.ratings.glicko2.calculator import Glicko2Parameters
from domain.ratings.glicko2.player_calculator import PlayerGlicko2Calculator


@dataclass(frozen=True)
class ReplayResult:
    """Outcome of one replay over a game history."""

    ratings: dict[str, PlayerRatingState]
    history: RatingHistory = field(default_factory=dict)
    processed_games: int = 0
    skipped_games: int = 0


def _replay_sort_key(game: PoolGameResult) -> tuple[str, str, str]:
    return game.played_on, game.created_at, game.game_id


def eligible_games(games: Iterable[PoolGameResult]) -> list[PoolGameResult]:
    """Keep verified games only."""
    return [game for game in games if game.is_verified]


def replay_order(games: Iterable[PoolGameResult]) -> list[PoolGameResult]:
    """Sort by day, then creation timestamp; same-day games replay in submission order."""
    return sorted(games, key=_replay_sort_key)


def replay_games(
    games: Iterable[PoolGameResult],
    params: Glicko2Parameters | None = None,
    *,
    record_history: bool = False,
) -> ReplayResult:
    """Replay eligible games from default state and return the accumulated result."""
    calculator = PlayerGlicko2Calculator(params)
    history: RatingHistory = {}
    processed_games = 0
    skipped_games = 0

    for game in replay_order(eligible_games(games)):
        events = calculator.process_game(game)
        if not events:
            skipped_games += 1
            continue
        processed_games += 1
        if record_history:
            history[game.game_id] = {
                event.player: RatingSnapshot(rating=event.post_rating, delta=event.rating_delta)
                for event in events
            }

    return ReplayResult(
        ratings=calculator.states(),
        history=history,
        processed_games=processed_games,
        skipped_games=skipped_games,
    )


def compute_final_ratings(
    games: Iterable[PoolGameResult],
    params: Glicko2Parameters | None = None,
) -> dict[str, PlayerRatingState]:
    """Final rating state per player after replaying all verified games."""
    return replay_games(games, params).ratings


def compute_rating_history(
    games: Iterable[PoolGameResult],
    params: Glicko2Parameters | None = None,
) -> RatingHistory:
    """Per-game ``{player: RatingSnapshot}`` map keyed by game id."""
    return replay_games(games, params, record_history=True).history


__all__ = [
    "ReplayResult",
    "compute_final_ratings",
    "compute_rating_history",
    "eligible_games",
    "replay_games",
    "replay_order",
]
