"""Read-side views built on replay output: leaderboard rows, streaks and chart series."""

from __future__ import annotations

from collections.abc import Collection, Iterable, Mapping
from dataclasses import dataclass
from typing import Literal

from domain.ratings.common import PlayerRatingState, PoolGameResult, RatingHistory
from domain.ratings.replay import eligible_games, replay_order
from domain.ratings.teams import parse_team


@dataclass(frozen=True)
class LeaderboardEntry:
    player: str
    rating: int
    rd: int
    wins: int
    losses: int
    streak: int
    games_played: int
    win_rate: int


@dataclass(frozen=True)
class RatingSeriesPoint:
    played_on: str
    rating: float
    game_index: int
    opponent: str
    result: Literal["W", "L"]
    viewer_rating: float | None = None


def build_leaderboard(
    ratings: Mapping[str, PlayerRatingState],
    usernames: Collection[str] | None = None,
) -> list[LeaderboardEntry]:
    """Rank players with at least one rated game by rating, then win rate.

    When ``usernames`` is given, players without a matching profile are left out.
    """
    entries: list[LeaderboardEntry] = []
    for player, state in ratings.items():
        if usernames is not None and player not in usernames:
            continue
        if state.games_played == 0:
            continue
        entries.append(
            LeaderboardEntry(
                player=player,
                rating=round(state.rating),
                rd=round(state.rd),
                wins=state.wins,
                losses=state.losses,
                streak=state.streak,
                games_played=state.games_played,
                win_rate=round(state.win_rate * 100),
            )
        )
    entries.sort(key=lambda entry: (-entry.rating, -entry.win_rate, entry.player))
    return entries


def streak_leaders(
    ratings: Mapping[str, PlayerRatingState],
    min_streak: int = 3,
    usernames: Collection[str] | None = None,
) -> list[tuple[str, int]]:
    """Players currently on a win streak of at least ``min_streak``, longest first.

    When ``usernames`` is given, players without a matching profile are left out.
    """
    if min_streak <= 0:
        raise ValueError("min_streak must be greater than 0")
    leaders = [
        (player, state.streak)
        for player, state in ratings.items()
        if state.streak >= min_streak and (usernames is None or player in usernames)
    ]
    leaders.sort(key=lambda item: (-item[1], item[0]))
    return leaders


def rating_series(
    games: Iterable[PoolGameResult],
    history: RatingHistory,
    player: str,
    viewer: str | None = None,
) -> list[RatingSeriesPoint]:
    """Chronological rating points for every rated game ``player`` took part in.

    ``viewer`` adds the viewer's own rating as of each point, taken from the
    viewer's latest rated game at or before it. It stays None for the player's
    own series and before the viewer's first game.
    """
    points: list[RatingSeriesPoint] = []
    viewer_rating: float | None = None
    for game in replay_order(games):
        snapshots = history.get(game.game_id, {})
        if viewer is not None and viewer in snapshots:
            viewer_rating = snapshots[viewer].rating

        snapshot = snapshots.get(player)
        if snapshot is None:
            continue
        on_side_a = player in parse_team(game.side_a, game.is_team_format)
        opponent = game.side_b if on_side_a else game.side_a
        won = game.winner == (game.side_a if on_side_a else game.side_b)
        points.append(
            RatingSeriesPoint(
                played_on=game.played_on,
                rating=snapshot.rating,
                game_index=len(points),
                opponent=opponent,
                result="W" if won else "L",
                viewer_rating=None if viewer == player else viewer_rating,
            )
        )
    return points


def head_to_head(
    games: Iterable[PoolGameResult],
    player: str,
    opponent: str,
) -> tuple[int, int]:
    """Return ``(wins, losses)`` of ``player`` in verified singles games against ``opponent``."""
    wins = 0
    losses = 0
    for game in eligible_games(games):
        if game.is_team_format:
            continue
        if {game.side_a, game.side_b} != {player, opponent}:
            continue
        if game.winner == player:
            wins += 1
        elif game.winner == opponent:
            losses += 1
    return wins, losses


def average_balls_won(games: Iterable[PoolGameResult], player: str) -> float | None:
    """Mean balls the opponent had left over ``player``'s verified wins.

    Wins without a recorded ball count are ignored. Returns None when no win
    has one.
    """
    counts = [
        game.balls_remaining
        for game in eligible_games(games)
        if game.winner == player and game.balls_remaining is not None
    ]
    if not counts:
        return None
    return sum(counts) / len(counts)


__all__ = [
    "LeaderboardEntry",
    "RatingSeriesPoint",
    "average_balls_won",
    "build_leaderboard",
    "head_to_head",
    "rating_series",
    "streak_leaders",
]
