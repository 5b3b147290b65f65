"""Player-level Glicko-2 replay with team averaging for doubles games."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from domain.ratings.common import PlayerRatingState, PoolGameResult
from domain.ratings.glicko2.calculator import (
    Glicko2OpponentResult,
    Glicko2Parameters,
    calculate_expected_score,
    update_glicko2_player,
)
from domain.ratings.teams import parse_team

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlayerGlicko2Event:
    player: str
    game_id: str
    played_on: str
    opponents: str
    won: bool
    actual_score: float
    expected_score: float
    pre_rating: float
    pre_rd: float
    pre_volatility: float
    rating_delta: float
    rd_delta: float
    volatility_delta: float
    post_rating: float
    post_rd: float
    post_volatility: float
    streak: int


@dataclass(frozen=True)
class _SideAverages:
    rating: float
    rd: float
    volatility: float


class PlayerGlicko2Calculator:
    """Stateful game-by-game player Glicko-2 calculator.

    Feed games in replay order. Each side of a doubles game is treated as one
    virtual opponent whose rating, RD and volatility are the means of its
    members' values before the game.
    """

    def __init__(self, params: Glicko2Parameters | None = None) -> None:
        self.params = params or Glicko2Parameters()
        self._states: dict[str, PlayerRatingState] = {}

    def _get_or_create_state(self, player: str) -> PlayerRatingState:
        existing = self._states.get(player)
        if existing is not None:
            return existing
        state = PlayerRatingState(
            rating=self.params.initial_rating,
            rd=self.params.initial_rd,
            volatility=self.params.initial_volatility,
        )
        self._states[player] = state
        return state

    def get_state(self, player: str) -> PlayerRatingState | None:
        return self._states.get(player)

    def tracked_player_count(self) -> int:
        return len(self._states)

    def ratings(self) -> dict[str, float]:
        """Return a snapshot of current player ratings."""
        return {player: state.rating for player, state in self._states.items()}

    def states(self) -> dict[str, PlayerRatingState]:
        return dict(self._states)

    @staticmethod
    def resolve_sides(game: PoolGameResult) -> tuple[list[str], list[str]] | None:
        """Return both sides' players, or None when the game cannot be rated."""
        if not game.side_a or not game.side_b or not game.winner:
            logger.debug("skipping game_id=%s: empty side or winner", game.game_id)
            return None

        side_a_players = parse_team(game.side_a, game.is_team_format)
        side_b_players = parse_team(game.side_b, game.is_team_format)
        if not side_a_players or not side_b_players:
            logger.debug("skipping game_id=%s: a side has no players", game.game_id)
            return None

        if game.winner not in (game.side_a, game.side_b):
            logger.debug(
                "skipping game_id=%s: winner=%r matches neither %r nor %r",
                game.game_id,
                game.winner,
                game.side_a,
                game.side_b,
            )
            return None
        return side_a_players, side_b_players

    def _side_averages(self, players: Sequence[str]) -> _SideAverages:
        count = float(len(players))
        states = [self._states[player] for player in players]
        return _SideAverages(
            rating=sum(state.rating for state in states) / count,
            rd=sum(state.rd for state in states) / count,
            volatility=sum(state.volatility for state in states) / count,
        )

    def process_game(self, game: PoolGameResult) -> list[PlayerGlicko2Event]:
        """Apply one game; returns an empty list when the game is skipped."""
        sides = self.resolve_sides(game)
        if sides is None:
            return []
        side_a_players, side_b_players = sides

        pre_values: dict[str, tuple[float, float, float]] = {}
        for player in (*side_a_players, *side_b_players):
            state = self._get_or_create_state(player)
            pre_values[player] = (state.rating, state.rd, state.volatility)
        side_a_avg = self._side_averages(side_a_players)
        side_b_avg = self._side_averages(side_b_players)

        side_a_actual = 1.0 if game.winner == game.side_a else 0.0
        side_b_actual = 1.0 if game.winner == game.side_b else 0.0

        expected_scores: list[tuple[str, float, float]] = []

        def process_side(
            players: Sequence[str],
            *,
            actual: float,
            opponent: _SideAverages,
        ) -> None:
            for player in players:
                state = self._states[player]
                expected_score = calculate_expected_score(
                    rating=state.rating,
                    rd=state.rd,
                    opponent_rating=opponent.rating,
                    opponent_rd=opponent.rd,
                )
                post_rating, post_rd, post_vol = update_glicko2_player(
                    rating=state.rating,
                    rd=state.rd,
                    volatility=state.volatility,
                    results=[
                        Glicko2OpponentResult(
                            opponent_rating=opponent.rating,
                            opponent_rd=opponent.rd,
                            score=actual,
                        )
                    ],
                    tau=self.params.tau,
                    epsilon=self.params.epsilon,
                    max_iterations=self.params.max_iterations,
                )
                state.rating = post_rating
                state.rd = post_rd
                state.volatility = post_vol
                state.record_result(actual == 1.0)
                expected_scores.append((player, actual, expected_score))

        process_side(side_a_players, actual=side_a_actual, opponent=side_b_avg)
        process_side(side_b_players, actual=side_b_actual, opponent=side_a_avg)

        # Teammates share the side's pre-game mean volatility.
        for player in side_a_players:
            self._states[player].volatility = side_a_avg.volatility
        for player in side_b_players:
            self._states[player].volatility = side_b_avg.volatility

        events: list[PlayerGlicko2Event] = []
        for player, actual, expected_score in expected_scores:
            pre_rating, pre_rd, pre_vol = pre_values[player]
            state = self._states[player]
            events.append(
                PlayerGlicko2Event(
                    player=player,
                    game_id=game.game_id,
                    played_on=game.played_on,
                    opponents=game.side_b if player in side_a_players else game.side_a,
                    won=bool(actual),
                    actual_score=actual,
                    expected_score=expected_score,
                    pre_rating=pre_rating,
                    pre_rd=pre_rd,
                    pre_volatility=pre_vol,
                    rating_delta=state.rating - pre_rating,
                    rd_delta=state.rd - pre_rd,
                    volatility_delta=state.volatility - pre_vol,
                    post_rating=state.rating,
                    post_rd=state.rd,
                    post_volatility=state.volatility,
                    streak=state.streak,
                )
            )
        return events


__all__ = ["PlayerGlicko2Calculator", "PlayerGlicko2Event"]
