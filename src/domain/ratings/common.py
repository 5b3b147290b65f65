"""Shared types for the pool rating engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

SINGLES_FORMAT: Final[str] = "8-ball"
DOUBLES_FORMAT: Final[str] = "8-ball-2v2"
TEAM_SEPARATOR: Final[str] = " & "
VERIFIED_STATUS: Final[str] = "verified"
PENDING_STATUS: Final[str] = "pending"


@dataclass(frozen=True)
class PoolGameResult:
    """Canonical game outcome payload consumed by the replay engine.

    ``side_a``/``side_b`` hold either one player name or, for doubles, player
    names joined by ``TEAM_SEPARATOR``. ``winner`` must equal one side verbatim.
    ``played_on`` is an ISO date and ``created_at`` an ISO timestamp; both sort
    lexicographically.
    """

    game_id: str
    played_on: str
    created_at: str
    side_a: str
    side_b: str
    winner: str
    game_format: str = SINGLES_FORMAT
    status: str = VERIFIED_STATUS
    table_name: str | None = None
    score: str | None = None
    balls_remaining: int | None = None
    submitted_by: str | None = None

    @property
    def is_team_format(self) -> bool:
        return self.game_format == DOUBLES_FORMAT

    @property
    def is_verified(self) -> bool:
        return self.status == VERIFIED_STATUS

    @property
    def sides(self) -> tuple[str, str]:
        return self.side_a, self.side_b


@dataclass
class PlayerRatingState:
    """Mutable per-player state owned by one replay."""

    rating: float
    rd: float
    volatility: float
    wins: int = 0
    losses: int = 0
    streak: int = 0

    @property
    def games_played(self) -> int:
        return self.wins + self.losses

    @property
    def win_rate(self) -> float:
        if self.games_played == 0:
            return 0.0
        return self.wins / self.games_played

    def record_result(self, won: bool) -> None:
        """Bump win/loss counters; a streak that changes sign restarts at magnitude 1."""
        if won:
            self.wins += 1
            self.streak = self.streak + 1 if self.streak > 0 else 1
        else:
            self.losses += 1
            self.streak = self.streak - 1 if self.streak < 0 else -1


@dataclass(frozen=True)
class RatingSnapshot:
    """A player's rating right after one game and the signed change it caused."""

    rating: float
    delta: float


RatingHistory = dict[str, dict[str, RatingSnapshot]]
