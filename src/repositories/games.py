"""Read verified games from the games table."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from sqlalchemy import select
from sqlalchemy.orm import Session

from domain.ratings.common import SINGLES_FORMAT, VERIFIED_STATUS, PoolGameResult
from models import Game


def _build_cutoff_time(lookback_days: int | None) -> datetime | None:
    if lookback_days is None or lookback_days <= 0:
        return None
    return datetime.now(UTC).replace(tzinfo=None) - timedelta(days=lookback_days)


def game_to_result(row: Game) -> PoolGameResult:
    """Map a games row onto the replay payload, filling NULL columns with defaults."""
    return PoolGameResult(
        game_id=str(row.id),
        played_on="" if row.played_on is None else row.played_on.isoformat(),
        created_at="" if row.created_at is None else row.created_at.isoformat(),
        side_a=row.player_a or "",
        side_b=row.player_b or "",
        winner=row.winner or "",
        game_format=row.game_format or SINGLES_FORMAT,
        status=row.status or VERIFIED_STATUS,
        table_name=row.table_name or "Table 1",
        score=row.score or "",
        balls_remaining=row.balls_remaining,
        submitted_by=row.submitted_by,
    )


def fetch_verified_games(session: Session, lookback_days: int | None = None) -> list[PoolGameResult]:
    """Fetch verified games ordered by creation time, optionally within a lookback window."""
    statement = (
        select(Game)
        .where(Game.status == VERIFIED_STATUS)
        .order_by(Game.created_at.asc(), Game.id.asc())
    )
    cutoff_time = _build_cutoff_time(lookback_days)
    if cutoff_time is not None:
        statement = statement.where(Game.created_at >= cutoff_time)
    return [game_to_result(row) for row in session.scalars(statement)]


__all__ = ["fetch_verified_games", "game_to_result"]
