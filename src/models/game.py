"""games table model."""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import Date, DateTime, Index, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base


class Game(Base):
    """One submitted pool game. Only rows with status 'verified' are rated."""

    __tablename__ = "games"
    __table_args__ = (
        Index("idx_games_status_created", "status", "created_at"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    played_on: Mapped[date | None] = mapped_column("date", Date, nullable=True)
    table_name: Mapped[str | None] = mapped_column(String(64), nullable=True)
    game_format: Mapped[str | None] = mapped_column("format", String(32), nullable=True)
    race_to: Mapped[int | None] = mapped_column(Integer, nullable=True)
    player_a: Mapped[str | None] = mapped_column(String(256), nullable=True)
    player_b: Mapped[str | None] = mapped_column(String(256), nullable=True)
    winner: Mapped[str | None] = mapped_column(String(256), nullable=True)
    score: Mapped[str | None] = mapped_column(String(32), nullable=True)
    balls_remaining: Mapped[int | None] = mapped_column(Integer, nullable=True)
    opponent_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    submitted_by: Mapped[str | None] = mapped_column(String(36), nullable=True)
    status: Mapped[str | None] = mapped_column(String(16), nullable=True)
    created_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=False),
        nullable=True,
        server_default=func.now(),
    )
