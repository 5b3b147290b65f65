"""Schema bootstrap for the tables the rating jobs touch."""

from __future__ import annotations

from sqlalchemy.engine import Engine

from models import Game, Profile


def ensure_schema(engine: Engine) -> None:
    """Create games/profiles tables and indexes if needed."""
    with engine.begin() as connection:
        Game.__table__.create(bind=connection, checkfirst=True)
        Profile.__table__.create(bind=connection, checkfirst=True)


__all__ = ["ensure_schema"]
