"""Write rebuilt ratings into the profiles table."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import UTC, datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from domain.ratings.common import PlayerRatingState
from models import Profile

logger = logging.getLogger(__name__)


def fetch_usernames(session: Session) -> set[str]:
    return set(session.scalars(select(Profile.username)))


def apply_profile_ratings(
    session: Session,
    ratings: Mapping[str, PlayerRatingState],
) -> list[str]:
    """Copy rating state onto matching profiles.

    Returns player names that have no profile row; those are left untouched.
    """
    if not ratings:
        return []

    profiles = session.scalars(select(Profile).where(Profile.username.in_(list(ratings)))).all()
    by_username = {profile.username: profile for profile in profiles}
    updated_at = datetime.now(UTC).replace(tzinfo=None)

    missing: list[str] = []
    for username, state in ratings.items():
        profile = by_username.get(username)
        if profile is None:
            logger.warning("profile not found for username=%s", username)
            missing.append(username)
            continue
        profile.rating = state.rating
        profile.rd = state.rd
        profile.vol = state.volatility
        profile.wins = state.wins
        profile.losses = state.losses
        profile.streak = state.streak
        profile.updated_at = updated_at

    session.flush()
    return missing


__all__ = ["apply_profile_ratings", "fetch_usernames"]
