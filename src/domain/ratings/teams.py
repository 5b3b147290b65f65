"""Resolve a game side into the player names it stands for."""

from __future__ import annotations

from domain.ratings.common import TEAM_SEPARATOR


def parse_team(side_name: str, is_team_format: bool) -> list[str]:
    """Split a side into players.

    Singles sides are returned verbatim as a one-element list. Doubles sides are
    split on ``" & "``, stripped, and empty parts dropped, so a malformed side can
    resolve to no players at all. Names are not checked against known players.
    """
    if not is_team_format:
        return [side_name]
    return [player.strip() for player in side_name.split(TEAM_SEPARATOR) if player.strip()]


__all__ = ["parse_team"]
