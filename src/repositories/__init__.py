"""Database repository helpers."""

from repositories.games import fetch_verified_games, game_to_result
from repositories.profiles import apply_profile_ratings, fetch_usernames
from repositories.schema import ensure_schema

__all__ = [
    "apply_profile_ratings",
    "ensure_schema",
    "fetch_usernames",
    "fetch_verified_games",
    "game_to_result",
]
