"""ORM models."""

from models.base import Base
from models.game import Game
from models.profile import Profile

__all__ = [
    "Base",
    "Game",
    "Profile",
]
