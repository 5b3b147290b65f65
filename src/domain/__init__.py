"""Rating-system domain modules."""

from domain.ratings.common import PlayerRatingState, PoolGameResult, RatingSnapshot

__all__ = ["PlayerRatingState", "PoolGameResult", "RatingSnapshot"]
