# ratings package — rating store accessor and per-attraction summaries
from services.waylight.ratings.store import InMemoryRatingStore, RatingStore
from services.waylight.ratings.summarizer import (
    build_rating,
    compute_height_restriction_ok,
    consensus_from_spread,
    summarize_ratings,
)

__all__ = [
    "InMemoryRatingStore",
    "RatingStore",
    "build_rating",
    "compute_height_restriction_ok",
    "consensus_from_spread",
    "summarize_ratings",
]
