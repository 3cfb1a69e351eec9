"""Human review of extracted answers."""

from __future__ import annotations

from medintake.review.policy import (
    CONFIDENCE_THRESHOLD,
    ReviewPartition,
    apply_user_answers,
    confirmed_answers,
    is_complete,
    needs_review,
    partition_questions,
)
from medintake.review.session import ReviewSession, ReviewState

__all__ = [
    "CONFIDENCE_THRESHOLD",
    "ReviewPartition",
    "ReviewSession",
    "ReviewState",
    "apply_user_answers",
    "confirmed_answers",
    "is_complete",
    "needs_review",
    "partition_questions",
]
