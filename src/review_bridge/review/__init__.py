"""AI review generation, run by the CI workflow the webhook dispatches."""

from review_bridge.review.claude import ReviewResult, generate_review
from review_bridge.review.prompt import build_review_prompt, format_review_comment, review_marker
from review_bridge.review.runner import ReviewError, ReviewRequest, run_review

__all__ = [
    "ReviewError",
    "ReviewRequest",
    "ReviewResult",
    "build_review_prompt",
    "format_review_comment",
    "generate_review",
    "review_marker",
    "run_review",
]
