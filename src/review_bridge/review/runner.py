"""Review workflow run inside CI after a repository dispatch."""

import logging
from dataclasses import dataclass
from typing import Any

from review_bridge.config import Settings
from review_bridge.github import GitHubClient
from review_bridge.review.claude import generate_review
from review_bridge.review.prompt import build_review_prompt, format_review_comment, review_marker

logger = logging.getLogger(__name__)


class ReviewError(Exception):
    """The review could not be produced or posted."""


@dataclass(frozen=True)
class ReviewRequest:
    """The dispatch client payload, resolved against the event's repository."""

    owner: str
    repo: str
    pr_number: int
    head_sha: str | None
    requested_by: str | None

    @classmethod
    def from_dispatch_event(cls, event: dict[str, Any]) -> "ReviewRequest":
        """Parse a ``repository_dispatch`` event as delivered to a workflow."""
        client_payload = event.get("client_payload") or {}
        repository = event.get("repository") or {}

        owner = client_payload.get("owner") or (repository.get("owner") or {}).get("login")
        repo = client_payload.get("repo") or repository.get("name")
        pr_number = client_payload.get("pr_number")

        if not pr_number or not owner or not repo:
            raise ReviewError("Missing pr_number or repository in payload")

        try:
            pr_number = int(pr_number)
        except (TypeError, ValueError) as e:
            raise ReviewError(f"Invalid pr_number: {pr_number!r}") from e

        head_sha = client_payload.get("head_sha")
        if head_sha == "unknown":
            head_sha = None

        return cls(
            owner=owner,
            repo=repo,
            pr_number=pr_number,
            head_sha=head_sha or None,
            requested_by=client_payload.get("requested_by"),
        )


async def run_review(
    request: ReviewRequest, client: GitHubClient, settings: Settings
) -> dict[str, Any] | None:
    """
    Generate and post a review for one pull request.

    This function:
    1. Fetches the pull request and resolves the head sha
    2. Skips if a review for that sha was already posted
    3. Fetches changed files and the diff
    4. Asks Claude for a review
    5. Posts it as a PR comment carrying the hidden sha marker

    Returns:
        The created comment, or None when the review already exists
    """
    owner, repo, number = request.owner, request.repo, request.pr_number
    logger.info(f"Received PR #{number} with head_sha {request.head_sha}")

    pr = await client.get_pull_request(owner, repo, number)
    head_sha = request.head_sha or (pr.get("head") or {}).get("sha") or "unknown"

    marker = review_marker(head_sha)
    comments = await client.list_issue_comments(owner, repo, number)
    if any(marker in (comment.get("body") or "") for comment in comments):
        logger.info(f"Review for {owner}/{repo}#{number} at {head_sha} already posted")
        return None

    files = await client.list_pull_request_files(
        owner, repo, number, per_page=settings.max_review_files
    )
    diff = await client.get_pull_request_diff(owner, repo, number)

    prompt = build_review_prompt(pr, files, diff, head_sha, settings.max_diff_size)
    result = await generate_review(prompt, settings)
    if not result.succeeded:
        raise ReviewError(f"Review generation failed: {result.error}")

    body = format_review_comment(pr, files, result.text, head_sha, request.requested_by)
    comment = await client.create_issue_comment(owner, repo, number, body)
    logger.info(f"Posted review on {owner}/{repo}#{number}: {comment.get('html_url')}")
    return comment
