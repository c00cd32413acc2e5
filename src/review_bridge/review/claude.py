"""Claude API integration for review generation."""

import logging
from dataclasses import dataclass

import anthropic

from review_bridge.config import Settings

logger = logging.getLogger(__name__)


@dataclass
class ReviewResult:
    """Outcome of asking Claude for a review."""

    succeeded: bool
    text: str = ""
    error: str = ""


async def generate_review(prompt: str, settings: Settings) -> ReviewResult:
    """
    Ask Claude to review a pull request.

    Args:
        prompt: Fully rendered review prompt
        settings: Settings carrying the API key and model

    Returns:
        ReviewResult with the review text, or the error when the call failed
    """
    if not settings.anthropic_api_key:
        return ReviewResult(succeeded=False, error="ANTHROPIC_API_KEY is not configured")

    logger.info(f"Sending review request to Claude ({settings.claude_model})")

    client = anthropic.Anthropic(api_key=settings.anthropic_api_key)

    try:
        response = client.messages.create(
            model=settings.claude_model,
            max_tokens=4096,
            messages=[
                {"role": "user", "content": prompt},
            ],
        )
    except anthropic.APIError as e:
        logger.error(f"Claude API error: {e}")
        return ReviewResult(succeeded=False, error=f"API error: {e}")

    text = "".join(
        block.text for block in response.content if getattr(block, "type", None) == "text"
    ).strip()

    if not text:
        logger.warning("Claude returned an empty review")
        return ReviewResult(succeeded=False, error="Empty response from Claude")

    logger.info(f"Claude review complete: {len(text)} characters")
    return ReviewResult(succeeded=True, text=text)
