"""Review prompt construction and comment formatting."""

from typing import Any

MARKER_TEMPLATE = "<!-- ai-review:sha={head_sha} -->"

REVIEW_PROMPT = """You are an experienced software engineer reviewing a pull request.

## Pull Request

Title: {title}
Author: {author}
Base branch: {base_ref}
Head commit: {head_sha}

### Description

{description}

## Changed Files

{file_list}

## Diff

```diff
{diff}
```

## Task

Review the change and write feedback for the author in GitHub flavored Markdown.

Guidelines:
- Start with a short summary of what the change does
- Point out bugs, security problems and missing error handling first
- Refer to files and lines from the diff when you raise an issue
- Mention tests that are missing for new behavior
- Skip style nitpicks a formatter or linter would catch
- If the change looks good, say so briefly instead of inventing problems
"""


def review_marker(head_sha: str) -> str:
    """Hidden marker identifying the review comment for a head commit."""
    return MARKER_TEMPLATE.format(head_sha=head_sha)


def _format_file_list(files: list[dict[str, Any]]) -> str:
    if not files:
        return "(no files reported)"
    lines = []
    for f in files:
        lines.append(
            f"- {f.get('filename')} ({f.get('status', 'modified')}, "
            f"+{f.get('additions', 0)}/-{f.get('deletions', 0)})"
        )
    return "\n".join(lines)


def build_review_prompt(
    pr: dict[str, Any],
    files: list[dict[str, Any]],
    diff: str,
    head_sha: str,
    max_diff_size: int,
) -> str:
    """
    Build the prompt sent to Claude for a pull request.

    Args:
        pr: Pull request object as returned by the GitHub API
        files: Changed files of the pull request
        diff: Unified diff of the pull request
        head_sha: Commit being reviewed
        max_diff_size: Diff characters kept before truncation

    Returns:
        The prompt text
    """
    if len(diff) > max_diff_size:
        diff = diff[:max_diff_size] + f"\n... [truncated {len(diff) - max_diff_size} characters]"

    return REVIEW_PROMPT.format(
        title=pr.get("title") or "(untitled)",
        author=(pr.get("user") or {}).get("login", "unknown"),
        base_ref=(pr.get("base") or {}).get("ref", "unknown"),
        head_sha=head_sha,
        description=(pr.get("body") or "").strip() or "(no description)",
        file_list=_format_file_list(files),
        diff=diff or "(empty diff)",
    )


def format_review_comment(
    pr: dict[str, Any],
    files: list[dict[str, Any]],
    review: str,
    head_sha: str,
    requested_by: str | None,
) -> str:
    """Compose the PR comment body, ending with the hidden head sha marker."""
    file_names = "\n".join(f"- `{f.get('filename')}`" for f in files) or "- (none)"
    files_block = (
        f"<details><summary>Files changed ({len(files)})</summary>\n\n"
        f"{file_names}\n\n</details>"
    )
    parts = [
        f"## AI review for `{head_sha[:12]}`",
        f"**PR Title:** {pr.get('title') or '(untitled)'}",
        f"**Author:** {(pr.get('user') or {}).get('login', 'unknown')}",
    ]
    if requested_by:
        parts.append(f"**Requested by:** @{requested_by}")
    parts.extend(
        [
            files_block,
            review.strip(),
            review_marker(head_sha),
        ]
    )
    return "\n\n".join(parts)
