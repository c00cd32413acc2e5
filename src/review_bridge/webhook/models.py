"""Request-scoped data types for webhook handling."""

from collections.abc import Mapping
from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class WebhookRequest:
    """An inbound webhook delivery.

    ``body`` holds the exact bytes received; the signature is computed over them.
    """

    headers: dict[str, str]
    body: bytes

    @classmethod
    def from_raw(cls, headers: Mapping[str, Any], body: bytes | str) -> "WebhookRequest":
        """Build a request, lower-casing header names once at the boundary."""
        normalized = {str(name).lower(): str(value) for name, value in headers.items()}
        if isinstance(body, str):
            body = body.encode("utf-8")
        return cls(headers=normalized, body=body)

    def header(self, name: str) -> str | None:
        return self.headers.get(name.lower())


@dataclass(frozen=True)
class WebhookResponse:
    """Status code and short plain-text body returned to GitHub."""

    status_code: int
    body: str


@dataclass(frozen=True)
class CommentEvent:
    """The fields of an ``issue_comment`` payload the pipeline looks at."""

    action: str | None
    issue_number: int | None
    is_pull_request: bool
    comment_id: int | None
    comment_body: str
    author_login: str | None
    author_type: str | None
    owner: str | None
    repo: str | None
    installation_id: int | None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "CommentEvent":
        issue = payload.get("issue") or {}
        comment = payload.get("comment") or {}
        user = comment.get("user") or {}
        repository = payload.get("repository") or {}
        installation = payload.get("installation") or {}

        return cls(
            action=payload.get("action"),
            issue_number=issue.get("number"),
            is_pull_request=bool(issue.get("pull_request")),
            comment_id=comment.get("id"),
            comment_body=comment.get("body") or "",
            author_login=user.get("login"),
            author_type=user.get("type"),
            owner=(repository.get("owner") or {}).get("login"),
            repo=repository.get("name"),
            installation_id=installation.get("id"),
        )

    @property
    def repo_full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    def has_command(self, trigger_phrase: str) -> bool:
        """Check whether the trimmed, case-folded comment starts with the trigger."""
        phrase = trigger_phrase.strip().lower()
        return bool(phrase) and self.comment_body.strip().lower().startswith(phrase)


@dataclass(frozen=True)
class DispatchPayload:
    """Unit of work handed to the review workflow via repository dispatch."""

    owner: str
    repo: str
    pr_number: int
    head_sha: str
    requested_by: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
