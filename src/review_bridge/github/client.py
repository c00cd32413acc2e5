"""GitHub REST API client."""

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
API_VERSION = "2022-11-28"


class GitHubAPIError(Exception):
    """A GitHub API call failed, either at the transport level or with an error status."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


def decode_json(response: httpx.Response, expected: type, what: str) -> Any:
    """Decode a successful response body, which must be JSON of the ``expected`` type."""
    try:
        data = response.json()
    except ValueError as e:
        logger.error(f"{what} returned a non-JSON body ({response.status_code})")
        raise GitHubAPIError(f"{what} returned a non-JSON body", response.status_code) from e
    if not isinstance(data, expected):
        logger.error(f"{what} returned {type(data).__name__}, expected {expected.__name__}")
        raise GitHubAPIError(
            f"{what} returned unexpected JSON ({type(data).__name__})", response.status_code
        )
    return data


class GitHubClient:
    """Thin async wrapper over the GitHub REST endpoints this service uses."""

    def __init__(
        self,
        token: str,
        api_url: str = DEFAULT_API_URL,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 30.0,
    ):
        self._client = httpx.AsyncClient(
            base_url=api_url.rstrip("/"),
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": API_VERSION,
            },
            transport=transport,
            timeout=timeout,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "GitHubClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._client.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.error(f"{method} {path} -> {status}: {e.response.text[:500]}")
            raise GitHubAPIError(f"{method} {path} failed with status {status}", status) from e
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise GitHubAPIError(f"{method} {path} failed: {e}") from e
        return response

    async def _request_json(self, method: str, path: str, expected: type, **kwargs: Any) -> Any:
        response = await self._request(method, path, **kwargs)
        return decode_json(response, expected, f"{method} {path}")

    async def get_collaborator_permission(self, owner: str, repo: str, username: str) -> str:
        """Return the permission level (admin, maintain, write, triage, read, none)."""
        data = await self._request_json(
            "GET", f"/repos/{owner}/{repo}/collaborators/{username}/permission", dict
        )
        return data.get("permission", "none")

    async def get_pull_request(self, owner: str, repo: str, number: int) -> dict[str, Any]:
        return await self._request_json("GET", f"/repos/{owner}/{repo}/pulls/{number}", dict)

    async def get_pull_request_diff(self, owner: str, repo: str, number: int) -> str:
        response = await self._request(
            "GET",
            f"/repos/{owner}/{repo}/pulls/{number}",
            headers={"Accept": "application/vnd.github.diff"},
        )
        return response.text

    async def list_pull_request_files(
        self, owner: str, repo: str, number: int, per_page: int = 100
    ) -> list[dict[str, Any]]:
        return await self._request_json(
            "GET",
            f"/repos/{owner}/{repo}/pulls/{number}/files",
            list,
            params={"per_page": per_page},
        )

    async def list_issue_comments(
        self, owner: str, repo: str, number: int, per_page: int = 100
    ) -> list[dict[str, Any]]:
        return await self._request_json(
            "GET",
            f"/repos/{owner}/{repo}/issues/{number}/comments",
            list,
            params={"per_page": per_page},
        )

    async def create_issue_comment(
        self, owner: str, repo: str, number: int, body: str
    ) -> dict[str, Any]:
        return await self._request_json(
            "POST",
            f"/repos/{owner}/{repo}/issues/{number}/comments",
            dict,
            json={"body": body},
        )

    async def create_comment_reaction(
        self, owner: str, repo: str, comment_id: int, content: str
    ) -> dict[str, Any]:
        return await self._request_json(
            "POST",
            f"/repos/{owner}/{repo}/issues/comments/{comment_id}/reactions",
            dict,
            json={"content": content},
        )

    async def create_repository_dispatch(
        self, owner: str, repo: str, event_type: str, client_payload: dict[str, Any]
    ) -> None:
        """Trigger workflows listening for ``repository_dispatch`` of ``event_type``."""
        await self._request(
            "POST",
            f"/repos/{owner}/{repo}/dispatches",
            json={"event_type": event_type, "client_payload": client_payload},
        )
