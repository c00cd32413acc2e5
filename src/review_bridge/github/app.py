"""GitHub App authentication."""

import logging
import time

import httpx
import jwt

from review_bridge.github.client import (
    API_VERSION,
    DEFAULT_API_URL,
    GitHubAPIError,
    GitHubClient,
    decode_json,
)

logger = logging.getLogger(__name__)

# GitHub rejects app JWTs valid for more than ten minutes.
JWT_BACKDATE_SECONDS = 60
JWT_LIFETIME_SECONDS = 9 * 60


class GitHubAuthError(GitHubAPIError):
    """Could not authenticate as the GitHub App or one of its installations."""


def create_app_jwt(app_id: str, private_key: str, now: int | None = None) -> str:
    """
    Create the RS256 JWT that authenticates as the GitHub App itself.

    Args:
        app_id: The GitHub App id
        private_key: PEM encoded private key of the app
        now: Issue time override, in epoch seconds

    Returns:
        The encoded JWT
    """
    issued_at = int(time.time()) if now is None else now
    payload = {
        "iat": issued_at - JWT_BACKDATE_SECONDS,
        "exp": issued_at + JWT_LIFETIME_SECONDS,
        "iss": str(app_id),
    }
    try:
        return jwt.encode(payload, private_key, algorithm="RS256")
    except (jwt.PyJWTError, ValueError, TypeError) as e:
        raise GitHubAuthError(f"Could not sign app JWT: {type(e).__name__}") from e


class GitHubApp:
    """A GitHub App identity able to mint installation scoped clients."""

    def __init__(
        self,
        app_id: str,
        private_key: str,
        api_url: str = DEFAULT_API_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.app_id = app_id
        self._private_key = private_key
        self.api_url = api_url.rstrip("/")
        self._transport = transport

    async def get_installation_token(self, installation_id: int) -> str:
        """Exchange the app JWT for a short-lived installation access token."""
        app_jwt = create_app_jwt(self.app_id, self._private_key)
        url = f"{self.api_url}/app/installations/{installation_id}/access_tokens"
        headers = {
            "Authorization": f"Bearer {app_jwt}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": API_VERSION,
        }

        async with httpx.AsyncClient(transport=self._transport, timeout=30.0) as client:
            try:
                response = await client.post(url, headers=headers)
                response.raise_for_status()
            except httpx.HTTPStatusError as e:
                status = e.response.status_code
                logger.error(f"Installation token request for {installation_id} -> {status}")
                raise GitHubAuthError(
                    f"Installation token request failed with status {status}", status
                ) from e
            except httpx.HTTPError as e:
                logger.error(f"Installation token request for {installation_id} failed: {e}")
                raise GitHubAuthError(f"Installation token request failed: {e}") from e

        try:
            data = decode_json(response, dict, f"Installation token request for {installation_id}")
        except GitHubAPIError as e:
            raise GitHubAuthError(str(e), e.status_code) from e

        token = data.get("token")
        if not token or not isinstance(token, str):
            raise GitHubAuthError("Installation token response did not contain a token")
        return token

    async def get_installation_client(self, installation_id: int) -> GitHubClient:
        """Return a client authenticated as the given installation."""
        token = await self.get_installation_token(installation_id)
        logger.debug(f"Obtained installation token for installation {installation_id}")
        return GitHubClient(token, api_url=self.api_url, transport=self._transport)
