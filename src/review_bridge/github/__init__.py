"""GitHub API interactions."""

from review_bridge.github.app import GitHubApp, GitHubAuthError, create_app_jwt
from review_bridge.github.client import GitHubAPIError, GitHubClient

__all__ = ["GitHubApp", "GitHubAuthError", "create_app_jwt", "GitHubAPIError", "GitHubClient"]
