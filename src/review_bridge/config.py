"""Configuration management using Pydantic settings."""

import base64
import binascii
import logging
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Nothing here is required at load time. The webhook handler answers with a
    500 response when the secret or the app credentials are missing.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Webhook settings
    github_webhook_secret: str = Field(
        default="",
        description="Secret for validating GitHub webhook signatures",
    )
    trigger_phrase: str = Field(
        default="@ai-review review",
        description="Comment prefix that requests a review",
    )
    dispatch_event_type: str = Field(
        default="ai.review",
        description="Event type sent with the repository dispatch",
    )
    reaction_content: str = Field(
        default="eyes",
        description="Reaction added to an accepted command comment",
    )

    # GitHub App credentials
    app_id: str = Field(default="", description="GitHub App id")
    private_key: str = Field(default="", description="GitHub App private key (PEM)")
    private_key_path: str = Field(
        default="",
        description="Path to the GitHub App private key, used when PRIVATE_KEY is unset",
    )
    private_key_base64: str = Field(
        default="",
        description="Base64 encoded private key, used as a last resort",
    )
    github_api_url: str = Field(
        default="https://api.github.com",
        description="GitHub REST API base URL",
    )

    # Review runner settings
    github_token: str = Field(
        default="",
        description="Token used by the review runner inside CI",
    )
    anthropic_api_key: str = Field(default="", description="Anthropic API key for Claude")
    claude_model: str = Field(
        default="claude-sonnet-4-20250514",
        description="Claude model used to write reviews",
    )
    max_diff_size: int = Field(
        default=60000,
        description="Maximum diff size in characters before truncation",
    )
    max_review_files: int = Field(
        default=100,
        description="Maximum number of changed files listed in a review",
    )

    log_level: str = Field(default="INFO", description="Logging level")

    # Server settings
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, description="Server port")

    def resolve_private_key(self) -> str | None:
        """
        Return the GitHub App private key in PEM form.

        Sources are tried in order: PRIVATE_KEY, PRIVATE_KEY_PATH,
        PRIVATE_KEY_BASE64. Only presence is logged, never key material.
        """
        if self.private_key.strip():
            logger.debug("Private key: True")
            return self.private_key.replace("\\n", "\n").strip()

        if self.private_key_path:
            try:
                key = Path(self.private_key_path).read_text(encoding="utf-8").strip()
            except OSError as e:
                logger.error(f"Failed to read private key file: {e.strerror}")
            else:
                logger.debug(f"Private key (from path): {bool(key)}")
                if key:
                    return key

        if self.private_key_base64:
            try:
                key = base64.b64decode(self.private_key_base64).decode("utf-8")
            except (binascii.Error, UnicodeDecodeError):
                logger.error("PRIVATE_KEY_BASE64 is not valid base64 encoded text")
                return None
            logger.debug(f"Private key (from base64): {bool(key.strip())}")
            return key.strip() or None

        logger.debug("Private key: False")
        return None


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
