"""Configuration management for Aurora Submit.

Settings come from ``AURORASUBMIT_*`` environment variables or a local
``.env`` file. The GitHub access token is not a setting: it lives in its
own file inside the config directory (see :func:`get_token_path`).
"""

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

MiB = 1024 * 1024


def _chmod_safe(path: Path, mode: int) -> None:
    """Set file permissions, ignoring errors on Windows."""
    try:
        path.chmod(mode)
    except OSError:
        pass


def get_config_dir() -> Path:
    """Get the config directory, creating if needed."""
    config_dir = Path.home() / ".aurorasubmit"
    config_dir.mkdir(exist_ok=True)
    _chmod_safe(config_dir, 0o700)
    return config_dir


def get_token_path() -> Path:
    """Get the GitHub access token file path."""
    return get_config_dir() / "github_token"


class Settings(BaseSettings):
    """Aurora Submit settings with env and file support."""

    model_config = SettingsConfigDict(env_prefix="AURORASUBMIT_", env_file=".env", extra="ignore")

    # GitHub OAuth app
    github_client_id: str | None = Field(default=None, description="GitHub OAuth app client ID")
    github_client_secret: str | None = Field(
        default=None, description="GitHub OAuth app client secret"
    )
    github_scope: str = Field(default="repo", description="OAuth scope requested at login")
    redirect_uri: str | None = Field(
        default=None,
        description="OAuth callback URL; defaults to http://<web_host>:<web_port>/auth/callback",
    )

    # Upstream content repository
    github_repo_owner: str = Field(default="DanielmGM", description="Upstream repository owner")
    github_repo_name: str = Field(default="AuroraSkins", description="Upstream repository name")
    github_target_branch: str = Field(
        default="main", description="Branch that pull requests are opened against"
    )
    manifest_path: str = Field(
        default="repo/list.json", description="Path of the published content manifest"
    )

    # Endpoints
    github_api_url: str = Field(default="https://api.github.com", description="GitHub REST API")
    github_oauth_url: str = Field(
        default="https://github.com/login/oauth", description="GitHub OAuth endpoints"
    )
    request_timeout: float = Field(default=30.0, description="Timeout for GitHub calls (s)")

    # Upload limits (bytes)
    max_background_size: int = Field(default=5 * MiB, description="Background image limit")
    max_skin_size: int = Field(default=20 * MiB, description="Skin package limit")
    max_coverflow_size: int = Field(default=1 * MiB, description="Coverflow bundle limit")
    max_screenshot_size: int = Field(default=2 * MiB, description="Screenshot limit")

    # Web Server
    web_host: str = Field(default="127.0.0.1", description="Web server host")
    web_port: int = Field(default=8888, description="Web server port")
    debug: bool = Field(default=False, description="Verbose logging and auto-reload")

    @property
    def callback_url(self) -> str:
        """The OAuth redirect URI GitHub sends the user back to."""
        if self.redirect_uri:
            return self.redirect_uri
        return f"http://{self.web_host}:{self.web_port}/auth/callback"


@lru_cache
def get_settings(force_reload: bool = False) -> Settings:
    """Get cached settings instance."""
    if force_reload:
        get_settings.cache_clear()
    return Settings()
