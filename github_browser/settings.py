"""
Centralised settings loaded from environment variables.
Uses pydantic-settings so every value can be overridden via env vars or a .env file.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration."""

    # ── GitHub ──────────────────────────────────────────────
    github_token: str | None = None
    github_api_base: str = "https://api.github.com"

    # ── HTTP client ─────────────────────────────────────────
    http_connect_timeout: float = 5.0
    http_read_timeout: float = 10.0
    user_agent: str = "github-browser/1.0"

    # ── Page sizes ──────────────────────────────────────────
    users_per_page: int = 30
    repos_per_page: int = 30

    # ── Logging ─────────────────────────────────────────────
    log_level: str = "info"

    model_config = {"env_prefix": "", "env_file": ".env", "env_file_encoding": "utf-8"}


# Singleton used across the package
settings = Settings()
