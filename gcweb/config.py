"""Configuration management for gcweb."""

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from gcweb.core.constants import API_PROXY_URL, GCVOTE_URL, WEBSITE_URL, APIConstants


class Config(BaseSettings):
    """Application configuration."""

    website_url: str = Field(default=WEBSITE_URL, alias="GCWEB_WEBSITE_URL", description="geocaching.com base URL")
    api_proxy_url: str = Field(
        default=API_PROXY_URL,
        alias="GCWEB_API_PROXY_URL",
        description="Base URL of the website's API proxy",
    )
    auth_cookie: SecretStr | None = Field(
        default=None,
        alias="GCWEB_AUTH_COOKIE",
        description="Authenticated session cookie (gspkauth) handed over by the login flow",
    )
    request_timeout: float = Field(
        default=float(APIConstants.REQUEST_TIMEOUT),
        alias="GCWEB_REQUEST_TIMEOUT",
        description="Per-request timeout in seconds for the default transport",
    )

    # Rating enrichment
    include_ratings: bool = Field(
        default=False,
        alias="GCWEB_INCLUDE_RATINGS",
        description="Enrich search results with GCVote ratings",
    )
    gcvote_url: str = Field(default=GCVOTE_URL, alias="GCWEB_GCVOTE_URL", description="GCVote votes endpoint")
    gcvote_username: str | None = Field(default=None, alias="GCWEB_GCVOTE_USERNAME", description="GCVote user")
    gcvote_password: SecretStr | None = Field(
        default=None,
        alias="GCWEB_GCVOTE_PASSWORD",
        description="GCVote password",
    )

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        populate_by_name=True,
    )


def load_config() -> Config:
    """Load configuration from environment and .env file."""
    return Config()
