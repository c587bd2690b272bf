from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="REMINDER_CLIENT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    api_url: str = Field(default="http://localhost:5001/api/v1", description="Base URL of the reminders API")
    poll_interval_seconds: float = Field(default=2.0, description="List refresh interval while the list is visible")
    request_timeout_seconds: float = Field(default=10.0, description="Timeout applied to every HTTP call")
    token_path: str = Field(
        default=Path.home().joinpath(".reminder-app", "token.json").as_posix(),
        description="Where the bearer token is persisted",
    )


def get_client_settings() -> ClientSettings:
    """Retrieve client settings."""
    return ClientSettings()
