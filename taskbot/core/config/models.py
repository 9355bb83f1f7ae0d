"""Pydantic configuration models for taskbot.

This module defines all configuration models used throughout taskbot.
For loading and env-var expansion, see loader.py.
"""

from pathlib import Path

from pydantic import BaseModel, Field, field_validator


class LoggingConfig(BaseModel):
    """Configuration for logging system."""

    level: str = Field(default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)")
    directory: str = Field(default="logs", description="Directory for log files")
    max_size_mb: int = Field(default=10, description="Maximum log file size in MB before rotation")
    backup_count: int = Field(default=5, description="Number of backup log files to keep")


class TelegramConfig(BaseModel):
    """Telegram bot binding and allowlist."""

    token: str | None = Field(default=None, description="Bot token (falls back to TELEGRAM_BOT_TOKEN)")
    allowed_users: list[int] = Field(default_factory=list, description="Allowed Telegram user IDs")
    allow_all: bool = Field(default=False, description="Allow all users (insecure, use with caution)")


class LLMConfig(BaseModel):
    """Language model used for intent extraction."""

    model: str = Field(
        default="openai:deepseek/deepseek-chat-v3-0324",
        description="Model identifier in provider:model format (openai, anthropic)",
    )
    api_key: str | None = Field(default=None, description="API key for the model provider")
    base_url: str | None = Field(
        default="https://openrouter.ai/api/v1",
        description="OpenAI-compatible base URL (OpenRouter by default)",
    )
    temperature: float = Field(default=0.7, description="Model temperature")
    max_tokens: int = Field(default=1500, description="Completion token limit")
    max_retries: int = Field(default=3, description="Retries on rate-limit (HTTP 429) failures")
    base_delay_seconds: float = Field(default=1.0, description="Base delay for exponential backoff")

    model_config = {"extra": "allow"}


class BasecampConfig(BaseModel):
    """Basecamp OAuth application and API settings."""

    client_id: str | None = Field(default=None, description="OAuth client ID")
    client_secret: str | None = Field(default=None, description="OAuth client secret")
    redirect_uri: str | None = Field(default=None, description="OAuth redirect URI (points at /oauth/callback)")
    user_agent: str = Field(
        default="taskbot (ops@example.com)",
        description="User-Agent header required by the Basecamp API",
    )
    api_base: str = Field(default="https://3.basecampapi.com", description="Basecamp API root")
    launchpad_base: str = Field(
        default="https://launchpad.37signals.com",
        description="Launchpad root for OAuth authorization and token exchange",
    )
    timeout_seconds: float = Field(default=30.0, description="HTTP timeout per request")


class DirectoryConfig(BaseModel):
    """Airtable-backed people/project directory."""

    api_key: str | None = Field(default=None, description="Airtable personal access token")
    base_id: str | None = Field(default=None, description="Airtable base ID")
    api_url: str = Field(default="https://api.airtable.com/v0", description="Airtable REST root")
    people_table: str = Field(default="people", description="Table holding people records")
    people_view: str = Field(default="Grid view", description="View used when listing people")
    projects_table: str = Field(default="projects", description="Table mapping projects to Slack channels")
    projects_view: str = Field(default="Grid view", description="View used when listing project mappings")
    cache_ttl_seconds: float = Field(default=300.0, description="Directory cache lifetime")


class SlackConfig(BaseModel):
    """Slack notification settings."""

    bot_token: str | None = Field(default=None, description="Slack bot token (xoxb-...)")
    default_channel_id: str | None = Field(
        default=None,
        description="Fallback channel when a project has no mapping (None = skip)",
    )


class ServerConfig(BaseModel):
    """HTTP server for Basecamp webhooks and the OAuth callback."""

    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=3000, description="Bind port")


class Config(BaseModel):
    """Root configuration for taskbot."""

    timezone: str = Field(default="UTC", description="Timezone for relative due dates (IANA identifier)")
    state_dir: Path = Field(default=Path(".taskbot"), description="Directory for credentials and thread mappings")
    logging: LoggingConfig = Field(default_factory=LoggingConfig, description="Logging configuration")
    telegram: TelegramConfig = Field(default_factory=TelegramConfig, description="Telegram binding")
    llm: LLMConfig = Field(default_factory=LLMConfig, description="Intent extraction model")
    basecamp: BasecampConfig = Field(default_factory=BasecampConfig, description="Basecamp API")
    directory: DirectoryConfig = Field(default_factory=DirectoryConfig, description="People/project directory")
    slack: SlackConfig = Field(default_factory=SlackConfig, description="Slack notifications")
    server: ServerConfig = Field(default_factory=ServerConfig, description="Webhook/OAuth HTTP server")

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Validate timezone is a valid IANA timezone identifier."""
        from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, KeyError):
            raise ValueError(
                f"Invalid timezone '{v}'. Use IANA timezone identifiers "
                f"(e.g., 'America/Denver', 'Europe/London', 'UTC')."
            )
        return v

    model_config = {"extra": "allow"}
