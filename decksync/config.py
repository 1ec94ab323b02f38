from dataclasses import dataclass
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from decksync.models.failure import ConfigError


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    airtable_token: str = ""
    airtable_base: str = ""
    airtable_table: str = "decks"
    airtable_api_url: str = "https://api.airtable.com/v0"

    output_dir: Path = Field(default=Path("data"), alias="DECKSYNC_OUTPUT_DIR")
    max_concurrency: int = Field(default=8, ge=1, alias="DECKSYNC_MAX_CONCURRENCY")
    http_timeout: float = Field(default=30.0, gt=0, alias="DECKSYNC_HTTP_TIMEOUT")

    # When False, a single failed attachment aborts the whole sync
    allow_partial: bool = Field(default=False, alias="DECKSYNC_ALLOW_PARTIAL")


@dataclass(frozen=True)
class SyncConfig:
    """
    Everything a sync run needs, resolved once at process start.

    Attributes:
        token: Airtable personal access token
        base_id: Airtable base identifier (appXXXXXXXX)
        table_name: Table holding one row per deck
        api_url: Airtable REST API root
        output_dir: Directory receiving index.json and decks/
        max_concurrency: Upper bound on concurrent attachment fetches
        http_timeout: Per-request timeout in seconds
        allow_partial: Skip records whose attachment fetch fails instead of aborting
    """

    token: str
    base_id: str
    table_name: str = "decks"
    api_url: str = "https://api.airtable.com/v0"
    output_dir: Path = Path("data")
    max_concurrency: int = 8
    http_timeout: float = 30.0
    allow_partial: bool = False


# Environment variable name for each required setting
REQUIRED_VARIABLES = {
    "airtable_token": "AIRTABLE_TOKEN",
    "airtable_base": "AIRTABLE_BASE",
}

DEFAULT_TABLE_NAME = "decks"


def build_sync_config(
    settings: Settings | None = None,
    *,
    output_dir: Path | None = None,
    allow_partial: bool | None = None,
) -> SyncConfig:
    """
    Validate settings and freeze them into a SyncConfig.

    Args:
        settings: Loaded settings. Reads the environment when None.
        output_dir: Overrides settings.output_dir (CLI flag)
        allow_partial: Overrides settings.allow_partial (CLI flag)

    Returns:
        SyncConfig ready to pass into the sync job

    Raises:
        ConfigError: If any required variable is missing or blank
    """
    if settings is None:
        settings = Settings()

    missing = [
        env_name
        for attr, env_name in REQUIRED_VARIABLES.items()
        if not getattr(settings, attr).strip()
    ]
    if missing:
        raise ConfigError(missing)

    return SyncConfig(
        token=settings.airtable_token.strip(),
        base_id=settings.airtable_base.strip(),
        table_name=settings.airtable_table.strip() or DEFAULT_TABLE_NAME,
        api_url=settings.airtable_api_url.rstrip("/"),
        output_dir=output_dir if output_dir is not None else settings.output_dir,
        max_concurrency=settings.max_concurrency,
        http_timeout=settings.http_timeout,
        allow_partial=settings.allow_partial if allow_partial is None else allow_partial,
    )
