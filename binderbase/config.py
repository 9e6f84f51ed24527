from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env")

    app_name: str = "BinderBase"
    debug: bool = False
    log_level: str = "INFO"

    host: str = "127.0.0.1"
    port: int = 3000

    database_url: str = "postgresql+asyncpg://localhost:5432/binderbase"

    scryfall_base_url: str = "https://api.scryfall.com"
    edhrec_base_url: str = "https://json.edhrec.com/pages"

    # Applied to every outbound provider request
    http_timeout: float = 30.0
    user_agent: str = "BinderBase/1.0"

    default_deck_format: str = "Commander"

    cors_origins: list[str] = ["http://localhost:5173"]


settings = Settings()


# =============================================================================
# PROVIDER RESULT LIMITS
# =============================================================================

# EDHREC commander pages: entries kept per category bucket
MAX_CATEGORY_ENTRIES = 10

# EDHREC color identity pages: entries kept overall
MAX_COLOR_ENTRIES = 20

# Autocomplete queries shorter than this never reach Scryfall
MIN_AUTOCOMPLETE_LENGTH = 2
