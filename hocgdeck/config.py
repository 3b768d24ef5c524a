from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="HOCGDECK_")

    app_name: str = "hocg-deck-convert"
    debug: bool = False

    # Card catalog published by the hocg-fan-sim-assets data pipeline
    catalog_url: str = "https://qrimpuff.github.io/hocg-fan-sim-assets/hocg_cards.json"
    catalog_path: str | None = None

    # Proxy in front of Deck Log (view and publish)
    deck_log_api_url: str = "https://hocg-deck-convert-api.onrender.com"

    # Proxy that reads shop prices (POST /price-check)
    price_check_api_url: str = "https://hocg-deck-convert-api-y7os.shuttle.app"

    http_timeout: float = 30.0


settings = Settings()


# =============================================================================
# DECK CONSTRAINTS
# =============================================================================

MAIN_DECK_SIZE = 50
CHEER_DECK_SIZE = 20

# Copy limit when the card cannot be found in the catalog
DEFAULT_MAX_COPIES = 50


# =============================================================================
# PRICE CHECK
# =============================================================================

# Shop prices older than this are checked again
PRICE_CACHE_SECONDS = 60 * 60
