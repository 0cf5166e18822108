from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # --- Runtime ---
    ENV: str = "dev"  # dev|prod
    LOG_LEVEL: str = "INFO"

    # --- Bookings ---
    # Relative pickup phrases ("Tomorrow, 9:00 AM") are read in this zone
    BOOKING_TIMEZONE: str = "Australia/Sydney"
    CURRENCY: str = "AUD"

    # --- Garage search ---
    SEARCH_DEFAULT_LIMIT: int = 20
    SEARCH_MAX_LIMIT: int = 50
    SEARCH_DEFAULT_MAX_DISTANCE_KM: float = 30.0


settings = Settings()
