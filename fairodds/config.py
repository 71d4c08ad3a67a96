from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

# Bookmakers licensed in Australia; the "local only" toggle restricts to these.
DEFAULT_LOCAL_BOOKMAKERS = "Betr,Ladbrokes,Pointsbet (AU),Sportsbet,TAB,Unibet,TABTouch"


def _default_raw_path() -> str:
    return str(BASE_DIR / "data" / "betting_odds_raw.csv")


def _default_top_bets_path() -> str:
    return str(BASE_DIR / "data" / "top_bets.csv")


class Settings(BaseSettings):
    # --- DATA SOURCES ---
    # Local paths or http(s) URLs
    RAW_DATA_PATH: str = _default_raw_path()
    # Empty string disables the precomputed table; top bets are then always derived from raw quotes
    TOP_BETS_PATH: str = _default_top_bets_path()
    REQUEST_TIMEOUT: float = 15.0

    # --- ANALYSIS ---
    MIN_SAMPLE_SIZE: int = 10
    TOP_BETS_LIMIT: int = 50

    # --- BOOKMAKER FILTER ---
    # Keep as a comma-separated string in .env to avoid JSON decoding issues
    LOCAL_BOOKMAKERS: str = DEFAULT_LOCAL_BOOKMAKERS
    LOCAL_ONLY: bool = False

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @field_validator("RAW_DATA_PATH", mode="before")
    @classmethod
    def _default_raw_data_path(cls, v):
        # If .env contains an empty RAW_DATA_PATH, fall back to the default
        if v is None or (isinstance(v, str) and v.strip() == ""):
            return _default_raw_path()
        return v

    @field_validator("MIN_SAMPLE_SIZE", "TOP_BETS_LIMIT")
    @classmethod
    def _positive(cls, v):
        if v < 1:
            raise ValueError("must be >= 1")
        return v


# Normalize comma-separated env fields into Python lists for runtime convenience.
def _to_list(value: str) -> list[str]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [s.strip() for s in str(value).split(",") if s.strip()]


def load_settings() -> Settings:
    loaded = Settings()
    loaded.LOCAL_BOOKMAKERS = _to_list(loaded.LOCAL_BOOKMAKERS)
    return loaded


settings = load_settings()
