from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    # ─── App ──────────────────────────────
    APP_NAME: str = "vedic-engine"
    ENV: str = "local"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # ─── Ephemeris ────────────────────────
    AYANAMSA: str = "Lahiri"
    EPHEMERIS_PATH: Optional[str] = None

    # ─── Time ─────────────────────────────
    DAYS_PER_YEAR: float = 365.25
    TRANSIT_EPOCH_JD: float = 2451545.0

    # ─── Saturn transit table ─────────────
    DEFAULT_SATURN_SIGN: str = "Pisces"
    SATURN_CYCLE_YEARS: float = 29.43

    # ─── Matching ─────────────────────────
    MATCH_RECOMMENDED_THRESHOLD: int = 18


    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
