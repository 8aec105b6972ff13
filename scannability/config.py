"""
Scannability Configuration

Central settings loaded from environment variables (and a .env file,
when present).
"""

import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    """Immutable engine settings."""

    # --- Presets ---
    DEFAULT_PRESET: str = os.getenv("SCANNABILITY_DEFAULT_PRESET", "global")

    # --- Analysis Cache ---
    CACHE_TTL_MS: int = int(os.getenv("SCANNABILITY_CACHE_TTL_MS", "1000"))

    # --- Scoring ---
    MAX_LINES_WITHOUT_ANCHOR: int = int(
        os.getenv("SCANNABILITY_MAX_LINES_WITHOUT_ANCHOR", "5")
    )

    # --- Logging ---
    LOG_LEVEL: str = os.getenv("SCANNABILITY_LOG_LEVEL", "INFO").upper()
    LOG_FORMAT: str = os.getenv("SCANNABILITY_LOG_FORMAT", "json")  # "json" or "text"


settings = Settings()
