"""
Configuration for the J-Quants source.

Values come from the process environment, optionally seeded from a .env file
at the project root. The refresh token itself is not stored here: the
credential cache reads it from the environment each time it has to refresh.
"""

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field

BASE_DIR = Path(__file__).parent.parent.parent
load_dotenv(BASE_DIR / ".env")

DEFAULT_BASE_URL = "https://api.jquants.com/v1"

# TSE Prime
PRIME_MARKET_CODE = "0111"

# J-Quants hands out refresh tokens as the account's "API key"
REFRESH_TOKEN_ENV = "JQUANTS_API_KEY"

# Free plan data lags by 12 weeks
FREE_PLAN_DELAY_DAYS = 84


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("true", "1", "yes")


class JQuantsSettings(BaseModel):
    """Runtime settings for the J-Quants client and screening pipeline."""
    base_url: str = DEFAULT_BASE_URL
    market_code: str = PRIME_MARKET_CODE
    delay_days: int = Field(default=0, ge=0)
    strict_business_days: bool = False
    timeout: int = Field(default=30, gt=0)

    @classmethod
    def from_env(cls) -> "JQuantsSettings":
        """
        Build settings from environment variables.

        Honors JQUANTS_BASE_URL, JQUANTS_MARKET_CODE, JQUANTS_DELAY_DAYS,
        JQUANTS_STRICT_BUSINESS_DAYS ('true' | 'false') and JQUANTS_TIMEOUT.
        """
        return cls(
            base_url=os.getenv("JQUANTS_BASE_URL", DEFAULT_BASE_URL).rstrip("/"),
            market_code=os.getenv("JQUANTS_MARKET_CODE", PRIME_MARKET_CODE),
            delay_days=int(os.getenv("JQUANTS_DELAY_DAYS", "0")),
            strict_business_days=_env_bool("JQUANTS_STRICT_BUSINESS_DAYS"),
            timeout=int(os.getenv("JQUANTS_TIMEOUT", "30")),
        )
