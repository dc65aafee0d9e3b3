"""
Configuration for the screening API server.
"""

import os
from typing import List


class Settings:
    """API server configuration."""

    API_TITLE: str = "J-Quants Screening API"
    API_DESCRIPTION: str = "TSE Prime screening data (price, PER, PBR) from J-Quants"
    API_VERSION: str = "1.0.0"
    HOST: str = os.getenv("API_HOST", "0.0.0.0")
    PORT: int = int(os.getenv("API_PORT", "8000"))

    # CORS
    CORS_ORIGINS: List[str] = ["*"]  # Allow all origins (restrict in production)


settings = Settings()
