"""
Pydantic models for API responses.
Auto-generates OpenAPI documentation.
"""

from typing import List, Optional

from pydantic import BaseModel

from models import DailyQuote, ListedSecurity, ScreeningRecord


class ScreeningResponse(BaseModel):
    """Screening snapshot response."""
    stocks: List[ScreeningRecord]
    date: str
    count: int


class ListedInfoResponse(BaseModel):
    """Listed companies on one market."""
    info: List[ListedSecurity]
    count: int


class DailyQuotesResponse(BaseModel):
    """Daily quotes for one date."""
    quotes: List[DailyQuote]
    count: int


class HealthResponse(BaseModel):
    """API health check response."""
    service: str
    version: str
    status: str
    market_code: str
    delay_days: int


class ErrorResponse(BaseModel):
    """Error response."""
    detail: str
    error_type: Optional[str] = None
