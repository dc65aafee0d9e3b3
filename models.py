"""
Pydantic data models for the J-Quants screening system.

These models define the schema for everything flowing through the pipeline:
the cached ID token, the raw listing/quote/statement records fetched from
J-Quants, and the screening records derived by joining them.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


# Shown when J-Quants has neither a 33- nor a 17-sector name for a company
UNCLASSIFIED_SECTOR = "未分類"


# ---------------------------------------------------------------------------
# Credential
# ---------------------------------------------------------------------------

class Credential(BaseModel):
    """A J-Quants ID token and the instant after which it must not be used."""
    token: str
    expires_at: datetime

    def is_valid(self, now: datetime) -> bool:
        return now < self.expires_at


# ---------------------------------------------------------------------------
# J-Quants Records
# ---------------------------------------------------------------------------

class ListedSecurity(BaseModel):
    """
    A listed company from /listed/info.
    One fetch per aggregation; never cached across calls.
    """
    code: str
    company_name: str = ""
    company_name_english: str = ""
    sector33_code_name: str = ""
    sector17_code_name: str = ""
    market_code: str = ""
    market_code_name: str = ""

    @property
    def sector_name(self) -> str:
        return self.sector33_code_name or self.sector17_code_name or UNCLASSIFIED_SECTOR


class DailyQuote(BaseModel):
    """
    Daily price record for one code on one date from /prices/daily_quotes.
    Numeric fields are None when the security did not trade.
    """
    code: str
    date: str
    close: Optional[float] = None
    adjustment_close: Optional[float] = None
    volume: Optional[float] = None
    turnover_value: Optional[float] = None
    earnings_per_share: Optional[float] = None
    book_value_per_share: Optional[float] = None


class FinancialStatement(BaseModel):
    """Summary of a financial disclosure from /fins/statements."""
    code: str
    disclosed_date: str = ""
    type_of_document: str = ""
    net_sales: Optional[float] = None
    operating_profit: Optional[float] = None
    profit: Optional[float] = None
    earnings_per_share: Optional[float] = None
    book_value_per_share: Optional[float] = None
    equity: Optional[float] = None


# ---------------------------------------------------------------------------
# Screening
# ---------------------------------------------------------------------------

class ScreeningRecord(BaseModel):
    """
    A listed security joined with its daily quote, with PER/PBR derived.

    When J-Quants supplies no positive EPS/BPS, eps and bps hold price-based
    placeholders (PER 10x / PBR 1x) and the matching *_estimated flag is set;
    per/pbr are None in that case.
    """
    code: str
    name: str = ""
    name_en: str = ""
    sector: str = UNCLASSIFIED_SECTOR
    market: str = ""
    price: float
    volume: Optional[float] = None
    turnover: Optional[float] = None
    eps: float
    bps: float
    per: Optional[float] = None
    pbr: Optional[float] = None
    date: str
    eps_estimated: bool = False
    bps_estimated: bool = False


class ScreeningSnapshot(BaseModel):
    """Result of one screening aggregation."""
    stocks: list[ScreeningRecord] = []
    date: str
    count: int = 0
