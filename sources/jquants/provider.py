"""
J-Quants data provider.

Fetches listed-company info, daily quotes and financial statements from the
J-Quants API. https://jpx.gitbook.io/j-quants-en/api-reference

J-Quants is the only source for these records, so there is no provider ABC.
"""

import datetime
import logging
from typing import Dict, List, Optional, Union

from models import DailyQuote, FinancialStatement, ListedSecurity
from utils.session import RequestSession
from sources.jquants.config import DEFAULT_BASE_URL, PRIME_MARKET_CODE, JQuantsSettings
from sources.jquants.credentials import CredentialCache
from sources.jquants.errors import UpstreamError

logger = logging.getLogger(__name__)


class JQuantsProvider:
    """Provider for J-Quants listed info, daily quotes and statements."""

    def __init__(
        self,
        credentials: Optional[CredentialCache] = None,
        session: Optional[RequestSession] = None,
        base_url: str = DEFAULT_BASE_URL,
    ):
        self.session = session or RequestSession()
        self.base_url = base_url
        self.credentials = credentials or CredentialCache(session=self.session, base_url=base_url)
        self.name = "J-Quants"

    @classmethod
    def from_settings(cls, settings: JQuantsSettings) -> "JQuantsProvider":
        """Build a provider (and its token cache) from JQuantsSettings."""
        return cls(session=RequestSession(timeout=settings.timeout), base_url=settings.base_url)

    def _get(self, path: str, label: str, params: Optional[Dict] = None) -> Dict:
        """
        Authenticated GET against the J-Quants API.

        Raises:
            UpstreamError: On a non-success status or no response at all
        """
        credential = self.credentials.acquire()
        resp = self.session.get(
            f"{self.base_url}{path}",
            params=params,
            headers={"Authorization": f"Bearer {credential.token}"},
        )
        if resp is None:
            raise UpstreamError(f"Failed to get {label}: no response")
        if not resp:
            raise UpstreamError(f"Failed to get {label}: {resp.status_code}", status=resp.status_code)
        try:
            return resp.json()
        except ValueError:
            raise UpstreamError(f"Failed to get {label}: response is not JSON", status=resp.status_code)

    def get_listed_info(self, market_code: str = PRIME_MARKET_CODE) -> List[ListedSecurity]:
        """
        Fetch the full listing and keep only companies on one market.

        Args:
            market_code: J-Quants market code (TSE Prime: '0111')

        Returns:
            List of ListedSecurity whose market_code equals market_code
        """
        data = self._get("/listed/info", "listed info")

        listed = []
        for item in data.get("info") or []:
            if item.get("MarketCode") != market_code:
                continue
            listed.append(ListedSecurity(
                code=item.get("Code", ""),
                company_name=item.get("CompanyName") or "",
                company_name_english=item.get("CompanyNameEnglish") or "",
                sector33_code_name=item.get("Sector33CodeName") or "",
                sector17_code_name=item.get("Sector17CodeName") or "",
                market_code=item.get("MarketCode", ""),
                market_code_name=item.get("MarketCodeName") or "",
            ))

        logger.info(f"Listed info: {len(listed)} companies on market {market_code}")
        return listed

    def get_daily_quotes(self, date: Union[str, datetime.date]) -> List[DailyQuote]:
        """
        Fetch daily quotes for every code on one date.

        Args:
            date: Trading date (YYYY-MM-DD or datetime.date)

        Returns:
            List of DailyQuote; empty when nothing traded that day
        """
        if isinstance(date, datetime.date):
            date = date.isoformat()

        data = self._get("/prices/daily_quotes", "daily quotes", params={"date": date})

        quotes = [
            DailyQuote(
                code=q.get("Code", ""),
                date=q.get("Date") or date,
                close=q.get("Close"),
                adjustment_close=q.get("AdjustmentClose"),
                volume=q.get("Volume"),
                turnover_value=q.get("TurnoverValue"),
                earnings_per_share=q.get("EarningsPerShare"),
                book_value_per_share=q.get("BookValuePerShare"),
            )
            for q in data.get("daily_quotes") or []
        ]

        if not quotes:
            logger.warning(f"No daily quotes for {date} (non-trading day?)")
        else:
            logger.info(f"Daily quotes: {len(quotes)} records for {date}")
        return quotes

    def get_statements(self, code: Optional[str] = None) -> List[FinancialStatement]:
        """
        Fetch financial statement summaries.

        Args:
            code: Restrict to one company code (optional)

        Returns:
            List of FinancialStatement; values J-Quants leaves blank become None
        """
        params = {"code": code} if code else None
        data = self._get("/fins/statements", "statements", params=params)

        return [
            FinancialStatement(
                code=s.get("LocalCode") or s.get("Code") or "",
                disclosed_date=s.get("DisclosedDate") or "",
                type_of_document=s.get("TypeOfDocument") or "",
                net_sales=_to_float(s.get("NetSales")),
                operating_profit=_to_float(s.get("OperatingProfit")),
                profit=_to_float(s.get("Profit")),
                earnings_per_share=_to_float(s.get("EarningsPerShare")),
                book_value_per_share=_to_float(s.get("BookValuePerShare")),
                equity=_to_float(s.get("Equity")),
            )
            for s in data.get("statements") or []
        ]


def _to_float(value) -> Optional[float]:
    # Statements come back as strings, with "" for undisclosed items
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None
