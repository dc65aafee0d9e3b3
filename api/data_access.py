"""
Data access layer for the screening API.
Wraps the J-Quants provider and screening pipeline behind async methods.
"""

import asyncio
import datetime
import logging
from typing import List, Optional, Union

from models import DailyQuote, ListedSecurity, ScreeningSnapshot
from sources.jquants.config import JQuantsSettings
from sources.jquants.pipeline import ScreeningPipeline
from sources.jquants.provider import JQuantsProvider

logger = logging.getLogger(__name__)


class ScreeningDataAccess:
    """
    Serves screening data from J-Quants.

    One provider (and so one ID token cache) is shared by every request.
    """

    def __init__(self, provider: Optional[JQuantsProvider] = None, settings: Optional[JQuantsSettings] = None):
        self.settings = settings or JQuantsSettings.from_env()
        self.provider = provider or JQuantsProvider.from_settings(self.settings)
        self.pipeline = ScreeningPipeline(provider=self.provider, settings=self.settings)

    async def get_screening_data(self) -> ScreeningSnapshot:
        """Joined listing + quotes for the latest business date."""
        return await self.pipeline.build_snapshot()

    async def get_listed_info(self, market_code: Optional[str] = None) -> List[ListedSecurity]:
        """
        Listed companies on one market.

        Args:
            market_code: Market code (defaults to the configured market)
        """
        return await asyncio.to_thread(
            self.provider.get_listed_info, market_code or self.settings.market_code
        )

    async def get_daily_quotes(self, date: Union[str, datetime.date]) -> List[DailyQuote]:
        """Daily quotes for every code on one date."""
        return await asyncio.to_thread(self.provider.get_daily_quotes, date)
