"""
J-Quants Prime Screening Pipeline

Fetches the TSE Prime listing and the latest available daily quotes from
J-Quants in parallel, joins them by company code and derives PER/PBR for
each security.

Usage:
    python sources/jquants/pipeline.py                      # Latest business day
    python sources/jquants/pipeline.py --delay-days 84      # Free plan (12-week lag)
    python sources/jquants/pipeline.py --date 2025-01-15    # Specific trading date
    python sources/jquants/pipeline.py --top 30             # Show 30 lowest-PER stocks
"""

import argparse
import asyncio
import datetime
import logging
import sys
from pathlib import Path
from typing import Dict, Iterable, List, Optional

sys.path.append(str(Path(__file__).parent.parent.parent))

from utils import log
from models import DailyQuote, ListedSecurity, ScreeningRecord, ScreeningSnapshot
from sources.jquants.business_days import resolve_latest_business_date
from sources.jquants.config import JQuantsSettings
from sources.jquants.errors import JQuantsError
from sources.jquants.provider import JQuantsProvider

logger = logging.getLogger(__name__)

# Placeholders when a quote carries no usable EPS/BPS
PLACEHOLDER_EPS_RATIO = 0.1  # ~PER 10x
PLACEHOLDER_BPS_RATIO = 1.0  # ~PBR 1x


def build_record(info: ListedSecurity, quote: DailyQuote) -> Optional[ScreeningRecord]:
    """
    Join one listed security with its quote.

    Returns None when the quote has no positive price.
    """
    price = quote.close or quote.adjustment_close
    if not price or price <= 0:
        return None

    eps = quote.earnings_per_share or 0
    bps = quote.book_value_per_share or 0

    return ScreeningRecord(
        code=info.code,
        name=info.company_name,
        name_en=info.company_name_english,
        sector=info.sector_name,
        market=info.market_code_name,
        price=price,
        volume=quote.volume,
        turnover=quote.turnover_value,
        eps=eps if eps > 0 else price * PLACEHOLDER_EPS_RATIO,
        bps=bps if bps > 0 else price * PLACEHOLDER_BPS_RATIO,
        per=round(price / eps, 2) if eps > 0 else None,
        pbr=round(price / bps, 2) if bps > 0 else None,
        date=quote.date,
        eps_estimated=eps <= 0,
        bps_estimated=bps <= 0,
    )


def join_records(listed: Iterable[ListedSecurity], quotes: Iterable[DailyQuote]) -> List[ScreeningRecord]:
    """Inner-join listing and quotes on code, in listing order."""
    quotes_by_code: Dict[str, DailyQuote] = {}
    for q in quotes:
        quotes_by_code[q.code] = q

    records = []
    for info in listed:
        quote = quotes_by_code.get(info.code)
        if quote is None:
            continue
        record = build_record(info, quote)
        if record is not None:
            records.append(record)
    return records


class ScreeningPipeline:
    """
    Screening snapshot builder.

    Resolves the target business date, fetches the listing and that day's
    quotes concurrently and joins them. Either fetch failing fails the whole
    snapshot.
    """

    def __init__(
        self,
        provider: Optional[JQuantsProvider] = None,
        settings: Optional[JQuantsSettings] = None,
        today: Optional[datetime.date] = None,
    ):
        self.settings = settings or JQuantsSettings.from_env()
        self.provider = provider or JQuantsProvider.from_settings(self.settings)
        self.today = today

    def resolve_date(self) -> datetime.date:
        return resolve_latest_business_date(
            delay_days=self.settings.delay_days,
            today=self.today,
            strict=self.settings.strict_business_days,
        )

    async def build_snapshot(self, target_date: Optional[datetime.date] = None) -> ScreeningSnapshot:
        """
        Build a screening snapshot for the latest business date.

        Args:
            target_date: Override the resolved business date

        Returns:
            ScreeningSnapshot with the joined records, ISO date and count
        """
        date = (target_date or self.resolve_date()).isoformat()
        logger.info(f"Building screening snapshot for {date} (market {self.settings.market_code})")

        listed, quotes = await asyncio.gather(
            asyncio.to_thread(self.provider.get_listed_info, self.settings.market_code),
            asyncio.to_thread(self.provider.get_daily_quotes, date),
        )

        stocks = join_records(listed, quotes)
        logger.info(f"Joined {len(stocks)} of {len(listed)} listed securities ({len(quotes)} quotes)")
        return ScreeningSnapshot(stocks=stocks, date=date, count=len(stocks))

    def run(self, target_date: Optional[datetime.date] = None) -> ScreeningSnapshot:
        """Build a snapshot synchronously."""
        return asyncio.run(self.build_snapshot(target_date))


def report(snapshot: ScreeningSnapshot, top: int = 20) -> None:
    """Print a summary and the lowest-PER records."""
    estimated = sum(1 for s in snapshot.stocks if s.eps_estimated or s.bps_estimated)
    log.summary_table("Screening Summary", [
        ("Date", snapshot.date),
        ("Securities", f"{snapshot.count:,}"),
        ("Estimated EPS/BPS", f"{estimated:,}"),
    ])

    ranked = sorted((s for s in snapshot.stocks if s.per and s.per > 0), key=lambda s: s.per)
    for s in ranked[:top]:
        log.code_msg(
            s.code,
            f"{s.name} {log.C.SECTOR}{s.sector}{log.C.RESET} | "
            f"price {s.price:,.1f} | PER {s.per} | PBR {s.pbr if s.pbr is not None else '-'}"
        )


def main():
    parser = argparse.ArgumentParser(description="Build a J-Quants screening snapshot")
    parser.add_argument("--delay-days", type=int, help="Plan reporting lag in days (free plan: 84)")
    parser.add_argument("--strict", action="store_true", help="Keep the delayed date on a weekday")
    parser.add_argument("--market", type=str, help="Market code (default: 0111, TSE Prime)")
    parser.add_argument("--date", type=datetime.date.fromisoformat, help="Trading date YYYY-MM-DD")
    parser.add_argument("--top", type=int, default=20, help="Number of lowest-PER stocks to show")
    args = parser.parse_args()
    if args.delay_days is not None and args.delay_days < 0:
        parser.error("--delay-days must be >= 0")

    log.setup_verbose_logging("sources.jquants")

    settings = JQuantsSettings.from_env()
    overrides = {}
    if args.delay_days is not None:
        overrides["delay_days"] = args.delay_days
    if args.strict:
        overrides["strict_business_days"] = True
    if args.market:
        overrides["market_code"] = args.market
    if overrides:
        settings = settings.model_copy(update=overrides)

    log.header("J-QUANTS SCREENING: TSE Listed Info + Daily Quotes")
    start = datetime.datetime.now()

    pipeline = ScreeningPipeline(settings=settings)
    log.step(f"Resolving data for {(args.date or pipeline.resolve_date()).isoformat()}")

    try:
        snapshot = pipeline.run(args.date)
    except JQuantsError as e:
        log.err(str(e))
        logger.exception("Screening failed")
        sys.exit(1)

    report(snapshot, top=args.top)
    log.ok(f"Screening complete in {datetime.datetime.now() - start}")


if __name__ == "__main__":
    main()
