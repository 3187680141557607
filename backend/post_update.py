#!/usr/bin/env python3
"""Scheduled fetch + post of the A-share intraday summary.

Meant to be triggered by an external scheduler every few minutes. Outside
trading hours it exits quietly. Exit codes: 0 posted or skipped, 1 error,
2 posting failed and the post was saved to the local log.
"""

import asyncio
import sys
import traceback
from datetime import datetime
from typing import Awaitable, Callable, Optional
from zoneinfo import ZoneInfo

import config
from services.market_summary import FetchError, MarketSnapshot, fetch_market_snapshot
from services.publisher import CommandPublisher, publish_with_fallback
from services.schedule_gate import market_now, should_run
from services.summary_formatter import build_summary, weighted_length

EXIT_OK = 0
EXIT_ERROR = 1


async def main(
    now: Optional[datetime] = None,
    fetcher: Optional[Callable[[], Awaitable[MarketSnapshot]]] = None,
    publisher=None,
) -> int:
    tz = ZoneInfo(config.MARKET_TIMEZONE)
    now = now or market_now()
    if not should_run(now, tz):
        return EXIT_OK
    if now.tzinfo is not None:
        now = now.astimezone(tz)

    try:
        snapshot = await (fetcher or fetch_market_snapshot)()
    except FetchError as e:
        print(f"❌ Market data fetch failed ({e.kind}): {e}", file=sys.stderr)
        return EXIT_ERROR

    if snapshot.placeholder and not config.PUBLISH_PLACEHOLDER_DATA:
        print(
            f"⚠️ Skipping post: market data is placeholder ({snapshot.note}); "
            "set PUBLISH_PLACEHOLDER_DATA=1 to post it anyway",
            file=sys.stderr,
        )
        return EXIT_OK
    if snapshot.is_empty:
        print("⚠️ Skipping post: market data source returned no rankings", file=sys.stderr)
        return EXIT_OK

    text = build_summary(snapshot, now)
    length = weighted_length(text)
    if length > config.TWEET_MAX_WEIGHTED_LENGTH:
        print(
            f"⚠️ Post weighted length {length} exceeds {config.TWEET_MAX_WEIGHTED_LENGTH}; posting anyway",
            file=sys.stderr,
        )

    outcome = publish_with_fallback(text, publisher or CommandPublisher(), now)
    return outcome.exit_code


def cli() -> int:
    try:
        return asyncio.run(main())
    except Exception:
        traceback.print_exc()
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(cli())
