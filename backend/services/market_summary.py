"""Market summary fetching: turnover leaders and top sectors by % change.

Without a configured data source this returns placeholder rows flagged as
such, so the runner can decide whether they are worth posting.
"""

import asyncio
from typing import Any, List, Optional

import requests
from pydantic import BaseModel, ConfigDict

import config
from utils import _clean_text

# Rankings are fetched as top 10 even though the post only shows top 5
RANKING_SIZE = 10


class TurnoverEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    symbol: str = ""
    name: str = ""
    turnover: str = ""


class SectorEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = ""
    pct: str = ""


class MarketSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    turnover_top: List[TurnoverEntry] = []
    sector_top: List[SectorEntry] = []
    note: Optional[str] = None
    placeholder: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.turnover_top and not self.sector_top


class FetchError(Exception):
    """Data source could not be reached or refused our credentials.

    ``kind`` is ``"transport"`` or ``"auth"``. An empty ranking is not an
    error; it comes back as an empty snapshot.
    """

    def __init__(self, message: str, kind: str = "transport"):
        super().__init__(message)
        self.kind = kind


def _placeholder_snapshot() -> MarketSnapshot:
    note = config.XUEQIU_MCP_NOTE
    return MarketSnapshot(
        turnover_top=[
            TurnoverEntry(symbol=f"STUB{i + 1}", name=f"StubStock{i + 1}", turnover="-")
            for i in range(RANKING_SIZE)
        ],
        sector_top=[
            SectorEntry(name=f"StubSector{i + 1}", pct="-")
            for i in range(RANKING_SIZE)
        ],
        note=note,
        placeholder=True,
    )


def _rows(payload: dict, *keys: str) -> List[dict]:
    for key in keys:
        value = payload.get(key)
        if isinstance(value, list):
            return [row for row in value if isinstance(row, dict)][:RANKING_SIZE]
    return []


def _parse_snapshot(payload: Any) -> MarketSnapshot:
    if not isinstance(payload, dict):
        raise FetchError(f"Unexpected market data payload type: {type(payload).__name__}")
    turnover = [
        TurnoverEntry(
            symbol=_clean_text(row.get("symbol")),
            name=_clean_text(row.get("name")),
            turnover=_clean_text(row.get("turnover")),
        )
        for row in _rows(payload, "turnover_top", "turnoverTop10")
    ]
    sectors = [
        SectorEntry(name=_clean_text(row.get("name")), pct=_clean_text(row.get("pct")))
        for row in _rows(payload, "sector_top", "sectorTop10")
    ]
    note = _clean_text(payload.get("note")) or None
    return MarketSnapshot(turnover_top=turnover, sector_top=sectors, note=note)


def _fetch_snapshot_http(url: str) -> MarketSnapshot:
    """GET a JSON market summary from ``url``."""
    headers = {"Accept": "application/json"}
    if config.MARKET_DATA_TOKEN:
        headers["Authorization"] = f"Bearer {config.MARKET_DATA_TOKEN}"
    try:
        resp = requests.get(url, headers=headers, timeout=config.MARKET_DATA_TIMEOUT_SECONDS)
    except requests.exceptions.Timeout as e:
        raise FetchError(f"Market data request timed out: {url}") from e
    except requests.exceptions.RequestException as e:
        raise FetchError(f"Market data request failed: {type(e).__name__}: {e}") from e

    if resp.status_code in (401, 403):
        raise FetchError(f"Market data source rejected credentials (HTTP {resp.status_code})", kind="auth")
    if not 200 <= resp.status_code < 300:
        raise FetchError(f"Market data source returned HTTP {resp.status_code}")
    if resp.status_code == 204 or not resp.content:
        return MarketSnapshot()
    try:
        payload = resp.json()
    except ValueError as e:
        raise FetchError("Market data source returned invalid JSON") from e
    return _parse_snapshot(payload)


async def fetch_market_snapshot() -> MarketSnapshot:
    """Return the current market snapshot.

    Raises FetchError on transport or auth failures of a configured source.
    """
    url = config.MARKET_DATA_URL
    if not url:
        return _placeholder_snapshot()
    return await asyncio.to_thread(_fetch_snapshot_http, url)
