"""Build the short market summary post."""

from datetime import datetime
from typing import List

from services.market_summary import MarketSnapshot

# X weights CJK characters double, so only the top 5 of each ranking is posted
POST_TOP_N = 5

TITLE = "A股 盘中速览"
TURNOVER_HEADER = "成交额Top5:"
SECTOR_HEADER = "涨幅Top5板块:"

# Code point ranges that count as 2 toward the weighted length
_DOUBLE_WEIGHT_RANGES = (
    (0x1100, 0x115F),  # Hangul Jamo
    (0x2E80, 0x303E),  # CJK radicals, punctuation
    (0x3041, 0x33FF),  # Kana, CJK symbols
    (0x3400, 0x4DBF),  # CJK Extension A
    (0x4E00, 0x9FFF),  # CJK Unified Ideographs
    (0xA000, 0xA4CF),  # Yi
    (0xAC00, 0xD7A3),  # Hangul syllables
    (0xF900, 0xFAFF),  # CJK compatibility ideographs
    (0xFE30, 0xFE4F),  # CJK compatibility forms
    (0xFF00, 0xFF60),  # Full-width forms
    (0xFFE0, 0xFFE6),
    (0x20000, 0x2FFFD),
    (0x30000, 0x3FFFD),
)


def _ranked_line(idx: int, *parts: str) -> str:
    # Empty segments are dropped so no double spaces appear
    return " ".join([f"{idx}."] + [p.strip() for p in parts if p and p.strip()])


def _turnover_line(idx: int, name: str, symbol: str, turnover: str) -> str:
    label = f"{name.strip()}({symbol.strip()})" if symbol.strip() else name
    return _ranked_line(idx, label, turnover)


def build_summary(snapshot: MarketSnapshot, now: datetime) -> str:
    """Render the post text for ``snapshot`` titled with ``now`` (minute precision)."""
    ts = now.strftime("%Y-%m-%d %H:%M")
    lines: List[str] = [f"{TITLE} ({ts})", "", TURNOVER_HEADER]
    for idx, s in enumerate(snapshot.turnover_top[:POST_TOP_N], start=1):
        lines.append(_turnover_line(idx, s.name, s.symbol, s.turnover))
    lines.append("")
    lines.append(SECTOR_HEADER)
    for idx, b in enumerate(snapshot.sector_top[:POST_TOP_N], start=1):
        lines.append(_ranked_line(idx, b.name, b.pct))
    return "\n".join(lines)


def weighted_length(text: str) -> int:
    """Length as counted by the posting channel (CJK and full-width count 2)."""
    total = 0
    for ch in text:
        cp = ord(ch)
        total += 2 if any(lo <= cp <= hi for lo, hi in _DOUBLE_WEIGHT_RANGES) else 1
    return total
