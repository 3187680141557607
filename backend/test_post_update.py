import asyncio
from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

import config
import post_update
from services.market_summary import FetchError, MarketSnapshot, SectorEntry, TurnoverEntry

SHANGHAI = ZoneInfo("Asia/Shanghai")


class FakePublisher:
    def __init__(self, ok: bool):
        self.ok = ok
        self.sent = []

    def publish(self, text: str) -> bool:
        self.sent.append(text)
        return self.ok


def _real_snapshot() -> MarketSnapshot:
    return MarketSnapshot(
        turnover_top=[TurnoverEntry(symbol="600519", name="贵州茅台", turnover="12.3亿")]
        + [TurnoverEntry(symbol=f"60000{i}", name=f"股票{i}", turnover="1亿") for i in range(9)],
        sector_top=[SectorEntry(name=f"板块{i}", pct="+1%") for i in range(10)],
    )


def _fetcher(snapshot):
    async def fetch():
        return snapshot
    return fetch


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(config, "LOG_DIR", "logs")
    monkeypatch.setattr(config, "MARKET_TIMEZONE", "Asia/Shanghai")
    monkeypatch.setattr(config, "PUBLISH_PLACEHOLDER_DATA", False)
    return tmp_path


def _run(**kwargs) -> int:
    return asyncio.run(post_update.main(**kwargs))


def test_publish_failure_writes_log_and_exits_2(isolated):
    now = datetime(2024, 5, 20, 10, 30, tzinfo=SHANGHAI)
    pub = FakePublisher(ok=False)
    code = _run(now=now, fetcher=_fetcher(_real_snapshot()), publisher=pub)
    assert code == 2
    log_file = isolated / "logs" / "tweet-2024-05-20.log"
    content = log_file.read_text(encoding="utf-8")
    assert content == f"\n---\n{pub.sent[0]}\n"
    assert pub.sent[0].startswith("A股 盘中速览 (2024-05-20 10:30)")


def test_publish_success_exits_0(isolated):
    now = datetime(2024, 5, 20, 14, 0, tzinfo=SHANGHAI)
    pub = FakePublisher(ok=True)
    assert _run(now=now, fetcher=_fetcher(_real_snapshot()), publisher=pub) == 0
    assert len(pub.sent) == 1
    assert not (isolated / "logs").exists()


def test_closed_gate_does_nothing(isolated, capsys):
    called = {"fetch": False}

    async def fetch():
        called["fetch"] = True
        return _real_snapshot()

    pub = FakePublisher(ok=False)
    code = _run(now=datetime(2024, 5, 20, 12, 0, tzinfo=SHANGHAI), fetcher=fetch, publisher=pub)
    assert code == 0
    assert called["fetch"] is False
    assert pub.sent == []
    assert not (isolated / "logs").exists()
    out = capsys.readouterr()
    assert out.out == "" and out.err == ""


def test_aware_utc_time_is_gated_and_titled_in_market_time(isolated):
    # 02:30 UTC == 10:30 Shanghai
    now = datetime(2024, 5, 20, 2, 30, tzinfo=ZoneInfo("UTC"))
    pub = FakePublisher(ok=True)
    assert _run(now=now, fetcher=_fetcher(_real_snapshot()), publisher=pub) == 0
    assert pub.sent[0].startswith("A股 盘中速览 (2024-05-20 10:30)")


def test_placeholder_data_is_not_posted_by_default(isolated, capsys):
    snap = MarketSnapshot(
        turnover_top=[TurnoverEntry(symbol="STUB1", name="StubStock1", turnover="-")],
        note="Xueqiu MCP not configured",
        placeholder=True,
    )
    pub = FakePublisher(ok=True)
    code = _run(now=datetime(2024, 5, 20, 10, 0, tzinfo=SHANGHAI), fetcher=_fetcher(snap), publisher=pub)
    assert code == 0
    assert pub.sent == []
    assert "Xueqiu MCP not configured" in capsys.readouterr().err


def test_placeholder_data_posted_when_enabled(isolated, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(config, "PUBLISH_PLACEHOLDER_DATA", True)
    monkeypatch.setattr(config, "MARKET_DATA_URL", None)
    pub = FakePublisher(ok=True)
    assert _run(now=datetime(2024, 5, 20, 10, 0, tzinfo=SHANGHAI), publisher=pub) == 0
    assert "1. StubStock1(STUB1) -" in pub.sent[0].split("\n")


def test_empty_snapshot_is_skipped(isolated):
    pub = FakePublisher(ok=True)
    code = _run(now=datetime(2024, 5, 20, 10, 0, tzinfo=SHANGHAI), fetcher=_fetcher(MarketSnapshot()), publisher=pub)
    assert code == 0
    assert pub.sent == []


def test_fetch_error_exits_1(isolated, capsys):
    async def fetch():
        raise FetchError("HTTP 401", kind="auth")

    pub = FakePublisher(ok=True)
    code = _run(now=datetime(2024, 5, 20, 10, 0, tzinfo=SHANGHAI), fetcher=fetch, publisher=pub)
    assert code == 1
    assert pub.sent == []
    assert "auth" in capsys.readouterr().err


def test_overlong_post_warns_but_still_posts(isolated, monkeypatch: pytest.MonkeyPatch, capsys):
    monkeypatch.setattr(config, "TWEET_MAX_WEIGHTED_LENGTH", 10)
    pub = FakePublisher(ok=True)
    assert _run(now=datetime(2024, 5, 20, 10, 0, tzinfo=SHANGHAI), fetcher=_fetcher(_real_snapshot()), publisher=pub) == 0
    assert len(pub.sent) == 1
    assert "weighted length" in capsys.readouterr().err


def test_cli_maps_unexpected_errors_to_1(monkeypatch: pytest.MonkeyPatch, capsys):
    async def boom():
        raise OSError("cannot create logs")

    monkeypatch.setattr(post_update, "main", boom)
    assert post_update.cli() == 1
    assert "cannot create logs" in capsys.readouterr().err


def test_cli_returns_main_exit_code(monkeypatch: pytest.MonkeyPatch):
    async def ok():
        return 2

    monkeypatch.setattr(post_update, "main", ok)
    assert post_update.cli() == 2


def test_cli_exits_1_when_fallback_log_cannot_be_written(isolated, monkeypatch: pytest.MonkeyPatch, capsys):
    # LOG_DIR points at a regular file, so the log directory cannot be created
    blocker = isolated / "not-a-dir"
    blocker.write_text("x", encoding="utf-8")
    monkeypatch.setattr(config, "LOG_DIR", str(blocker))
    monkeypatch.setattr(config, "MARKET_DATA_URL", None)
    monkeypatch.setattr(config, "PUBLISH_PLACEHOLDER_DATA", True)
    monkeypatch.setattr(config, "POST_COMMAND", "ashare-snowball-no-such-tool")
    monkeypatch.setattr("post_update.market_now", lambda: datetime(2024, 5, 20, 10, 0, tzinfo=SHANGHAI))

    assert post_update.cli() == 1
    assert blocker.read_text(encoding="utf-8") == "x"
    err = capsys.readouterr().err
    assert "ashare-snowball-no-such-tool not found" in err
    assert "Error" in err
