"""Shared fixtures for the test suite."""

import datetime
import pytest
from unittest.mock import MagicMock


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime.datetime):
        self.now = now

    def __call__(self) -> datetime.datetime:
        return self.now

    def advance(self, **kwargs):
        self.now += datetime.timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock(datetime.datetime(2025, 1, 15, 9, 0, 0))


@pytest.fixture
def mock_response():
    """Factory for mock HTTP responses."""
    def _make(status_code=200, json_data=None, text=""):
        resp = MagicMock()
        resp.status_code = status_code
        resp.json.return_value = json_data or {}
        resp.text = text
        # truthy when status_code is 2xx, like requests.Response
        resp.__bool__ = lambda self: 200 <= self.status_code < 300
        return resp
    return _make


@pytest.fixture
def sample_listed_info():
    """Raw /listed/info items across two markets."""
    return [
        {
            "Code": "72030",
            "CompanyName": "トヨタ自動車",
            "CompanyNameEnglish": "TOYOTA MOTOR CORPORATION",
            "Sector17CodeName": "自動車・輸送機",
            "Sector33CodeName": "輸送用機器",
            "MarketCode": "0111",
            "MarketCodeName": "プライム",
        },
        {
            "Code": "67580",
            "CompanyName": "ソニーグループ",
            "CompanyNameEnglish": "Sony Group Corporation",
            "Sector17CodeName": "電機・精密",
            "Sector33CodeName": "電気機器",
            "MarketCode": "0111",
            "MarketCodeName": "プライム",
        },
        {
            "Code": "13010",
            "CompanyName": "極洋",
            "CompanyNameEnglish": "KYOKUYO CO.,LTD.",
            "Sector17CodeName": "食品",
            "Sector33CodeName": "水産・農林業",
            "MarketCode": "0112",
            "MarketCodeName": "スタンダード",
        },
    ]


@pytest.fixture
def sample_daily_quotes():
    """Raw /prices/daily_quotes items for 2025-01-15."""
    return [
        {
            "Code": "72030",
            "Date": "2025-01-15",
            "Close": 2900.0,
            "AdjustmentClose": 2900.0,
            "Volume": 25000000.0,
            "TurnoverValue": 72500000000.0,
            "EarningsPerShare": 290.0,
            "BookValuePerShare": 2900.0,
        },
        {
            "Code": "67580",
            "Date": "2025-01-15",
            "Close": None,
            "AdjustmentClose": 3300.0,
            "Volume": 0.0,
            "TurnoverValue": 0.0,
        },
    ]
