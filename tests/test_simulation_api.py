from datetime import date, timedelta

import pytest

from models.quotes_daily import GoldPrediction, QuotesDaily
from services.simulation_dashboard_service import resolve_range


@pytest.fixture
def quotes(db):
    start = date(2024, 9, 1)
    for offset in range(30):
        day = start + timedelta(days=offset)
        db.add(QuotesDaily(date=day, krw_g_close=100000.0 + offset, fx_rate=1330.0, vix=15.0, etf_volume=1000.0))
    db.add(GoldPrediction(date=date(2024, 9, 30), pred_close=101000.0))
    db.commit()


def test_resolve_range():
    to = date(2024, 10, 1)
    assert resolve_range(to, "1w") == (date(2024, 9, 25), to)
    assert resolve_range(to, "unknown") == (to - timedelta(days=364), to)
    assert resolve_range(to, "1w", date(2024, 1, 1)) == (date(2024, 1, 1), to)


def test_quotes_by_unit_ascending(client, quotes):
    response = client.get("/api/simulation/quotes", params={"to": "2024-09-30", "unit": "1w"})
    assert response.status_code == 200
    rows = response.json()
    assert [r["date"] for r in rows] == [f"2024-09-{d:02d}" for d in range(24, 31)]
    assert rows[-1]["gold_close"] == 100029.0
    assert rows[-1]["pred_close"] == 101000.0
    assert rows[0]["pred_close"] is None


def test_quotes_explicit_from(client, quotes):
    response = client.get("/api/simulation/quotes", params={"from": "2024-09-10", "to": "2024-09-12"})
    assert [r["date"] for r in response.json()] == ["2024-09-10", "2024-09-11", "2024-09-12"]


def test_quotes_default_unit_covers_everything(client, quotes):
    response = client.get("/api/simulation/quotes", params={"to": "2024-10-01"})
    assert len(response.json()) == 30


def test_quotes_from_after_to_is_400(client, quotes):
    response = client.get("/api/simulation/quotes", params={"from": "2024-09-12", "to": "2024-09-10"})
    assert response.status_code == 400


def test_quotes_requires_to(client):
    assert client.get("/api/simulation/quotes").status_code == 422
