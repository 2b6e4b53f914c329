"""Tests for the HTTP API"""

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from stockadvisor.main import app


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


def series_payload(closes, symbol="TEST"):
    start = datetime(2024, 1, 1)
    return {
        "symbol": symbol,
        "exchange": "NSE",
        "points": [
            {
                "date": (start + timedelta(days=i)).isoformat(),
                "open": close,
                "high": close + 1,
                "low": close - 1,
                "close": close,
                "volume": 100000,
            }
            for i, close in enumerate(closes)
        ],
    }


RISING = [100.0 + i for i in range(60)]


class TestApp:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_root(self, client):
        assert client.get("/").json()["docs"] == "/docs"


class TestAnalysisEndpoints:
    """Test /api/v1/analysis"""

    def test_technical(self, client):
        response = client.post("/api/v1/analysis/technical", json=series_payload(RISING))

        assert response.status_code == 200
        data = response.json()
        assert data["symbol"] == "TEST"
        assert data["data_points"] == 60
        assert data["indicators"]["rsi"]["signal"] in ("bullish", "overbought")
        assert data["indicators"]["moving_averages"]["sma200"]["signal"] == "insufficient_data"
        assert 0 <= data["signals"]["strength"] <= 100

    def test_signals(self, client):
        response = client.post("/api/v1/analysis/signals", json=series_payload(RISING[:10]))

        assert response.status_code == 200
        data = response.json()
        assert data["overall"] == "neutral"
        assert data["total_signals"] == 0

    def test_single_indicator(self, client):
        closes = [float(c) for c in range(10, 30)]

        response = client.post(
            "/api/v1/analysis/indicators/sma", params={"period": 20}, json=series_payload(closes)
        )
        assert response.status_code == 200
        result = response.json()["result"]
        assert result["signal"] == "bullish"
        assert result["current"] == 19.5

    def test_single_indicator_macd(self, client):
        response = client.post("/api/v1/analysis/indicators/macd", json=series_payload(RISING))

        assert response.status_code == 200
        assert response.json()["indicator"] == "macd"

    def test_unknown_indicator(self, client):
        response = client.post("/api/v1/analysis/indicators/vwap", json=series_payload(RISING))
        assert response.status_code == 422

    def test_descending_dates_rejected(self, client):
        payload = series_payload(RISING[:5])
        payload["points"].reverse()

        response = client.post("/api/v1/analysis/technical", json=payload)
        assert response.status_code == 422

    def test_high_below_low_rejected(self, client):
        payload = series_payload(RISING[:5])
        payload["points"][2]["high"] = 50.0

        response = client.post("/api/v1/analysis/technical", json=payload)
        assert response.status_code == 422

    def test_non_positive_price_rejected(self, client):
        payload = series_payload(RISING[:5])
        payload["points"][0]["close"] = 0

        response = client.post("/api/v1/analysis/technical", json=payload)
        assert response.status_code == 422


class TestRecommendationEndpoints:
    """Test /api/v1/recommendations"""

    def test_weights(self, client):
        response = client.get("/api/v1/recommendations/weights")

        assert response.status_code == 200
        data = response.json()
        assert set(data) == {"daily", "weekly", "monthly", "yearly"}
        assert data["daily"]["technical"] == 0.6

    def test_analyze(self, client):
        body = {
            "symbol": "TCS",
            "series": series_payload(RISING, "TCS"),
            "fundamentals": {"composite_score": 80},
            "sentiment": {"sentiment": "positive", "score": 70, "news_count": 3},
        }

        response = client.post("/api/v1/recommendations/analyze/monthly", json=body)
        assert response.status_code == 200
        data = response.json()
        assert data["symbol"] == "TCS"
        assert data["time_horizon"] == "monthly"
        assert data["action"] in ("strong_buy", "buy", "hold", "sell", "strong_sell")
        assert data["effective_weight"] == 1.0

    def test_analyze_unknown_horizon(self, client):
        body = {"symbol": "TCS", "series": series_payload(RISING, "TCS")}

        response = client.post("/api/v1/recommendations/analyze/hourly", json=body)
        assert response.status_code == 422

    def test_batch(self, client):
        body = {
            "requests": [
                {"symbol": symbol, "series": series_payload(RISING, symbol)}
                for symbol in ("TCS", "INFY")
            ],
            "limit": 5,
        }

        response = client.post("/api/v1/recommendations/weekly", json=body)
        assert response.status_code == 200
        data = response.json()
        assert data["period"] == "1 week"
        assert data["total_analyzed"] == 2
        confidences = [rec["confidence"] for rec in data["recommendations"]]
        assert confidences == sorted(confidences, reverse=True)

    def test_batch_requires_requests(self, client):
        response = client.post("/api/v1/recommendations/weekly", json={"requests": []})
        assert response.status_code == 422

    def test_all(self, client):
        body = {"requests": [{"symbol": "TCS", "series": series_payload(RISING, "TCS")}]}

        response = client.post("/api/v1/recommendations/all", json=body)
        assert response.status_code == 200
        data = response.json()
        assert data["errors"] == {}
        assert data["yearly"]["time_horizon"] == "yearly"

    def test_stock_of_the_month_without_fundamentals(self, client):
        body = {"requests": [{"symbol": "TCS", "series": series_payload(RISING, "TCS")}]}

        response = client.post("/api/v1/recommendations/stock-of-the-month", json=body)
        assert response.status_code == 404
