"""Tests for the recommendation service"""

import asyncio
from datetime import timedelta

import pytest

from stockadvisor.schemas.market import NewsSentiment
from stockadvisor.schemas.recommendation import (
    FundamentalSnapshot,
    RecommendationAction,
    RecommendationRequest,
    SentimentSnapshot,
    TimeHorizon,
)
from stockadvisor.services.base import NoRecommendationError
from stockadvisor.services.indicators import IndicatorService
from stockadvisor.services.recommendation import (
    RecommendationInput,
    RecommendationScorer,
    RecommendationService,
)

STRONG_FUNDAMENTALS = FundamentalSnapshot(composite_score=100, momentum_score=100)
WEAK_FUNDAMENTALS = FundamentalSnapshot(composite_score=0, momentum_score=0)
GOOD_NEWS = SentimentSnapshot(sentiment=NewsSentiment.POSITIVE, score=100)
BAD_NEWS = SentimentSnapshot(sentiment=NewsSentiment.NEGATIVE, score=0)


class FixedTechnicalScorer(RecommendationScorer):
    """Scorer with a technical score chosen per symbol."""

    def __init__(self, technical: dict[str, int]):
        super().__init__()
        self.technical = technical

    def technical_score(self, analysis, horizon):
        return self.technical[analysis.symbol]


class FailingIndicatorService(IndicatorService):
    """Raises for one symbol."""

    def __init__(self, failing_symbol: str):
        super().__init__()
        self.failing_symbol = failing_symbol

    def analyze(self, series, symbol=None):
        if symbol == self.failing_symbol:
            raise RuntimeError("bad data")
        return super().analyze(series, symbol)


@pytest.fixture
def request_factory(rising_series):
    def make(symbol, fundamentals=None, sentiment=None, series=None):
        return RecommendationRequest(
            symbol=symbol,
            series=series or rising_series,
            fundamentals=fundamentals,
            sentiment=sentiment,
        )

    return make


@pytest.fixture
def fixed_service():
    def make(technical, indicator_service=None):
        return RecommendationService(
            indicator_service=indicator_service, scorer=FixedTechnicalScorer(technical)
        )

    return make


class TestAnalyzeSymbol:
    """Test single-symbol scoring"""

    def test_analyze_symbol(self, request_factory):
        service = RecommendationService()

        rec = service.analyze_symbol(request_factory("RELIANCE"), TimeHorizon.WEEKLY)
        assert rec.symbol == "RELIANCE"
        assert rec.time_horizon == TimeHorizon.WEEKLY
        assert 0 <= rec.confidence <= 100
        assert rec.current_price == 159.0
        assert rec.effective_weight == 0.5

    def test_execute(self, request_factory):
        service = RecommendationService()
        input_data = RecommendationInput(
            request=request_factory("TCS", STRONG_FUNDAMENTALS, GOOD_NEWS),
            time_horizon=TimeHorizon.YEARLY,
        )

        rec = asyncio.run(service.execute(input_data))
        assert rec.time_horizon == TimeHorizon.YEARLY
        assert rec.effective_weight == 1.0

    def test_short_series_still_scores(self, request_factory, short_series):
        service = RecommendationService()

        rec = service.analyze_symbol(request_factory("SHORT", series=short_series), TimeHorizon.DAILY)
        assert 0 <= rec.confidence <= 100


class TestGenerate:
    """Test batch ranking"""

    def test_sorted_by_confidence(self, fixed_service, request_factory):
        service = fixed_service({"AAA": 40, "BBB": 100, "CCC": 70})
        requests = [request_factory(symbol) for symbol in ("AAA", "BBB", "CCC")]

        batch = asyncio.run(service.generate(requests, TimeHorizon.WEEKLY))
        symbols = [rec.symbol for rec in batch.recommendations]
        assert symbols == ["BBB", "CCC", "AAA"]
        confidences = [rec.confidence for rec in batch.recommendations]
        assert confidences == sorted(confidences, reverse=True)
        assert batch.period == "1 week"
        assert batch.total_analyzed == 3

    def test_limit(self, fixed_service, request_factory):
        service = fixed_service({"AAA": 40, "BBB": 100, "CCC": 70})
        requests = [request_factory(symbol) for symbol in ("AAA", "BBB", "CCC")]

        batch = asyncio.run(service.generate(requests, TimeHorizon.WEEKLY, limit=2))
        assert [rec.symbol for rec in batch.recommendations] == ["BBB", "CCC"]
        assert batch.successful_analyses == 3

    def test_low_confidence_dropped(self, fixed_service, request_factory):
        service = fixed_service({"LOW": 10, "OK": 60})
        requests = [
            request_factory("LOW", WEAK_FUNDAMENTALS, BAD_NEWS),
            request_factory("OK"),
        ]

        batch = asyncio.run(service.generate(requests, TimeHorizon.WEEKLY))
        assert [rec.symbol for rec in batch.recommendations] == ["OK"]
        assert batch.successful_analyses == 1

    def test_failures_dropped(self, fixed_service, request_factory):
        service = fixed_service({"GOOD": 60}, indicator_service=FailingIndicatorService("BAD"))
        requests = [request_factory("BAD"), request_factory("GOOD")]

        batch = asyncio.run(service.generate(requests, TimeHorizon.DAILY))
        assert [rec.symbol for rec in batch.recommendations] == ["GOOD"]
        assert batch.total_analyzed == 2

    def test_generate_all(self, fixed_service, request_factory):
        service = fixed_service({"AAA": 60})

        result = asyncio.run(service.generate_all([request_factory("AAA")]))
        assert result.errors == {}
        assert result.daily.period == "1 day"
        assert result.yearly.period == "1+ years"
        assert result.monthly.recommendations[0].time_horizon == TimeHorizon.MONTHLY


class TestStockPicks:
    """Test stock of the week/month"""

    def test_stock_of_the_week(self, fixed_service, request_factory):
        service = fixed_service({"BEST": 100, "GOOD": 80, "MEH": 50})
        requests = [
            request_factory("GOOD", STRONG_FUNDAMENTALS, GOOD_NEWS),
            request_factory("BEST", STRONG_FUNDAMENTALS, GOOD_NEWS),
            request_factory("MEH"),
        ]

        pick = asyncio.run(service.stock_of_the_week(requests))
        assert pick.recommendation.symbol == "BEST"
        assert pick.recommendation.action == RecommendationAction.STRONG_BUY
        assert pick.prediction_type == "stock_of_the_week"
        assert pick.valid_until - pick.valid_from == timedelta(days=7)
        assert pick.total_analyzed == 3
        assert "Ideal for swing trading with 1-week holding period" in pick.key_highlights
        assert len(pick.key_highlights) <= 5
        assert pick.trading_strategy.position_sizing is not None
        assert pick.trading_strategy.exit_strategy.startswith("Target: ₹")

    def test_stock_of_the_week_without_buys(self, fixed_service, request_factory):
        service = fixed_service({"MEH": 50})

        with pytest.raises(NoRecommendationError):
            asyncio.run(service.stock_of_the_week([request_factory("MEH")]))

    def test_stock_of_the_month_prefers_fundamentals(self, fixed_service, request_factory):
        service = fixed_service({"FUND": 100, "TECH": 100})
        requests = [
            request_factory("TECH", FundamentalSnapshot(composite_score=60), GOOD_NEWS),
            request_factory("FUND", STRONG_FUNDAMENTALS, GOOD_NEWS),
        ]

        pick = asyncio.run(service.stock_of_the_month(requests))
        assert pick.recommendation.symbol == "FUND"
        assert pick.prediction_type == "stock_of_the_month"
        assert pick.valid_until - pick.valid_from == timedelta(days=30)

    def test_stock_of_the_month_needs_fundamentals(self, fixed_service, request_factory):
        service = fixed_service({"TECH": 100})
        requests = [request_factory("TECH", sentiment=GOOD_NEWS)]

        with pytest.raises(NoRecommendationError):
            asyncio.run(service.stock_of_the_month(requests))
