"""Tests for whale-driven price-impact prediction."""

from trade_intel.whale.models import (
    ConcentrationStats,
    PressureMetrics,
    WhaleActivity,
    WhaleBehaviorPattern,
    WhaleHolder,
    WhaleTierAnalysis,
)
from trade_intel.whale.prediction import WhalePredictionConfig, predict_from_whale_activity


def make_behavior(
    activity: WhaleActivity,
    *,
    buy: float = 50.0,
    sell: float = 50.0,
    score: float = 0.5,
    coordinated: int = 0,
) -> WhaleBehaviorPattern:
    return WhaleBehaviorPattern(
        recent_activity=activity,
        coordinated_movements=coordinated,
        average_hold_time="",
        historical_accuracy=70.0,
        confidence_score=score,
        patterns=PressureMetrics(buy_pressure=buy, sell_pressure=sell, hodl_strength=60.0),
    )


def make_tiers(*, mega: int = 0, whales: int = 0, risk: str = "Low", top10: float = 30.0) -> WhaleTierAnalysis:
    def holders(count: int, tier: str) -> tuple[WhaleHolder, ...]:
        return tuple(
            WhaleHolder(address=f"0x{tier}{i}", balance="1", balance_formatted="1", percentage=1.0, tier=tier)  # type: ignore[arg-type]
            for i in range(count)
        )

    return WhaleTierAnalysis(
        mega_whales=holders(mega, "mega"),
        whales=holders(whales, "whale"),
        total_holders=mega + whales,
        concentration=ConcentrationStats(top10_percentage=top10, concentration_risk=risk),  # type: ignore[arg-type]
    )


class TestPredictFromWhaleActivity:
    def test_coordinated_accumulation_with_mega_whale(self) -> None:
        prediction = predict_from_whale_activity(
            make_behavior("accumulating", buy=90.0, sell=10.0, score=0.6, coordinated=2),
            make_tiers(mega=1, whales=1),
        )

        impact = prediction.price_impact
        assert impact.direction == "bullish"
        assert impact.magnitude == "high"
        assert impact.timeframe == "3d"
        assert impact.confidence == 95
        assert prediction.recommendation.action == "BUY"
        assert prediction.recommendation.reasoning == (
            "Whale accumulation across 2 large holders",
            "Buy pressure at 90.0%",
            "2 coordinated whale movements detected",
        )
        assert prediction.recommendation.risk_level == "High"

    def test_distribution_sells(self) -> None:
        prediction = predict_from_whale_activity(
            make_behavior("distributing", buy=15.0, sell=85.0, score=0.8),
            make_tiers(),
        )

        assert prediction.price_impact.direction == "bearish"
        assert prediction.price_impact.magnitude == "medium"
        assert prediction.price_impact.timeframe == "24h"
        assert prediction.price_impact.confidence == 80
        assert prediction.recommendation.action == "SELL"
        assert prediction.recommendation.reasoning == ("Whale distribution detected", "Sell pressure at 85.0%")
        assert prediction.recommendation.risk_level == "Medium"

    def test_weak_signal_waits(self) -> None:
        prediction = predict_from_whale_activity(make_behavior("holding", score=0.3), make_tiers())

        assert prediction.price_impact.direction == "neutral"
        assert prediction.price_impact.magnitude == "low"
        assert prediction.price_impact.confidence == 30
        assert prediction.recommendation.action == "WAIT"
        assert prediction.recommendation.reasoning == ("Insufficient whale signal for a confident call",)

    def test_moderate_signal_holds(self) -> None:
        prediction = predict_from_whale_activity(make_behavior("mixed", score=0.6), make_tiers())

        assert prediction.recommendation.action == "HOLD"
        assert prediction.recommendation.reasoning == ()

    def test_bullish_below_action_confidence_holds(self) -> None:
        prediction = predict_from_whale_activity(
            make_behavior("accumulating", buy=90.0, sell=10.0, score=0.6),
            make_tiers(),
        )

        assert prediction.price_impact.direction == "bullish"
        assert prediction.recommendation.action == "HOLD"

    def test_accumulation_without_strong_pressure_is_neutral(self) -> None:
        prediction = predict_from_whale_activity(
            make_behavior("accumulating", buy=65.0, sell=35.0, score=0.9),
            make_tiers(),
        )

        assert prediction.price_impact.direction == "neutral"
        assert prediction.price_impact.magnitude == "low"
        assert prediction.recommendation.action == "HOLD"

    def test_high_confidence_is_low_risk(self) -> None:
        prediction = predict_from_whale_activity(
            make_behavior("accumulating", buy=80.0, sell=20.0, score=0.9),
            make_tiers(whales=3),
        )

        assert prediction.recommendation.action == "BUY"
        assert prediction.recommendation.risk_level == "Low"

    def test_high_concentration_is_high_risk(self) -> None:
        prediction = predict_from_whale_activity(
            make_behavior("mixed", score=0.9),
            make_tiers(risk="High", top10=85.0),
        )

        assert prediction.recommendation.risk_level == "High"
        assert prediction.recommendation.reasoning[-1] == (
            "High concentration risk: top 10 holders control 85.0% of supply"
        )

    def test_coordination_without_mega_whale_adds_bonus_only(self) -> None:
        prediction = predict_from_whale_activity(
            make_behavior("mixed", score=0.4, coordinated=1),
            make_tiers(whales=2),
        )

        assert prediction.price_impact.magnitude == "low"
        assert prediction.price_impact.confidence == 60

    def test_custom_config(self) -> None:
        config = WhalePredictionConfig(action_confidence=50)
        prediction = predict_from_whale_activity(
            make_behavior("accumulating", buy=90.0, sell=10.0, score=0.6),
            make_tiers(),
            config,
        )

        assert prediction.recommendation.action == "BUY"
