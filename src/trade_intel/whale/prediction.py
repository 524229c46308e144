"""Directional price-impact prediction from whale tiers and behaviour."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from trade_intel.whale.models import (
    ImpactDirection,
    ImpactMagnitude,
    ImpactTimeframe,
    PriceImpact,
    RiskLevel,
    WhaleAction,
    WhaleBehaviorPattern,
    WhalePrediction,
    WhaleRecommendation,
    WhaleTierAnalysis,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WhalePredictionConfig:
    strong_pressure: float = 70.0
    coordination_bonus: int = 20
    high_magnitude_bonus: int = 15
    max_confidence: int = 95
    action_confidence: int = 70
    wait_below_confidence: int = 50
    low_risk_confidence: int = 80


class WhalePredictionEngine:
    """Turn a behaviour pattern and tier analysis into a WhalePrediction.

    Rules:
        direction   bullish when accumulating with buy pressure > 70,
                    bearish when distributing with sell pressure > 70
        magnitude   high (3d) with coordination and at least one mega whale,
                    medium (24h) with either pressure > 70, else low (24h)
        confidence  min(95, score * 100 + 20 if coordinated + 15 if high)
        action      BUY / SELL on a directional read above 70 confidence,
                    WAIT below 50, else HOLD
        risk        High on High concentration or high magnitude,
                    Low above 80 confidence, else Medium
    """

    def __init__(self, *, config: WhalePredictionConfig | None = None) -> None:
        self._cfg = config or WhalePredictionConfig()

    def predict(self, behavior: WhaleBehaviorPattern, tiers: WhaleTierAnalysis) -> WhalePrediction:
        cfg = self._cfg
        pressures = behavior.patterns
        coordinated = behavior.coordinated_movements > 0

        direction: ImpactDirection = "neutral"
        if behavior.recent_activity == "accumulating" and pressures.buy_pressure > cfg.strong_pressure:
            direction = "bullish"
        elif (
            behavior.recent_activity == "distributing"
            and pressures.sell_pressure > cfg.strong_pressure
        ):
            direction = "bearish"

        magnitude: ImpactMagnitude
        timeframe: ImpactTimeframe
        if coordinated and tiers.mega_whales:
            magnitude, timeframe = "high", "3d"
        elif pressures.buy_pressure > cfg.strong_pressure or pressures.sell_pressure > cfg.strong_pressure:
            magnitude, timeframe = "medium", "24h"
        else:
            magnitude, timeframe = "low", "24h"

        raw_confidence = behavior.confidence_score * 100
        if coordinated:
            raw_confidence += cfg.coordination_bonus
        if magnitude == "high":
            raw_confidence += cfg.high_magnitude_bonus
        confidence = int(round(min(cfg.max_confidence, raw_confidence)))

        action, reasoning = self._action(behavior, tiers, direction, confidence)

        risk_level: RiskLevel
        if tiers.concentration.concentration_risk == "High" or magnitude == "high":
            risk_level = "High"
            if tiers.concentration.concentration_risk == "High":
                reasoning.append(
                    f"High concentration risk: top 10 holders control "
                    f"{tiers.concentration.top10_percentage:.1f}% of supply"
                )
        elif confidence > cfg.low_risk_confidence:
            risk_level = "Low"
        else:
            risk_level = "Medium"

        prediction = WhalePrediction(
            price_impact=PriceImpact(
                direction=direction,
                magnitude=magnitude,
                timeframe=timeframe,
                confidence=confidence,
            ),
            recommendation=WhaleRecommendation(
                action=action,
                reasoning=tuple(reasoning),
                risk_level=risk_level,
            ),
        )
        logger.debug(
            "Whale prediction: direction=%s, magnitude=%s, confidence=%d, action=%s, risk=%s",
            direction,
            magnitude,
            confidence,
            action,
            risk_level,
        )
        return prediction

    def _action(
        self,
        behavior: WhaleBehaviorPattern,
        tiers: WhaleTierAnalysis,
        direction: ImpactDirection,
        confidence: int,
    ) -> tuple[WhaleAction, list[str]]:
        cfg = self._cfg
        pressures = behavior.patterns

        if direction == "bullish" and confidence > cfg.action_confidence:
            large_holders = len(tiers.mega_whales) + len(tiers.whales)
            reasoning = [
                f"Whale accumulation across {large_holders} large holders",
                f"Buy pressure at {pressures.buy_pressure:.1f}%",
            ]
            if behavior.coordinated_movements:
                reasoning.append(
                    f"{behavior.coordinated_movements} coordinated whale movements detected"
                )
            return "BUY", reasoning
        if direction == "bearish" and confidence > cfg.action_confidence:
            return "SELL", [
                "Whale distribution detected",
                f"Sell pressure at {pressures.sell_pressure:.1f}%",
            ]
        if confidence < cfg.wait_below_confidence:
            return "WAIT", ["Insufficient whale signal for a confident call"]
        return "HOLD", []


def predict_from_whale_activity(
    behavior: WhaleBehaviorPattern,
    tiers: WhaleTierAnalysis,
    config: WhalePredictionConfig | None = None,
) -> WhalePrediction:
    """Functional entry point for :class:`WhalePredictionEngine`."""
    return WhalePredictionEngine(config=config).predict(behavior, tiers)
