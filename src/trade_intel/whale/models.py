"""Data models for the whale intelligence module."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Literal

WhaleTier = Literal["mega", "whale", "dolphin", "fish"]
ConcentrationRisk = Literal["Low", "Medium", "High"]
WhaleActivity = Literal["accumulating", "distributing", "holding", "mixed"]
ImpactDirection = Literal["bullish", "bearish", "neutral"]
ImpactMagnitude = Literal["low", "medium", "high"]
ImpactTimeframe = Literal["24h", "3d", "7d"]
WhaleAction = Literal["BUY", "SELL", "HOLD", "WAIT"]
RiskLevel = Literal["Low", "Medium", "High"]


@dataclass(frozen=True)
class WhaleHolder:
    """A classified holder.

    Attributes:
        address: Holder address as supplied.
        balance: Raw balance, as a decimal string.
        balance_formatted: Effective (formatted) balance, as a decimal string.
        percentage: Share of the observed supply, in percent.
        tier: Size bucket.
        is_exchange: True if the address is a known exchange.
        label: Exchange name, or the tier display name.
    """

    address: str
    balance: str
    balance_formatted: str
    percentage: float
    tier: WhaleTier
    is_exchange: bool = False
    label: str = ""

    def to_dict(self) -> dict[str, object]:
        return {
            "address": self.address,
            "balance": self.balance,
            "balance_formatted": self.balance_formatted,
            "percentage": self.percentage,
            "tier": self.tier,
            "is_exchange": self.is_exchange,
            "label": self.label,
        }


@dataclass(frozen=True)
class ConcentrationStats:
    """Supply concentration figures for a holder snapshot."""

    top10_percentage: float = 0.0
    top50_percentage: float = 0.0
    gini_coefficient: float = 0.0
    concentration_risk: ConcentrationRisk = "Low"

    def to_dict(self) -> dict[str, object]:
        return {
            "top10_percentage": self.top10_percentage,
            "top50_percentage": self.top50_percentage,
            "gini_coefficient": self.gini_coefficient,
            "concentration_risk": self.concentration_risk,
        }


@dataclass(frozen=True)
class WhaleTierAnalysis:
    """Holders partitioned by tier plus concentration statistics.

    Fish are excluded from the exposed lists but counted in ``total_holders``.
    """

    mega_whales: tuple[WhaleHolder, ...] = ()
    whales: tuple[WhaleHolder, ...] = ()
    dolphins: tuple[WhaleHolder, ...] = ()
    total_holders: int = 0
    concentration: ConcentrationStats = field(default_factory=ConcentrationStats)

    @property
    def fish_count(self) -> int:
        return self.total_holders - len(self.mega_whales) - len(self.whales) - len(self.dolphins)

    def to_dict(self) -> dict[str, object]:
        return {
            "mega_whales": [h.to_dict() for h in self.mega_whales],
            "whales": [h.to_dict() for h in self.whales],
            "dolphins": [h.to_dict() for h in self.dolphins],
            "total_holders": self.total_holders,
            "concentration": self.concentration.to_dict(),
        }


@dataclass(frozen=True)
class PressureMetrics:
    """Buy/sell/hodl percentages, each in [0, 100]."""

    buy_pressure: float = 50.0
    sell_pressure: float = 50.0
    hodl_strength: float = 60.0

    def to_dict(self) -> dict[str, object]:
        return {
            "buy_pressure": self.buy_pressure,
            "sell_pressure": self.sell_pressure,
            "hodl_strength": self.hodl_strength,
        }


@dataclass(frozen=True)
class WhaleBehaviorPattern:
    """Behavioural fingerprint of whale transfers in the recent window."""

    recent_activity: WhaleActivity
    coordinated_movements: int
    average_hold_time: str
    historical_accuracy: float
    confidence_score: float
    patterns: PressureMetrics

    def to_dict(self) -> dict[str, object]:
        return {
            "recent_activity": self.recent_activity,
            "coordinated_movements": self.coordinated_movements,
            "average_hold_time": self.average_hold_time,
            "historical_accuracy": self.historical_accuracy,
            "confidence_score": self.confidence_score,
            "patterns": self.patterns.to_dict(),
        }


@dataclass(frozen=True)
class PriceImpact:
    direction: ImpactDirection
    magnitude: ImpactMagnitude
    timeframe: ImpactTimeframe
    confidence: int

    def to_dict(self) -> dict[str, object]:
        return {
            "direction": self.direction,
            "magnitude": self.magnitude,
            "timeframe": self.timeframe,
            "confidence": self.confidence,
        }


@dataclass(frozen=True)
class WhaleRecommendation:
    action: WhaleAction
    reasoning: tuple[str, ...]
    risk_level: RiskLevel

    def to_dict(self) -> dict[str, object]:
        return {
            "action": self.action,
            "reasoning": list(self.reasoning),
            "risk_level": self.risk_level,
        }


@dataclass(frozen=True)
class WhalePrediction:
    """Directional price-impact forecast and the derived action."""

    price_impact: PriceImpact
    recommendation: WhaleRecommendation

    def to_dict(self) -> dict[str, object]:
        return {
            "price_impact": self.price_impact.to_dict(),
            "recommendation": self.recommendation.to_dict(),
        }


@dataclass(frozen=True)
class EnhancedWhaleIntelligence:
    """Tiers, behaviour and prediction for one token snapshot."""

    symbol: str
    tiers: WhaleTierAnalysis
    behavior: WhaleBehaviorPattern
    predictions: WhalePrediction
    last_updated: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict[str, object]:
        return {
            "symbol": self.symbol,
            "tiers": self.tiers.to_dict(),
            "behavior": self.behavior.to_dict(),
            "predictions": self.predictions.to_dict(),
            "last_updated": self.last_updated.isoformat(),
        }
