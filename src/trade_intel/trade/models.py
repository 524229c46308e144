"""Data models for the trade scoring module."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Recommendation(str, Enum):
    """Trade verdict, ordered from most bullish to most bearish."""

    STRONG_BUY = "STRONG_BUY"
    BUY = "BUY"
    HOLD = "HOLD"
    AVOID = "AVOID"
    STRONG_AVOID = "STRONG_AVOID"

    @property
    def rank(self) -> int:
        """Position on the ladder (0 = STRONG_BUY)."""
        return _LADDER.index(self)

    def downgrade(self, steps: int = 1) -> Recommendation:
        """Move towards STRONG_AVOID, saturating at the bottom."""
        return _LADDER[min(len(_LADDER) - 1, self.rank + max(0, steps))]

    def upgrade(self, steps: int = 1) -> Recommendation:
        """Move towards STRONG_BUY, saturating at the top."""
        return _LADDER[max(0, self.rank - max(0, steps))]

    def step(self, delta: int) -> Recommendation:
        """Upgrade for positive delta, downgrade for negative delta."""
        if delta > 0:
            return self.upgrade(delta)
        if delta < 0:
            return self.downgrade(-delta)
        return self


_LADDER: tuple[Recommendation, ...] = (
    Recommendation.STRONG_BUY,
    Recommendation.BUY,
    Recommendation.HOLD,
    Recommendation.AVOID,
    Recommendation.STRONG_AVOID,
)


@dataclass(frozen=True)
class TradeSetup:
    """A trader's declared long setup.

    Prices are expected to be positive with take-profit above entry and
    stop-loss below entry. Use
    :func:`trade_intel.trade.validation.ensure_valid_trade_setup` to enforce
    that before scoring.
    """

    trading_pair: str
    entry_price: float
    take_profit_price: float
    stop_loss_price: float
    position_size: float
    time_frame: str
    leverage: float = 1.0
    entry_reasoning: str = ""
    take_profit_reasoning: str = ""
    stop_loss_reasoning: str = ""

    @property
    def reasoning_fields(self) -> tuple[str, str, str]:
        """Return the three free-text rationales in entry/TP/SL order."""
        return (self.entry_reasoning, self.take_profit_reasoning, self.stop_loss_reasoning)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TradeSetup:
        """Create a TradeSetup from a camelCase or snake_case dictionary."""

        def pick(*keys: str, default: Any = None) -> Any:
            for key in keys:
                if key in data and data[key] is not None:
                    return data[key]
            return default

        return cls(
            trading_pair=str(pick("tradingPair", "trading_pair", default="")),
            entry_price=float(pick("entryPrice", "entry_price", default=0)),
            take_profit_price=float(pick("takeProfitPrice", "take_profit_price", default=0)),
            stop_loss_price=float(pick("stopLossPrice", "stop_loss_price", default=0)),
            position_size=float(pick("positionSize", "position_size", default=0)),
            time_frame=str(pick("timeFrame", "time_frame", default="")),
            leverage=float(pick("leverage", default=1)),
            entry_reasoning=str(pick("entryReasoning", "entry_reasoning", default="")),
            take_profit_reasoning=str(
                pick("takeProfitReasoning", "take_profit_reasoning", default="")
            ),
            stop_loss_reasoning=str(pick("stopLossReasoning", "stop_loss_reasoning", default="")),
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "trading_pair": self.trading_pair,
            "entry_price": self.entry_price,
            "take_profit_price": self.take_profit_price,
            "stop_loss_price": self.stop_loss_price,
            "position_size": self.position_size,
            "time_frame": self.time_frame,
            "leverage": self.leverage,
            "entry_reasoning": self.entry_reasoning,
            "take_profit_reasoning": self.take_profit_reasoning,
            "stop_loss_reasoning": self.stop_loss_reasoning,
        }


@dataclass(frozen=True)
class RiskMetrics:
    """Derived risk figures for a trade setup.

    Attributes:
        risk_reward_ratio: Potential profit divided by potential loss.
        potential_profit: Take-profit minus entry, in price units.
        potential_loss: Entry minus stop-loss, in price units.
        profit_percentage: Potential profit as a percentage of entry.
        loss_percentage: Potential loss as a percentage of entry.
        is_valid_setup: True iff ratio >= 1 and profit and loss are positive.
        warnings: Human-readable warnings about the setup.
    """

    risk_reward_ratio: float
    potential_profit: float
    potential_loss: float
    profit_percentage: float
    loss_percentage: float
    is_valid_setup: bool
    warnings: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, object]:
        return {
            "risk_reward_ratio": self.risk_reward_ratio,
            "potential_profit": self.potential_profit,
            "potential_loss": self.potential_loss,
            "profit_percentage": self.profit_percentage,
            "loss_percentage": self.loss_percentage,
            "is_valid_setup": self.is_valid_setup,
            "warnings": list(self.warnings),
        }


@dataclass(frozen=True)
class BlockchainInsightSummary:
    """Narrative strings derived from an on-chain aggregate."""

    whale_activity: tuple[str, ...] = ()
    volume_analysis: tuple[str, ...] = ()
    liquidity_flow: tuple[str, ...] = ()

    @property
    def all_points(self) -> tuple[str, ...]:
        return self.whale_activity + self.volume_analysis + self.liquidity_flow

    def to_dict(self) -> dict[str, object]:
        return {
            "whale_activity": list(self.whale_activity),
            "volume_analysis": list(self.volume_analysis),
            "liquidity_flow": list(self.liquidity_flow),
        }


@dataclass(frozen=True)
class TradeAnalysis:
    """Final verdict for one evaluation request."""

    trading_pair: str
    risk_metrics: RiskMetrics
    recommendation: Recommendation
    confidence: int
    analysis: str
    key_points: tuple[str, ...] = ()
    blockchain_insights: BlockchainInsightSummary | None = None

    @property
    def is_bullish(self) -> bool:
        return self.recommendation in (Recommendation.STRONG_BUY, Recommendation.BUY)

    def to_dict(self) -> dict[str, object]:
        return {
            "trading_pair": self.trading_pair,
            "risk_metrics": self.risk_metrics.to_dict(),
            "recommendation": self.recommendation.value,
            "confidence": self.confidence,
            "analysis": self.analysis,
            "key_points": list(self.key_points),
            "blockchain_insights": (
                self.blockchain_insights.to_dict() if self.blockchain_insights else None
            ),
        }


@dataclass(frozen=True)
class PositionSize:
    """Parsed position-size input (``"2%"``, ``"$500"``, ``"500"``)."""

    kind: str  # "percentage" | "dollar" | "invalid"
    value: float = 0.0


@dataclass(frozen=True)
class BlockchainAdjustment:
    """Bounded adjustment derived from on-chain data."""

    recommendation_boost: int = 0
    confidence_change: int = 0
    factors: dict[str, int] = field(default_factory=dict)
