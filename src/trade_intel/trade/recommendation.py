"""Rule-based trade recommendation engine.

This module scores a trade setup into a Recommendation with a bounded
confidence. Scoring is an ordered list of adjustment steps, each a pure
function ``ScoringState -> ScoringState``, folded left over the initial
state. A step can mark the state terminal, after which every later step is
skipped.

Step order:
    1. Invalid setup        -> STRONG_AVOID @ 90, terminal
    2. Risk/reward ratio    -> base recommendation and confidence
    3. Time frame           -> +5 for swing; scalping with leverage > 5 is terminal
    4. Leverage             -> -10 / -20 (+ downgrade), floored at 25
    5. Loss magnitude       -> > 10% forces STRONG_AVOID
    6. Profit magnitude     -> > 15% adds +10
    7. Reasoning quality    -> poor downgrades, good adds +5
    8. Risk warnings        -> appended to key points
    9. On-chain insights    -> bounded boost and confidence delta
"""

from __future__ import annotations

import dataclasses
import logging
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from functools import reduce
from typing import Literal

from trade_intel.ingestor.models import OnChainInsights
from trade_intel.trade.models import Recommendation, RiskMetrics, TradeAnalysis, TradeSetup
from trade_intel.trade.onchain_adjustment import (
    OnChainThresholds,
    calculate_blockchain_adjustment,
    summarize_blockchain_data,
)
from trade_intel.trade.risk import RiskThresholds, format_ratio

logger = logging.getLogger(__name__)

TimeFrameRisk = Literal["low", "medium", "high"]
ReasoningQuality = Literal["poor", "average", "good"]

TECHNICAL_TERMS: tuple[str, ...] = (
    "support",
    "resistance",
    "fibonacci",
    "rsi",
    "macd",
    "moving average",
    "bollinger",
    "volume",
    "trend",
    "breakout",
    "reversal",
    "divergence",
    "oversold",
    "overbought",
    "momentum",
    "pattern",
    "channel",
)

HIGH_RISK_TIME_FRAMES = frozenset({"scalping", "scalp"})
MEDIUM_RISK_TIME_FRAMES = frozenset({"day-trading", "day trading", "daytrading", "intraday"})

# Interval tokens such as "5m", "4h", "custom-15m", "1d"
_INTERVAL_TOKEN = re.compile(r"(\d+(?:\.\d+)?)\s*(m|min|h|d|w)(?![a-z])")
_MINUTES_PER_UNIT = {"m": 1, "min": 1, "h": 60, "d": 1440, "w": 10080}


@dataclass(frozen=True)
class RecommendationConfig:
    """Tunable constants for the rule cascade."""

    risk: RiskThresholds = field(default_factory=RiskThresholds)
    onchain: OnChainThresholds = field(default_factory=OnChainThresholds)
    min_confidence: int = 20
    max_confidence: int = 95
    leverage_confidence_floor: int = 25
    low_leverage: float = 1.0
    moderate_leverage: float = 5.0
    high_leverage: float = 10.0
    # Intervals shorter than this are scalping; up to the medium limit are day trading.
    high_risk_max_minutes: int = 30
    medium_risk_max_minutes: int = 12 * 60
    poor_reasoning_max_words: int = 15
    poor_reasoning_max_terms: int = 2
    good_reasoning_min_words: int = 50
    good_reasoning_min_terms: int = 4
    technical_terms: tuple[str, ...] = TECHNICAL_TERMS


@dataclass(frozen=True)
class ScoringState:
    """Intermediate state threaded through the adjustment steps."""

    recommendation: Recommendation = Recommendation.HOLD
    confidence: int = 50
    analysis: str = ""
    key_points: tuple[str, ...] = ()
    terminal: bool = False

    def evolve(self, **changes: object) -> ScoringState:
        return dataclasses.replace(self, **changes)  # type: ignore[arg-type]

    def with_points(self, *points: str) -> ScoringState:
        return dataclasses.replace(self, key_points=self.key_points + tuple(points))


@dataclass(frozen=True)
class ScoringContext:
    """Read-only inputs visible to every step."""

    setup: TradeSetup
    metrics: RiskMetrics
    config: RecommendationConfig
    onchain: OnChainInsights | None = None


Step = Callable[[ScoringState, ScoringContext], ScoringState]


def clamp_confidence(value: float, minimum: int = 20, maximum: int = 95) -> int:
    """Clamp a confidence into [minimum, maximum] and return it as an int."""
    return int(max(minimum, min(maximum, value)))


def _adjust(state: ScoringState, ctx: ScoringContext, change: int, *, floor: int | None = None) -> int:
    cfg = ctx.config
    return clamp_confidence(
        state.confidence + change,
        cfg.min_confidence if floor is None else floor,
        cfg.max_confidence,
    )


# ---------------------------------------------------------------------------
# Classifiers
# ---------------------------------------------------------------------------


def classify_time_frame(time_frame: str, config: RecommendationConfig | None = None) -> TimeFrameRisk:
    """Classify a time-frame label into high (scalping), medium (day) or low (swing) risk.

    Keywords are matched first; otherwise the shortest interval token found in
    the label decides ("custom-5m" -> high, "4h" -> medium, "1d" -> low).
    """
    cfg = config or RecommendationConfig()
    cleaned = time_frame.lower().strip()
    if cleaned.startswith("custom-"):
        cleaned = cleaned[len("custom-") :]

    if cleaned in HIGH_RISK_TIME_FRAMES:
        return "high"
    if cleaned in MEDIUM_RISK_TIME_FRAMES:
        return "medium"

    minutes = [
        float(amount) * _MINUTES_PER_UNIT[unit] for amount, unit in _INTERVAL_TOKEN.findall(cleaned)
    ]
    if minutes:
        shortest = min(minutes)
        if shortest < cfg.high_risk_max_minutes:
            return "high"
        if shortest <= cfg.medium_risk_max_minutes:
            return "medium"
    return "low"


def assess_reasoning_quality(
    setup: TradeSetup, config: RecommendationConfig | None = None
) -> ReasoningQuality:
    """Grade the rationale text by word count and distinct technical terms used."""
    cfg = config or RecommendationConfig()
    total_words = sum(len(text.split()) for text in setup.reasoning_fields)
    text = " ".join(setup.reasoning_fields).lower()
    term_count = sum(1 for term in cfg.technical_terms if term in text)

    if total_words < cfg.poor_reasoning_max_words or term_count < cfg.poor_reasoning_max_terms:
        return "poor"
    if total_words > cfg.good_reasoning_min_words and term_count >= cfg.good_reasoning_min_terms:
        return "good"
    return "average"


# ---------------------------------------------------------------------------
# Steps
# ---------------------------------------------------------------------------


def invalid_setup_step(state: ScoringState, ctx: ScoringContext) -> ScoringState:
    if ctx.metrics.is_valid_setup:
        return state
    return state.evolve(
        recommendation=Recommendation.STRONG_AVOID,
        confidence=90,
        analysis="This trade setup has fundamental issues that make it unsuitable for execution.",
        key_points=("Invalid risk/reward structure",),
        terminal=True,
    )


def risk_reward_step(state: ScoringState, ctx: ScoringContext) -> ScoringState:
    ratio = ctx.metrics.risk_reward_ratio
    risk = ctx.config.risk
    shown = format_ratio(ratio)

    if ratio >= risk.excellent_risk_reward:
        recommendation, confidence = Recommendation.STRONG_BUY, 85
        analysis = "Excellent risk-reward ratio with strong upside potential."
        point = f"Outstanding {shown}:1 risk-reward ratio"
    elif ratio >= risk.good_risk_reward:
        recommendation, confidence = Recommendation.BUY, 75
        analysis = "Good risk-reward ratio that meets professional trading standards."
        point = f"Solid {shown}:1 risk-reward ratio"
    elif ratio >= risk.min_risk_reward_ratio:
        recommendation, confidence = Recommendation.BUY, 65
        analysis = "Acceptable risk-reward ratio for experienced traders."
        point = f"Acceptable {shown}:1 risk-reward ratio"
    elif ratio >= 1:
        recommendation, confidence = Recommendation.HOLD, 45
        analysis = "Marginal risk-reward ratio. Consider waiting for better opportunities."
        point = f"Low {shown}:1 risk-reward ratio"
    else:
        recommendation, confidence = Recommendation.AVOID, 80
        analysis = "Poor risk-reward ratio where potential losses exceed gains."
        point = "Risk exceeds potential reward"

    return state.evolve(
        recommendation=recommendation, confidence=confidence, analysis=analysis
    ).with_points(point)


def time_frame_step(state: ScoringState, ctx: ScoringContext) -> ScoringState:
    risk = classify_time_frame(ctx.setup.time_frame, ctx.config)

    if risk == "high":
        state = state.with_points("Scalping requires advanced skills and tight risk management")
        if ctx.setup.leverage > ctx.config.moderate_leverage:
            return state.evolve(
                recommendation=Recommendation.STRONG_AVOID,
                confidence=85,
                analysis="High leverage scalping is extremely risky and not recommended.",
                terminal=True,
            )
        return state.evolve(confidence=_adjust(state, ctx, 0))
    if risk == "medium":
        state = state.with_points(
            "Day trading requires active monitoring and quick decision making"
        )
        return state.evolve(confidence=_adjust(state, ctx, 0))

    state = state.with_points("Swing trading allows for better analysis and less stress")
    return state.evolve(confidence=_adjust(state, ctx, 5))


def leverage_step(state: ScoringState, ctx: ScoringContext) -> ScoringState:
    leverage = ctx.setup.leverage
    cfg = ctx.config
    floor = cfg.leverage_confidence_floor
    shown = format_ratio(leverage)

    if leverage > cfg.high_leverage:
        state = state.with_points(f"High leverage ({shown}x) significantly increases risk")
        return state.evolve(
            confidence=_adjust(state, ctx, -20, floor=floor),
            recommendation=state.recommendation.downgrade(),
        )
    if leverage > cfg.moderate_leverage:
        state = state.with_points(f"Moderate leverage ({shown}x) increases risk")
        return state.evolve(confidence=_adjust(state, ctx, -10, floor=floor))
    if leverage > cfg.low_leverage:
        state = state.with_points(f"Low leverage ({shown}x) - manageable risk increase")
    return state.evolve(confidence=_adjust(state, ctx, 0, floor=floor))


def loss_magnitude_step(state: ScoringState, ctx: ScoringContext) -> ScoringState:
    loss_pct = ctx.metrics.loss_percentage
    risk = ctx.config.risk

    if loss_pct > risk.high_risk_loss_pct:
        state = state.with_points(
            f"Excessive risk exposure (>{format_ratio(risk.high_risk_loss_pct)}% loss potential)"
        )
        return state.evolve(
            recommendation=Recommendation.STRONG_AVOID,
            confidence=_adjust(state, ctx, 20),
        )
    if loss_pct > risk.max_acceptable_loss_pct:
        state = state.with_points("High risk exposure - consider reducing position size")
        if state.recommendation is Recommendation.STRONG_BUY:
            return state.evolve(recommendation=state.recommendation.downgrade())
    return state


def profit_magnitude_step(state: ScoringState, ctx: ScoringContext) -> ScoringState:
    if ctx.metrics.profit_percentage > ctx.config.risk.high_profit_target_pct:
        state = state.with_points("High profit potential")
        return state.evolve(confidence=_adjust(state, ctx, 10))
    return state


def reasoning_quality_step(state: ScoringState, ctx: ScoringContext) -> ScoringState:
    quality = assess_reasoning_quality(ctx.setup, ctx.config)
    if quality == "poor":
        state = state.with_points("Trade reasoning needs more detail and analysis")
        return state.evolve(
            recommendation=state.recommendation.downgrade(),
            confidence=_adjust(state, ctx, -15),
        )
    if quality == "good":
        state = state.with_points("Well-reasoned trade setup")
        return state.evolve(confidence=_adjust(state, ctx, 5))
    return state


def warnings_step(state: ScoringState, ctx: ScoringContext) -> ScoringState:
    return state.with_points(*ctx.metrics.warnings)


def onchain_step(state: ScoringState, ctx: ScoringContext) -> ScoringState:
    if ctx.onchain is None:
        return state

    summary = summarize_blockchain_data(ctx.onchain, ctx.config.onchain)
    adjustment = calculate_blockchain_adjustment(ctx.onchain, ctx.config.onchain)

    state = state.evolve(
        confidence=_adjust(state, ctx, adjustment.confidence_change),
        recommendation=state.recommendation.step(adjustment.recommendation_boost),
    )
    return state.with_points(*summary.all_points)


DEFAULT_STEPS: tuple[Step, ...] = (
    invalid_setup_step,
    risk_reward_step,
    time_frame_step,
    leverage_step,
    loss_magnitude_step,
    profit_magnitude_step,
    reasoning_quality_step,
    warnings_step,
    onchain_step,
)


def run_steps(
    steps: Sequence[Step],
    ctx: ScoringContext,
    initial: ScoringState | None = None,
) -> ScoringState:
    """Fold the steps over the initial state, stopping once a step is terminal."""

    def apply(state: ScoringState, step: Step) -> ScoringState:
        if state.terminal:
            return state
        new_state = step(state, ctx)
        logger.debug(
            "%s: %s @ %d",
            getattr(step, "__name__", "step"),
            new_state.recommendation.value,
            new_state.confidence,
        )
        return new_state

    return reduce(apply, steps, initial or ScoringState())


class TradeRecommendationEngine:
    """Rule-based scorer producing a TradeAnalysis from a setup and its metrics.

    Example:
        ```python
        engine = TradeRecommendationEngine()
        metrics = calculate_risk_metrics(setup)
        analysis = engine.evaluate(metrics, setup, onchain=insights)
        print(analysis.recommendation, analysis.confidence)
        ```
    """

    def __init__(
        self,
        *,
        config: RecommendationConfig | None = None,
        steps: Sequence[Step] = DEFAULT_STEPS,
    ) -> None:
        self._config = config or RecommendationConfig()
        self._steps = tuple(steps)

    @property
    def config(self) -> RecommendationConfig:
        return self._config

    def evaluate(
        self,
        metrics: RiskMetrics,
        setup: TradeSetup,
        onchain: OnChainInsights | None = None,
    ) -> TradeAnalysis:
        """Score a trade setup.

        Args:
            metrics: RiskMetrics computed for the setup.
            setup: The trade setup being scored.
            onchain: Optional on-chain aggregate for the traded token.

        Returns:
            TradeAnalysis with the final recommendation and key points.
        """
        ctx = ScoringContext(setup=setup, metrics=metrics, config=self._config, onchain=onchain)
        state = run_steps(self._steps, ctx)

        blockchain_insights = None
        if onchain is not None:
            blockchain_insights = summarize_blockchain_data(onchain, self._config.onchain)

        logger.info(
            "Trade recommendation: pair=%s, ratio=%.2f, recommendation=%s, confidence=%d, onchain=%s",
            setup.trading_pair,
            metrics.risk_reward_ratio,
            state.recommendation.value,
            state.confidence,
            onchain is not None,
        )

        return TradeAnalysis(
            trading_pair=setup.trading_pair,
            risk_metrics=metrics,
            recommendation=state.recommendation,
            confidence=state.confidence,
            analysis=state.analysis,
            key_points=state.key_points,
            blockchain_insights=blockchain_insights,
        )


def generate_recommendation(
    metrics: RiskMetrics,
    setup: TradeSetup,
    onchain: OnChainInsights | None = None,
    config: RecommendationConfig | None = None,
) -> TradeAnalysis:
    """Functional entry point for :class:`TradeRecommendationEngine`."""
    return TradeRecommendationEngine(config=config).evaluate(metrics, setup, onchain)
