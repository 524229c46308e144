"""Pipeline orchestrator for trade intelligence.

This module provides the TradeIntelPipeline class that wires the scoring and
whale engines together from one Settings object.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from trade_intel.config import Settings, get_settings
from trade_intel.ingestor.models import (
    HolderRecord,
    OnChainInsights,
    RankedHolders,
    TransferRecord,
)
from trade_intel.ingestor.onchain import build_onchain_insights, parse_holders
from trade_intel.trade.models import TradeAnalysis, TradeSetup
from trade_intel.trade.recommendation import TradeRecommendationEngine
from trade_intel.trade.risk import calculate_risk_metrics
from trade_intel.trade.validation import InvalidTradeSetup, ensure_valid_trade_setup
from trade_intel.whale.behavior import WhaleBehaviorAnalyzer
from trade_intel.whale.models import EnhancedWhaleIntelligence
from trade_intel.whale.prediction import WhalePredictionEngine
from trade_intel.whale.tiers import WhaleTierClassifier

logger = logging.getLogger(__name__)


@dataclass
class PipelineStats:
    """Counters for the pipeline."""

    trades_evaluated: int = 0
    trades_rejected: int = 0
    whale_reports: int = 0
    last_evaluation_time: datetime | None = None


class TradeIntelPipeline:
    """Runs the trade-scoring and whale-intelligence pipelines.

    Pipeline flow:
        TradeSetup (+ OnChainInsights) -> Risk Metrics -> Recommendation
        Holders + Transfers -> Tiers -> Behaviour -> Prediction

    Example:
        ```python
        from trade_intel.pipeline import TradeIntelPipeline

        pipeline = TradeIntelPipeline()
        analysis = pipeline.evaluate_trade(setup)
        intel = pipeline.whale_intelligence(holders, transfers, "PEPE")
        ```
    """

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize the pipeline.

        Args:
            settings: Application settings. If not provided, uses get_settings().
        """
        self._settings = settings or get_settings()
        self._stats = PipelineStats()

        self._risk_thresholds = self._settings.risk.to_config()
        self._recommender = TradeRecommendationEngine(config=self._settings.recommendation_config())
        self._tier_classifier = WhaleTierClassifier(config=self._settings.whale.to_tier_config())
        self._behavior_analyzer = WhaleBehaviorAnalyzer(
            config=self._settings.whale.to_behavior_config()
        )
        self._predictor = WhalePredictionEngine(config=self._settings.whale.to_prediction_config())
        self._onchain_config = self._settings.onchain.to_config()

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def stats(self) -> PipelineStats:
        """Current pipeline statistics."""
        return self._stats

    def evaluate_trade(
        self,
        setup: TradeSetup,
        onchain: OnChainInsights | None = None,
        *,
        validate: bool = True,
    ) -> TradeAnalysis:
        """Score a trade setup, optionally with an on-chain aggregate.

        Raises:
            InvalidTradeSetup: If ``validate`` is True and the setup is malformed.
        """
        if validate:
            try:
                ensure_valid_trade_setup(setup)
            except InvalidTradeSetup:
                self._stats.trades_rejected += 1
                raise

        metrics = calculate_risk_metrics(setup, self._risk_thresholds)
        analysis = self._recommender.evaluate(metrics, setup, onchain)

        self._stats.trades_evaluated += 1
        self._stats.last_evaluation_time = datetime.now(UTC)
        logger.info(
            "Evaluated %s: %s @ %d (ratio %.2f, onchain=%s)",
            setup.trading_pair,
            analysis.recommendation.value,
            analysis.confidence,
            metrics.risk_reward_ratio,
            onchain is not None,
        )
        return analysis

    def whale_intelligence(
        self,
        holders: RankedHolders | Sequence[HolderRecord | Mapping[str, Any]],
        transfers: Iterable[TransferRecord | Mapping[str, Any]],
        symbol: str,
        *,
        now: datetime | None = None,
    ) -> EnhancedWhaleIntelligence:
        """Classify tiers, analyse behaviour and predict impact for one token."""
        now = now or datetime.now(UTC)
        if not isinstance(holders, RankedHolders):
            holders = parse_holders(holders)

        tiers = self._tier_classifier.classify(holders, symbol)
        behavior = self._behavior_analyzer.analyze(transfers, holders, now)
        prediction = self._predictor.predict(behavior, tiers)

        self._stats.whale_reports += 1
        logger.info(
            "Whale intelligence for %s: holders=%d, activity=%s, direction=%s, action=%s",
            symbol,
            tiers.total_holders,
            behavior.recent_activity,
            prediction.price_impact.direction,
            prediction.recommendation.action,
        )
        return EnhancedWhaleIntelligence(
            symbol=symbol,
            tiers=tiers,
            behavior=behavior,
            predictions=prediction,
            last_updated=now,
        )

    def onchain_insights(
        self,
        holders: Iterable[HolderRecord | Mapping[str, Any]],
        transfers: Iterable[TransferRecord | Mapping[str, Any]],
        *,
        now: datetime | None = None,
        price_usd: float | None = None,
    ) -> OnChainInsights:
        """Build the on-chain aggregate consumed by :meth:`evaluate_trade`."""
        insights = build_onchain_insights(
            holders,
            transfers,
            now=now,
            config=self._onchain_config,
            price_usd=price_usd,
        )
        logger.info(
            "On-chain insights: accumulation=%s, distribution=%s, volume=%.2f, net_flow=%.2f",
            insights.whale_accumulation,
            insights.whale_distribution,
            insights.total_volume,
            insights.net_flow,
        )
        return insights
