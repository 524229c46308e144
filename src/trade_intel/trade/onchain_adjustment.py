"""On-chain adjustment of a trade recommendation.

Turns an OnChainInsights aggregate into two things:
- a bounded (boost, confidence delta) pair the recommendation engine applies
- narrative strings describing whale activity, volume and exchange flows
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from trade_intel.ingestor.models import OnChainInsights
from trade_intel.trade.models import BlockchainAdjustment, BlockchainInsightSummary

logger = logging.getLogger(__name__)

MILLION = 1_000_000
THOUSAND = 1_000
BILLION = 1_000_000_000


@dataclass(frozen=True)
class OnChainThresholds:
    """USD thresholds for volume and exchange-flow readings."""

    low_volume: float = 10 * MILLION
    moderate_volume: float = 100 * MILLION
    high_volume: float = 1 * BILLION
    small_flow: float = 10 * MILLION
    medium_flow: float = 25 * MILLION
    large_flow: float = 50 * MILLION
    huge_flow: float = 100 * MILLION
    busy_large_transfer_count: int = 5
    min_boost: int = -2
    max_boost: int = 2
    min_confidence_change: int = -20
    max_confidence_change: int = 25


def format_currency(amount: float, unit: str = "M") -> str:
    """Format a USD amount in K/M/B units ("$12.5M", "$150K", "$1.2B")."""
    divisors = {"K": THOUSAND, "M": MILLION, "B": BILLION}
    decimals = 0 if unit == "K" else 1
    return f"${amount / divisors[unit]:.{decimals}f}{unit}"


def calculate_blockchain_adjustment(
    onchain: OnChainInsights,
    thresholds: OnChainThresholds | None = None,
) -> BlockchainAdjustment:
    """Compute the clamped recommendation boost and confidence delta.

    Scoring:
        whale accumulation          boost +1, confidence +15
        whale distribution          boost -1, confidence -10
        > 5 large transfers                   confidence +10
        net outflow > huge          boost +2, confidence +20
        net outflow > medium        boost +1, confidence +10
        net inflow  > huge          boost -2, confidence +15
        net inflow  > medium        boost -1, confidence +10
        volume > high                         confidence +10
        volume < low                          confidence -5

    The raw boost is clamped to [-2, 2] and the raw delta to [-20, 25].
    """
    cfg = thresholds or OnChainThresholds()
    factors: dict[str, int] = {}
    boost = 0
    confidence_change = 0

    if onchain.whale_accumulation:
        boost += 1
        confidence_change += 15
        factors["whale_accumulation"] = 15
    if onchain.whale_distribution:
        boost -= 1
        confidence_change -= 10
        factors["whale_distribution"] = -10

    if len(onchain.recent_large_transfers) > cfg.busy_large_transfer_count:
        confidence_change += 10
        factors["large_transfer_activity"] = 10

    net_outflow = onchain.net_outflow
    if net_outflow > cfg.huge_flow:
        boost += 2
        confidence_change += 20
        factors["huge_exchange_outflow"] = 20
    elif net_outflow > cfg.medium_flow:
        boost += 1
        confidence_change += 10
        factors["exchange_outflow"] = 10
    elif net_outflow < -cfg.huge_flow:
        boost -= 2
        confidence_change += 15
        factors["huge_exchange_inflow"] = 15
    elif net_outflow < -cfg.medium_flow:
        boost -= 1
        confidence_change += 10
        factors["exchange_inflow"] = 10

    if onchain.total_volume > cfg.high_volume:
        confidence_change += 10
        factors["high_volume"] = 10
    elif onchain.total_volume < cfg.low_volume:
        confidence_change -= 5
        factors["low_volume"] = -5

    adjustment = BlockchainAdjustment(
        recommendation_boost=max(cfg.min_boost, min(cfg.max_boost, boost)),
        confidence_change=max(
            cfg.min_confidence_change, min(cfg.max_confidence_change, confidence_change)
        ),
        factors=factors,
    )
    logger.debug(
        "On-chain adjustment: raw_boost=%d, raw_delta=%d -> boost=%d, delta=%d",
        boost,
        confidence_change,
        adjustment.recommendation_boost,
        adjustment.confidence_change,
    )
    return adjustment


def summarize_blockchain_data(
    onchain: OnChainInsights,
    thresholds: OnChainThresholds | None = None,
) -> BlockchainInsightSummary:
    """Describe whale activity, volume and exchange flows in plain sentences."""
    cfg = thresholds or OnChainThresholds()
    whale_activity: list[str] = []
    volume_analysis: list[str] = []
    liquidity_flow: list[str] = []

    if onchain.whale_accumulation:
        whale_activity.append("Whale accumulation detected - large holders increasing positions")
    if onchain.whale_distribution:
        whale_activity.append("Whale distribution detected - large holders reducing positions")
    if onchain.recent_large_transfers:
        whale_activity.append(
            f"{len(onchain.recent_large_transfers)} large transfers (>$100k) in last 24h"
        )
    if onchain.top_holders and onchain.top_holders[0].balance > 0:
        whale_activity.append(
            f"Top holder controls {format_currency(onchain.top_holders[0].balance)} in tokens"
        )

    total_volume = onchain.total_volume
    if total_volume > cfg.high_volume:
        volume_analysis.append(f"High volume: {format_currency(total_volume, 'B')} in 24h activity")
    elif total_volume > cfg.moderate_volume:
        volume_analysis.append(f"Moderate volume: {format_currency(total_volume)} in 24h activity")
    else:
        volume_analysis.append(f"Low volume: {format_currency(total_volume)} in 24h activity")

    if onchain.transfer_count > 0:
        average_size = total_volume / onchain.transfer_count
        volume_analysis.append(
            f"{onchain.transfer_count} transfers with avg size {format_currency(average_size, 'K')}"
        )

    net_outflow = onchain.net_outflow
    if net_outflow > cfg.large_flow:
        liquidity_flow.append(
            f"Strong exchange outflow: {format_currency(net_outflow)} (bullish signal)"
        )
    elif net_outflow > cfg.small_flow:
        liquidity_flow.append(f"Exchange outflow: {format_currency(net_outflow)} (positive signal)")
    elif net_outflow < -cfg.large_flow:
        liquidity_flow.append(
            f"Heavy exchange inflow: {format_currency(abs(net_outflow))} (bearish signal)"
        )
    elif net_outflow < -cfg.small_flow:
        liquidity_flow.append(
            f"Exchange inflow: {format_currency(abs(net_outflow))} (negative signal)"
        )
    else:
        liquidity_flow.append("Balanced exchange flows: minimal net movement")

    if onchain.exchange_outflows > 0:
        liquidity_flow.append(f"Exchange outflows: {format_currency(onchain.exchange_outflows)}")
    if onchain.exchange_inflows > 0:
        liquidity_flow.append(f"Exchange inflows: {format_currency(onchain.exchange_inflows)}")

    return BlockchainInsightSummary(
        whale_activity=tuple(whale_activity),
        volume_analysis=tuple(volume_analysis),
        liquidity_flow=tuple(liquidity_flow),
    )
