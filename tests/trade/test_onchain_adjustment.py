"""Tests for the on-chain adjustment of recommendations."""

import pytest

from trade_intel.ingestor.models import LargeTransfer, OnChainInsights, TopHolder
from trade_intel.trade.onchain_adjustment import (
    OnChainThresholds,
    calculate_blockchain_adjustment,
    format_currency,
    summarize_blockchain_data,
)

MILLION = 1_000_000

# Mid-range volume so the volume factor stays neutral
NEUTRAL_VOLUME = 500 * MILLION


class TestFormatCurrency:
    @pytest.mark.parametrize(
        ("amount", "unit", "expected"),
        [
            (150 * MILLION, "M", "$150.0M"),
            (12_500_000, "M", "$12.5M"),
            (500_000, "K", "$500K"),
            (2_000_000_000, "B", "$2.0B"),
        ],
    )
    def test_units(self, amount: float, unit: str, expected: str) -> None:
        assert format_currency(amount, unit) == expected


class TestCalculateBlockchainAdjustment:
    def test_neutral_insights(self) -> None:
        adjustment = calculate_blockchain_adjustment(OnChainInsights(total_volume=NEUTRAL_VOLUME))

        assert adjustment.recommendation_boost == 0
        assert adjustment.confidence_change == 0
        assert adjustment.factors == {}

    def test_accumulation(self) -> None:
        adjustment = calculate_blockchain_adjustment(
            OnChainInsights(whale_accumulation=True, total_volume=NEUTRAL_VOLUME)
        )

        assert adjustment.recommendation_boost == 1
        assert adjustment.confidence_change == 15

    def test_distribution(self) -> None:
        adjustment = calculate_blockchain_adjustment(
            OnChainInsights(whale_distribution=True, total_volume=NEUTRAL_VOLUME)
        )

        assert adjustment.recommendation_boost == -1
        assert adjustment.confidence_change == -10

    def test_many_large_transfers(self) -> None:
        transfers = tuple(LargeTransfer(200_000.0, "unknown") for _ in range(6))
        adjustment = calculate_blockchain_adjustment(
            OnChainInsights(recent_large_transfers=transfers, total_volume=NEUTRAL_VOLUME)
        )

        assert adjustment.confidence_change == 10
        assert adjustment.factors == {"large_transfer_activity": 10}

    def test_five_large_transfers_is_not_busy(self) -> None:
        transfers = tuple(LargeTransfer(200_000.0, "unknown") for _ in range(5))
        adjustment = calculate_blockchain_adjustment(
            OnChainInsights(recent_large_transfers=transfers, total_volume=NEUTRAL_VOLUME)
        )

        assert adjustment.confidence_change == 0

    @pytest.mark.parametrize(
        ("net_flow", "boost", "delta"),
        [
            (-150 * MILLION, 2, 20),
            (-30 * MILLION, 1, 10),
            (-20 * MILLION, 0, 0),
            (20 * MILLION, 0, 0),
            (30 * MILLION, -1, 10),
            (150 * MILLION, -2, 15),
        ],
    )
    def test_exchange_flow(self, net_flow: float, boost: int, delta: int) -> None:
        adjustment = calculate_blockchain_adjustment(
            OnChainInsights(net_flow=net_flow, total_volume=NEUTRAL_VOLUME)
        )

        assert adjustment.recommendation_boost == boost
        assert adjustment.confidence_change == delta

    def test_volume_factors(self) -> None:
        high = calculate_blockchain_adjustment(OnChainInsights(total_volume=2_000 * MILLION))
        low = calculate_blockchain_adjustment(OnChainInsights(total_volume=1 * MILLION))

        assert high.confidence_change == 10
        assert low.confidence_change == -5

    def test_clamped_upper(self) -> None:
        onchain = OnChainInsights(
            whale_accumulation=True,
            recent_large_transfers=tuple(LargeTransfer(200_000.0, "out") for _ in range(6)),
            net_flow=-150 * MILLION,
            total_volume=2_000 * MILLION,
        )

        adjustment = calculate_blockchain_adjustment(onchain)

        # raw boost 3, raw delta 55
        assert adjustment.recommendation_boost == 2
        assert adjustment.confidence_change == 25

    def test_clamped_lower(self) -> None:
        onchain = OnChainInsights(whale_distribution=True, net_flow=150 * MILLION, total_volume=1 * MILLION)

        adjustment = calculate_blockchain_adjustment(onchain)

        # raw boost -3, raw delta 0
        assert adjustment.recommendation_boost == -2
        assert adjustment.confidence_change == 0

    def test_custom_thresholds(self) -> None:
        thresholds = OnChainThresholds(medium_flow=5 * MILLION)
        adjustment = calculate_blockchain_adjustment(
            OnChainInsights(net_flow=-10 * MILLION, total_volume=NEUTRAL_VOLUME), thresholds
        )

        assert adjustment.recommendation_boost == 1


class TestSummarizeBlockchainData:
    def test_whale_activity_lines(self) -> None:
        onchain = OnChainInsights(
            whale_accumulation=True,
            recent_large_transfers=(LargeTransfer(250_000.0, "out"),),
            top_holders=(TopHolder("0xabc", 12_500_000.0),),
            total_volume=NEUTRAL_VOLUME,
        )

        summary = summarize_blockchain_data(onchain)

        assert summary.whale_activity == (
            "Whale accumulation detected - large holders increasing positions",
            "1 large transfers (>$100k) in last 24h",
            "Top holder controls $12.5M in tokens",
        )

    @pytest.mark.parametrize(
        ("volume", "expected"),
        [
            (2_000 * MILLION, "High volume: $2.0B in 24h activity"),
            (NEUTRAL_VOLUME, "Moderate volume: $500.0M in 24h activity"),
            (5 * MILLION, "Low volume: $5.0M in 24h activity"),
        ],
    )
    def test_volume_line(self, volume: float, expected: str) -> None:
        summary = summarize_blockchain_data(OnChainInsights(total_volume=volume))
        assert summary.volume_analysis[0] == expected

    def test_average_transfer_size(self) -> None:
        summary = summarize_blockchain_data(OnChainInsights(total_volume=5 * MILLION, transfer_count=10))
        assert summary.volume_analysis[1] == "10 transfers with avg size $500K"

    @pytest.mark.parametrize(
        ("net_flow", "expected"),
        [
            (-150 * MILLION, "Strong exchange outflow: $150.0M (bullish signal)"),
            (-20 * MILLION, "Exchange outflow: $20.0M (positive signal)"),
            (0.0, "Balanced exchange flows: minimal net movement"),
            (20 * MILLION, "Exchange inflow: $20.0M (negative signal)"),
            (80 * MILLION, "Heavy exchange inflow: $80.0M (bearish signal)"),
        ],
    )
    def test_flow_line(self, net_flow: float, expected: str) -> None:
        summary = summarize_blockchain_data(OnChainInsights(net_flow=net_flow))
        assert summary.liquidity_flow[0] == expected

    def test_gross_flows_listed(self) -> None:
        onchain = OnChainInsights(exchange_inflows=3 * MILLION, exchange_outflows=4 * MILLION, net_flow=-MILLION)

        summary = summarize_blockchain_data(onchain)

        assert summary.liquidity_flow == (
            "Balanced exchange flows: minimal net movement",
            "Exchange outflows: $4.0M",
            "Exchange inflows: $3.0M",
        )
