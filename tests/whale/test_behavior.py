"""Tests for whale behaviour analysis."""

from datetime import datetime, timedelta

import pytest

from trade_intel.whale.behavior import (
    WhaleBehaviorConfig,
    analyze_whale_behavior,
    count_coordinated_movements,
)

WHALE_A = "0xaaaa000000000000000000000000000000000001"
WHALE_B = "0xbbbb000000000000000000000000000000000002"
RETAIL = "0xcccc000000000000000000000000000000000003"

HOLDERS = [
    {"address": WHALE_A, "balance": "5000"},
    {"address": WHALE_B, "balance": "3000"},
]


def transfer(sender: str, recipient: str, value: float, timestamp: datetime | None) -> dict[str, object]:
    return {
        "from": sender,
        "to": recipient,
        "value": str(value),
        "timestamp": timestamp.isoformat() if timestamp else None,
    }


class TestCountCoordinatedMovements:
    def test_two_separate_clusters(self, now: datetime) -> None:
        stamps = [now + timedelta(minutes=m) for m in (0, 10, 20, 70, 80, 90)]
        assert count_coordinated_movements(stamps) == 2

    def test_pairs_do_not_count(self, now: datetime) -> None:
        stamps = [now + timedelta(minutes=m) for m in (0, 30, 61, 62)]
        assert count_coordinated_movements(stamps) == 0

    def test_window_edge_is_inclusive(self, now: datetime) -> None:
        stamps = [now, now + timedelta(minutes=60), now + timedelta(minutes=60)]
        assert count_coordinated_movements(stamps) == 1

    def test_order_does_not_matter(self, now: datetime) -> None:
        stamps = [now + timedelta(minutes=m) for m in (20, 0, 10)]
        assert count_coordinated_movements(stamps) == 1

    def test_empty(self) -> None:
        assert count_coordinated_movements([]) == 0


class TestAnalyzeWhaleBehavior:
    def test_transfers_outside_window_give_neutral_default(self, now: datetime) -> None:
        old = now - timedelta(hours=72)
        pattern = analyze_whale_behavior([transfer(RETAIL, WHALE_A, 500, old)], HOLDERS, now)

        assert pattern.recent_activity == "holding"
        assert pattern.coordinated_movements == 0
        assert pattern.confidence_score == 0.3
        assert pattern.patterns.buy_pressure == 50.0
        assert pattern.patterns.sell_pressure == 50.0
        assert pattern.patterns.hodl_strength == 60.0
        assert pattern.historical_accuracy == 70.0
        assert pattern.average_hold_time == "90+ days"

    def test_accumulation_with_coordination(self, now: datetime) -> None:
        start = now - timedelta(hours=2)
        transfers = [transfer(RETAIL, WHALE_A, 1, start + timedelta(minutes=m)) for m in (0, 10, 20)]

        pattern = analyze_whale_behavior(transfers, HOLDERS, now)

        assert pattern.recent_activity == "accumulating"
        assert pattern.coordinated_movements == 1
        assert pattern.patterns.buy_pressure == 100.0
        assert pattern.patterns.sell_pressure == 0.0
        # 3 tokens spread over 2 whales
        assert pattern.patterns.hodl_strength == pytest.approx(85.0)
        assert pattern.confidence_score == pytest.approx(0.44)
        assert pattern.historical_accuracy == 78.0
        assert pattern.average_hold_time == "30+ days"

    def test_distribution(self, now: datetime) -> None:
        transfers = [
            transfer(WHALE_A, RETAIL, 1, now - timedelta(hours=1)),
            transfer(WHALE_B, RETAIL, 1, now - timedelta(hours=30)),
        ]

        pattern = analyze_whale_behavior(transfers, HOLDERS, now)

        assert pattern.recent_activity == "distributing"
        assert pattern.patterns.sell_pressure == 100.0
        assert pattern.coordinated_movements == 0
        assert pattern.historical_accuracy == 72.0

    def test_mixed(self, now: datetime) -> None:
        transfers = [
            transfer(RETAIL, WHALE_A, 2, now - timedelta(hours=1)),
            transfer(WHALE_B, RETAIL, 1, now - timedelta(hours=3)),
        ]

        pattern = analyze_whale_behavior(transfers, HOLDERS, now)

        assert pattern.recent_activity == "mixed"
        assert pattern.patterns.buy_pressure == pytest.approx(200 / 3)
        assert pattern.patterns.buy_pressure + pattern.patterns.sell_pressure == pytest.approx(100.0)

    def test_whale_to_whale_moves_are_neutral(self, now: datetime) -> None:
        pattern = analyze_whale_behavior(
            [transfer(WHALE_A, WHALE_B, 1000, now - timedelta(hours=1))], HOLDERS, now
        )

        assert pattern.recent_activity == "holding"
        assert pattern.patterns.buy_pressure == 50.0
        assert pattern.patterns.hodl_strength == 100.0
        assert pattern.confidence_score == pytest.approx(0.28)

    def test_large_flow_drains_hodl_strength(self, now: datetime) -> None:
        pattern = analyze_whale_behavior(
            [transfer(RETAIL, WHALE_A, 1000, now - timedelta(hours=1))], HOLDERS, now
        )

        assert pattern.patterns.hodl_strength == 0.0

    def test_hodl_strength_spreads_flow_over_all_holders(self, now: datetime) -> None:
        holders = [{"address": f"0x{i:040x}", "balance": str(10_000 - i)} for i in range(100)]

        pattern = analyze_whale_behavior(
            [transfer(RETAIL, holders[0]["address"], 200, now - timedelta(hours=1))], holders, now
        )

        # 200 tokens over 100 holders, though only the first 50 are tracked
        assert pattern.recent_activity == "accumulating"
        assert pattern.patterns.hodl_strength == pytest.approx(80.0)

    def test_confidence_saturates(self, now: datetime) -> None:
        transfers = [transfer(RETAIL, WHALE_A, 1, now - timedelta(hours=h)) for h in range(1, 13)]

        pattern = analyze_whale_behavior(transfers, HOLDERS, now)

        assert pattern.confidence_score == 1.0

    def test_address_match_is_case_insensitive(self, now: datetime) -> None:
        pattern = analyze_whale_behavior(
            [transfer(RETAIL, WHALE_A.upper().replace("0X", "0x"), 1, now - timedelta(hours=1))],
            HOLDERS,
            now,
        )

        assert pattern.recent_activity == "accumulating"

    def test_untimestamped_and_future_transfers_ignored(self, now: datetime) -> None:
        transfers = [
            transfer(RETAIL, WHALE_A, 1, None),
            transfer(RETAIL, WHALE_A, 1, now + timedelta(hours=1)),
        ]

        pattern = analyze_whale_behavior(transfers, HOLDERS, now)

        assert pattern.confidence_score == 0.3

    def test_whale_set_size_limits_tracked_holders(self, now: datetime) -> None:
        config = WhaleBehaviorConfig(whale_set_size=1)

        pattern = analyze_whale_behavior(
            [transfer(RETAIL, WHALE_B, 1, now - timedelta(hours=1))], HOLDERS, now, config
        )

        assert pattern.recent_activity == "holding"
        assert pattern.confidence_score == 0.3

    def test_custom_historical_accuracy(self, now: datetime) -> None:
        config = WhaleBehaviorConfig(historical_accuracy={"accumulating": 90.0})

        pattern = analyze_whale_behavior(
            [transfer(RETAIL, WHALE_A, 1, now - timedelta(hours=1))], HOLDERS, now, config
        )

        assert pattern.historical_accuracy == 90.0
