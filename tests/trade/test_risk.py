"""Tests for the risk-metric calculator."""

import math

import pytest

from trade_intel.trade.models import TradeSetup
from trade_intel.trade.risk import RiskThresholds, calculate_risk_metrics, round_half_up


def make_setup(
    *,
    entry: float = 100.0,
    take_profit: float = 110.0,
    stop_loss: float = 95.0,
) -> TradeSetup:
    return TradeSetup(
        trading_pair="ETH/USDT",
        entry_price=entry,
        take_profit_price=take_profit,
        stop_loss_price=stop_loss,
        position_size=1000.0,
        time_frame="day-trading",
    )


class TestRoundHalfUp:
    def test_rounds_half_up(self) -> None:
        # round() would give 0.12 here
        assert round_half_up(0.125) == 0.13

    def test_rounds_down_below_half(self) -> None:
        assert round_half_up(1.234) == 1.23

    def test_non_finite_passthrough(self) -> None:
        assert math.isinf(round_half_up(math.inf))


class TestCalculateRiskMetrics:
    def test_basic_long_setup(self) -> None:
        metrics = calculate_risk_metrics(make_setup())

        assert metrics.risk_reward_ratio == 2.0
        assert metrics.potential_profit == 10.0
        assert metrics.potential_loss == 5.0
        assert metrics.profit_percentage == 10.0
        assert metrics.loss_percentage == 5.0
        assert metrics.is_valid_setup is True
        assert metrics.warnings == ()

    @pytest.mark.parametrize(
        ("entry", "take_profit", "stop_loss"),
        [
            (100.0, 110.0, 95.0),
            (2500.0, 2800.0, 2400.0),
            (0.5, 0.65, 0.45),
            (42000.0, 45000.0, 41000.0),
        ],
    )
    def test_ratio_matches_formula(self, entry: float, take_profit: float, stop_loss: float) -> None:
        metrics = calculate_risk_metrics(make_setup(entry=entry, take_profit=take_profit, stop_loss=stop_loss))

        expected = round_half_up((take_profit - entry) / (entry - stop_loss))
        assert metrics.risk_reward_ratio == pytest.approx(expected)

    def test_all_numeric_fields_two_decimals(self) -> None:
        metrics = calculate_risk_metrics(make_setup(entry=3.0, take_profit=3.1, stop_loss=2.93))

        for value in (
            metrics.risk_reward_ratio,
            metrics.potential_profit,
            metrics.potential_loss,
            metrics.profit_percentage,
            metrics.loss_percentage,
        ):
            assert round(value, 2) == pytest.approx(value)

    def test_poor_setup_collects_independent_warnings(self) -> None:
        metrics = calculate_risk_metrics(make_setup(take_profit=104.0, stop_loss=90.0))

        assert metrics.risk_reward_ratio == 0.4
        assert metrics.is_valid_setup is False
        assert metrics.warnings == (
            "Risk-reward ratio below 1.5:1 is generally not recommended",
            "Risk is greater than potential reward - high risk setup",
            "Stop loss represents more than 5% loss - consider tighter risk management",
        )

    def test_small_profit_target_warning(self) -> None:
        metrics = calculate_risk_metrics(make_setup(take_profit=102.0, stop_loss=99.0))

        assert metrics.is_valid_setup is True
        assert metrics.warnings == (
            "Profit target less than 3% - may not justify transaction costs",
        )

    def test_zero_loss_is_never_valid(self) -> None:
        metrics = calculate_risk_metrics(make_setup(stop_loss=100.0))

        assert metrics.risk_reward_ratio == 0.0
        assert metrics.is_valid_setup is False

    def test_inverted_stop_loss_is_invalid(self) -> None:
        metrics = calculate_risk_metrics(make_setup(stop_loss=105.0))

        assert metrics.potential_loss == -5.0
        assert metrics.is_valid_setup is False

    def test_custom_thresholds(self) -> None:
        thresholds = RiskThresholds(min_risk_reward_ratio=2.5)
        metrics = calculate_risk_metrics(make_setup(), thresholds)

        assert metrics.warnings == ("Risk-reward ratio below 2.5:1 is generally not recommended",)


class TestValidity:
    @pytest.mark.parametrize(
        ("take_profit", "stop_loss", "expected"),
        [
            (110.0, 95.0, True),  # ratio 2
            (105.0, 95.0, True),  # ratio exactly 1
            (104.0, 95.0, False),  # ratio < 1
            (100.0, 95.0, False),  # no profit
            (90.0, 95.0, False),  # negative profit
            (110.0, 100.0, False),  # no loss
            (110.0, 105.0, False),  # negative loss
        ],
    )
    def test_valid_iff_ratio_at_least_one_and_both_positive(
        self, take_profit: float, stop_loss: float, expected: bool
    ) -> None:
        metrics = calculate_risk_metrics(make_setup(take_profit=take_profit, stop_loss=stop_loss))
        assert metrics.is_valid_setup is expected
