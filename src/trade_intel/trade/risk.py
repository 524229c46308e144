"""Risk/reward metrics for a long trade setup."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from trade_intel.trade.models import RiskMetrics, TradeSetup

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RiskThresholds:
    """Thresholds shared by the calculator and the recommendation engine.

    Percentages are expressed in percent of entry price (5.0 == 5%).
    """

    min_risk_reward_ratio: float = 1.5
    excellent_risk_reward: float = 3.0
    good_risk_reward: float = 2.0
    max_acceptable_loss_pct: float = 5.0
    high_risk_loss_pct: float = 10.0
    min_profit_target_pct: float = 3.0
    high_profit_target_pct: float = 15.0


def round_half_up(value: float, places: int = 2) -> float:
    """Round halves towards positive infinity.

    ``round()`` uses banker's rounding, which would turn 2.345 into 2.34.
    """
    if not math.isfinite(value):
        return value
    factor = 10**places
    return math.floor(value * factor + 0.5) / factor


def format_ratio(ratio: float) -> str:
    """Format a ratio for narrative text (2.0 -> "2", 2.5 -> "2.5")."""
    return f"{ratio:g}"


def calculate_risk_metrics(
    setup: TradeSetup,
    thresholds: RiskThresholds | None = None,
) -> RiskMetrics:
    """Calculate risk/reward figures and warnings for a trade setup.

    The calculator assumes a long position and pre-validated input; it never
    raises. A zero potential loss yields a ratio of 0, which is never valid.

    Args:
        setup: The trade setup to measure.
        thresholds: Optional threshold overrides.

    Returns:
        RiskMetrics with every numeric field rounded to 2 decimals.
    """
    cfg = thresholds or RiskThresholds()
    warnings: list[str] = []

    potential_profit = setup.take_profit_price - setup.entry_price
    potential_loss = setup.entry_price - setup.stop_loss_price

    if setup.entry_price:
        profit_percentage = potential_profit / setup.entry_price * 100
        loss_percentage = potential_loss / setup.entry_price * 100
    else:
        profit_percentage = 0.0
        loss_percentage = 0.0

    ratio = potential_profit / potential_loss if potential_loss else 0.0

    if ratio < cfg.min_risk_reward_ratio:
        warnings.append(
            f"Risk-reward ratio below {format_ratio(cfg.min_risk_reward_ratio)}:1 "
            "is generally not recommended"
        )
    if ratio < 1:
        warnings.append("Risk is greater than potential reward - high risk setup")
    if loss_percentage > cfg.max_acceptable_loss_pct:
        warnings.append(
            f"Stop loss represents more than {format_ratio(cfg.max_acceptable_loss_pct)}% loss "
            "- consider tighter risk management"
        )
    if profit_percentage < cfg.min_profit_target_pct:
        warnings.append(
            f"Profit target less than {format_ratio(cfg.min_profit_target_pct)}% "
            "- may not justify transaction costs"
        )

    is_valid_setup = ratio >= 1 and potential_profit > 0 and potential_loss > 0

    metrics = RiskMetrics(
        risk_reward_ratio=round_half_up(ratio),
        potential_profit=round_half_up(potential_profit),
        potential_loss=round_half_up(potential_loss),
        profit_percentage=round_half_up(profit_percentage),
        loss_percentage=round_half_up(loss_percentage),
        is_valid_setup=is_valid_setup,
        warnings=tuple(warnings),
    )
    logger.debug(
        "Risk metrics for %s: ratio=%.2f, profit=%.2f%%, loss=%.2f%%, valid=%s",
        setup.trading_pair,
        metrics.risk_reward_ratio,
        metrics.profit_percentage,
        metrics.loss_percentage,
        is_valid_setup,
    )
    return metrics
