"""Trade-setup validation and form-input parsing.

The scoring functions assume a well-formed long setup. This module is the
boundary that enforces it: ``validate_trade_setup`` reports every problem,
``ensure_valid_trade_setup`` raises ``InvalidTradeSetup`` carrying them.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Mapping

from trade_intel.trade.models import PositionSize, TradeSetup

logger = logging.getLogger(__name__)

PRICE_REQUIRED = "must be greater than 0"
VALUE_NOT_FINITE = "must be a finite number"
FIELD_REQUIRED = "is required"
TAKE_PROFIT_INVALID = "Take profit must be higher than entry price for long positions"
STOP_LOSS_INVALID = "Stop loss must be lower than entry price for long positions"

_LEADING_NUMBER = re.compile(r"^\s*([-+]?\d*\.?\d+(?:e[-+]?\d+)?)")
_LEVERAGE_TOKEN = re.compile(r"(\d+(?:\.\d+)?)x")
_CUSTOM_LEVERAGE = re.compile(r"custom-(\d+(?:\.\d+)?)x")


class InvalidTradeSetup(ValueError):
    """Raised when a trade setup fails boundary validation."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "invalid trade setup")


def _positive_error(value: float, field_name: str) -> str | None:
    if value is None or math.isnan(value) or value <= 0:
        return f"{field_name} {PRICE_REQUIRED}"
    if math.isinf(value):
        return f"{field_name} {VALUE_NOT_FINITE}"
    return None


def _required_error(value: str, field_name: str) -> str | None:
    if not value or not value.strip():
        return f"{field_name} {FIELD_REQUIRED}"
    return None


def validate_trade_setup(setup: TradeSetup) -> list[str]:
    """Return every validation error for a setup (empty when valid)."""
    errors: list[str | None] = [_required_error(setup.trading_pair, "Trading pair")]

    errors += [
        _positive_error(setup.entry_price, "Entry price"),
        _positive_error(setup.take_profit_price, "Take profit price"),
        _positive_error(setup.stop_loss_price, "Stop loss price"),
    ]

    prices = (setup.entry_price, setup.take_profit_price, setup.stop_loss_price)
    if all(math.isfinite(p) and p > 0 for p in prices):
        if setup.take_profit_price <= setup.entry_price:
            errors.append(TAKE_PROFIT_INVALID)
        if setup.stop_loss_price >= setup.entry_price:
            errors.append(STOP_LOSS_INVALID)

    errors += [
        _required_error(setup.entry_reasoning, "Entry reasoning"),
        _required_error(setup.take_profit_reasoning, "Take profit reasoning"),
        _required_error(setup.stop_loss_reasoning, "Stop loss reasoning"),
        _positive_error(setup.position_size, "Position size"),
        _required_error(setup.time_frame, "Time frame"),
        _positive_error(setup.leverage, "Leverage"),
    ]
    return [e for e in errors if e]


def ensure_valid_trade_setup(setup: TradeSetup) -> TradeSetup:
    """Return the setup unchanged, or raise InvalidTradeSetup."""
    errors = validate_trade_setup(setup)
    if errors:
        logger.warning("Rejected trade setup for %r: %s", setup.trading_pair, errors)
        raise InvalidTradeSetup(errors)
    return setup


def _leading_float(text: str) -> float | None:
    match = _LEADING_NUMBER.match(text)
    return float(match.group(1)) if match else None


def parse_leverage(text: str) -> float:
    """Parse a leverage selection ("none", "10x", "custom-7.5x") into a multiplier.

    Unrecognised input falls back to 1 (no leverage).
    """
    cleaned = text.lower().strip()
    if cleaned in ("none", "no leverage (1x)"):
        return 1.0

    if cleaned.startswith("custom-"):
        custom = _CUSTOM_LEVERAGE.search(cleaned)
        if custom:
            return float(custom.group(1))

    match = _LEVERAGE_TOKEN.search(cleaned)
    if match:
        return float(match.group(1))
    return 1.0


def parse_position_size(text: str) -> PositionSize:
    """Parse "2%", "$500", "500 usd" or "500" into a PositionSize."""
    cleaned = text.strip().lower()

    if "%" in cleaned:
        value = _leading_float(cleaned.replace("%", ""))
        return PositionSize(kind="percentage", value=value or 0.0)

    if "$" in cleaned or "usd" in cleaned:
        value = _leading_float(re.sub(r"[$,usd]", "", cleaned))
        return PositionSize(kind="dollar", value=value or 0.0)

    value = _leading_float(cleaned)
    if value is not None:
        return PositionSize(kind="dollar", value=value)
    return PositionSize(kind="invalid")


def trade_setup_from_form(form: Mapping[str, str]) -> TradeSetup:
    """Build a TradeSetup from raw string form fields (camelCase keys).

    Unparseable numbers become NaN so that validation rejects them.
    """

    def number(key: str) -> float:
        value = _leading_float(form.get(key, "") or "")
        return value if value is not None else math.nan

    return TradeSetup(
        trading_pair=form.get("tradingPair", ""),
        entry_price=number("entryPrice"),
        take_profit_price=number("takeProfitPrice"),
        stop_loss_price=number("stopLossPrice"),
        position_size=number("positionSize"),
        time_frame=form.get("timeFrame", ""),
        leverage=parse_leverage(form.get("leverage", "") or ""),
        entry_reasoning=form.get("entryReasoning", ""),
        take_profit_reasoning=form.get("takeProfitReasoning", ""),
        stop_loss_reasoning=form.get("stopLossReasoning", ""),
    )
