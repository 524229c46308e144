"""Whale tier classification and supply concentration statistics."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

import numpy as np

from trade_intel.ingestor.exchanges import exchange_label
from trade_intel.ingestor.models import HolderRecord, RankedHolders, is_sorted_by_balance_desc
from trade_intel.ingestor.onchain import parse_holders
from trade_intel.whale.models import (
    ConcentrationRisk,
    ConcentrationStats,
    WhaleHolder,
    WhaleTier,
    WhaleTierAnalysis,
)

logger = logging.getLogger(__name__)

TIER_DISPLAY_NAMES: dict[str, str] = {
    "mega": "Mega Whale",
    "whale": "Whale",
    "dolphin": "Dolphin",
    "fish": "Fish",
}


@dataclass(frozen=True)
class WhaleTierConfig:
    """Tier and concentration thresholds.

    A holder lands in the first tier whose percentage OR balance threshold
    it meets. Percentages are of observed supply, in percent.
    """

    mega_percentage: float = 1.0
    mega_balance: float = 1000.0
    whale_percentage: float = 0.1
    whale_balance: float = 100.0
    dolphin_percentage: float = 0.01
    dolphin_balance: float = 10.0
    top_small: int = 10
    top_large: int = 50
    high_concentration: float = 70.0
    medium_concentration: float = 40.0


def gini_coefficient(balances: Iterable[float | Decimal]) -> float:
    """Gini coefficient over balances (0 = equal, towards 1 = concentrated).

    Uses ``G = 2 * sum((i + 1) * x_i) / (n * sum(x)) - (n + 1) / n`` over
    balances sorted ascending. Returns 0 for empty or zero-total input.
    The result is clamped to ``[0, (n - 1) / n]``, the bound reached when a
    single holder owns everything, so it stays below 1 for any finite n.
    """
    values = np.sort(np.asarray([float(b) for b in balances], dtype=float))
    n = values.size
    total = float(values.sum()) if n else 0.0
    if n == 0 or total <= 0:
        return 0.0
    ranks = np.arange(1, n + 1, dtype=float)
    gini = 2.0 * float(np.dot(ranks, values)) / (n * total) - (n + 1) / n
    return min(max(0.0, gini), (n - 1) / n)


def tier_for(balance: float, percentage: float, config: WhaleTierConfig | None = None) -> WhaleTier:
    """Return the first tier whose percentage or balance threshold is met."""
    cfg = config or WhaleTierConfig()
    if percentage >= cfg.mega_percentage or balance >= cfg.mega_balance:
        return "mega"
    if percentage >= cfg.whale_percentage or balance >= cfg.whale_balance:
        return "whale"
    if percentage >= cfg.dolphin_percentage or balance >= cfg.dolphin_balance:
        return "dolphin"
    return "fish"


class WhaleTierClassifier:
    """Partition a holder snapshot into mega whales, whales and dolphins.

    Top-N concentration reads the first N holders in the order given, so
    callers should pass a :class:`RankedHolders` (or a list already sorted
    by balance, descending). An unsorted plain list is still classified but
    logs a warning.
    """

    def __init__(self, *, config: WhaleTierConfig | None = None) -> None:
        self._cfg = config or WhaleTierConfig()

    def classify(
        self,
        holders: RankedHolders | Sequence[HolderRecord | Mapping[str, Any]],
        symbol: str = "",
    ) -> WhaleTierAnalysis:
        """Classify every holder and compute concentration.

        Args:
            holders: Holder snapshot, ideally sorted by balance descending.
            symbol: Token symbol, used for logging only.

        Returns:
            WhaleTierAnalysis; empty input yields empty lists and zero figures.
        """
        if isinstance(holders, RankedHolders):
            records = list(holders)
        else:
            records = parse_holders(holders)
            if not is_sorted_by_balance_desc(records):
                logger.warning(
                    "Holders for %s are not sorted by balance; top-N concentration "
                    "reflects input order",
                    symbol or "token",
                )

        amounts = [float(h.amount) for h in records]
        total_supply = sum(amounts)

        tiers: dict[WhaleTier, list[WhaleHolder]] = {"mega": [], "whale": [], "dolphin": []}
        for record, amount in zip(records, amounts):
            percentage = amount / total_supply * 100 if total_supply > 0 else 0.0
            tier = tier_for(amount, percentage, self._cfg)
            if tier == "fish":
                continue
            label = exchange_label(record.address)
            tiers[tier].append(
                WhaleHolder(
                    address=record.address,
                    balance=str(record.balance),
                    balance_formatted=str(record.amount),
                    percentage=percentage,
                    tier=tier,
                    is_exchange=label is not None,
                    label=label or TIER_DISPLAY_NAMES[tier],
                )
            )

        concentration = self._concentration(amounts, total_supply)
        analysis = WhaleTierAnalysis(
            mega_whales=tuple(tiers["mega"]),
            whales=tuple(tiers["whale"]),
            dolphins=tuple(tiers["dolphin"]),
            total_holders=len(records),
            concentration=concentration,
        )
        logger.debug(
            "Tiers for %s: mega=%d, whale=%d, dolphin=%d, fish=%d, top10=%.2f%%, gini=%.4f",
            symbol or "token",
            len(analysis.mega_whales),
            len(analysis.whales),
            len(analysis.dolphins),
            analysis.fish_count,
            concentration.top10_percentage,
            concentration.gini_coefficient,
        )
        return analysis

    def _concentration(self, amounts: list[float], total_supply: float) -> ConcentrationStats:
        if total_supply <= 0:
            return ConcentrationStats()

        top_small = sum(amounts[: self._cfg.top_small]) / total_supply * 100
        top_large = sum(amounts[: self._cfg.top_large]) / total_supply * 100
        return ConcentrationStats(
            top10_percentage=top_small,
            top50_percentage=top_large,
            gini_coefficient=gini_coefficient(amounts),
            concentration_risk=self._risk_bucket(top_small),
        )

    def _risk_bucket(self, top10_percentage: float) -> ConcentrationRisk:
        if top10_percentage > self._cfg.high_concentration:
            return "High"
        if top10_percentage > self._cfg.medium_concentration:
            return "Medium"
        return "Low"


def classify_whale_tiers(
    holders: RankedHolders | Sequence[HolderRecord | Mapping[str, Any]],
    symbol: str = "",
    config: WhaleTierConfig | None = None,
) -> WhaleTierAnalysis:
    """Functional entry point for :class:`WhaleTierClassifier`."""
    return WhaleTierClassifier(config=config).classify(holders, symbol)
