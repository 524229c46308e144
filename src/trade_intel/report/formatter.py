"""Report formatter for trade analyses and whale intelligence.

This module transforms TradeAnalysis and EnhancedWhaleIntelligence objects
into human-readable reports for Telegram and plain text.
"""

from __future__ import annotations

from typing import Literal

from trade_intel.report.models import FormattedReport
from trade_intel.trade.models import Recommendation, TradeAnalysis
from trade_intel.trade.onchain_adjustment import BILLION, MILLION, THOUSAND
from trade_intel.trade.onchain_adjustment import format_currency as _format_scaled
from trade_intel.whale.models import EnhancedWhaleIntelligence, WhaleHolder
from trade_intel.whale.tiers import TIER_DISPLAY_NAMES

RECOMMENDATION_ICONS: dict[Recommendation, str] = {
    Recommendation.STRONG_BUY: "🟢",
    Recommendation.BUY: "🟢",
    Recommendation.HOLD: "🟡",
    Recommendation.AVOID: "🔴",
    Recommendation.STRONG_AVOID: "🔴",
}

DIRECTION_ICONS = {"bullish": "📈", "bearish": "📉", "neutral": "➖"}

# Holders listed per tier in detailed reports
MAX_LISTED_HOLDERS = 5

_TELEGRAM_SPECIAL_CHARS = "_*[]()~`>#+-=|{}.!"


def truncate_address(address: str, chars: int = 4) -> str:
    """Truncate an Ethereum address to 0x1234...5678 format."""
    if len(address) < chars * 2 + 4:
        return address
    return f"{address[: chars + 2]}...{address[-chars:]}"


def format_currency(amount: float, unit: Literal["K", "M", "B"] | None = None) -> str:
    """Format a USD amount, picking K/M/B automatically when no unit is given."""
    if unit is None:
        magnitude = abs(amount)
        if magnitude >= BILLION:
            unit = "B"
        elif magnitude >= MILLION:
            unit = "M"
        elif magnitude >= THOUSAND:
            unit = "K"
        else:
            return f"${amount:,.2f}"
    return _format_scaled(amount, unit)


def format_percentage(value: float, decimals: int = 1) -> str:
    return f"{value:.{decimals}f}%"


def tier_display_name(tier: str) -> str:
    return TIER_DISPLAY_NAMES.get(tier, tier.title())


def escape_telegram_markdown(text: str) -> str:
    """Escape special Telegram MarkdownV2 characters."""
    for char in _TELEGRAM_SPECIAL_CHARS:
        text = text.replace(char, f"\\{char}")
    return text


class ReportFormatter:
    """Formats analyses into multi-channel reports.

    Supports two verbosity levels:
    - compact: Verdict and confidence only
    - detailed: Full context (metrics, key points, tiers, reasoning)
    """

    def __init__(
        self,
        verbosity: Literal["compact", "detailed"] = "detailed",
    ) -> None:
        self.verbosity = verbosity

    def format_trade(self, analysis: TradeAnalysis) -> FormattedReport:
        """Format a trade analysis.

        Args:
            analysis: The analysis to format.

        Returns:
            FormattedReport with all channel formats.
        """
        rec = analysis.recommendation
        icon = RECOMMENDATION_ICONS[rec]
        verdict = rec.value.replace("_", " ")
        title = f"{icon} {analysis.trading_pair}: {verdict} ({analysis.confidence}% confidence)"

        metrics = analysis.risk_metrics
        summary = [
            f"Recommendation: {verdict} ({analysis.confidence}%)",
            f"Risk/Reward: {metrics.risk_reward_ratio:.2f}:1",
            f"Profit: {format_percentage(metrics.profit_percentage, 2)} | "
            f"Loss: {format_percentage(metrics.loss_percentage, 2)}",
        ]

        if self.verbosity == "compact":
            body = (
                f"{analysis.trading_pair}: {verdict} at {analysis.confidence}% confidence, "
                f"ratio {metrics.risk_reward_ratio:.2f}:1"
            )
        else:
            body = "\n".join([*summary, "", analysis.analysis, *self._bullets(analysis.key_points)])

        plain_lines = [
            f"TRADE ANALYSIS: {analysis.trading_pair}",
            "=" * 30,
            "",
            *summary,
            "",
            analysis.analysis,
        ]
        if analysis.key_points:
            plain_lines += ["", "Key points:", *self._bullets(analysis.key_points)]

        esc = escape_telegram_markdown
        md_lines = [
            f"{icon} *{esc(analysis.trading_pair)}: {esc(verdict)}*",
            "",
            f"*Confidence:* {analysis.confidence}%",
            f"*Risk/Reward:* {esc(f'{metrics.risk_reward_ratio:.2f}:1')}",
            f"*Profit:* {esc(format_percentage(metrics.profit_percentage, 2))} \\| "
            f"*Loss:* {esc(format_percentage(metrics.loss_percentage, 2))}",
            "",
            esc(analysis.analysis),
        ]
        if self.verbosity == "detailed" and analysis.key_points:
            md_lines += ["", *(f"• {esc(point)}" for point in analysis.key_points)]

        return FormattedReport(
            title=title,
            body=body,
            telegram_markdown="\n".join(md_lines),
            plain_text="\n".join(plain_lines),
        )

    def format_whales(self, intel: EnhancedWhaleIntelligence) -> FormattedReport:
        """Format a whale intelligence bundle."""
        tiers = intel.tiers
        behavior = intel.behavior
        impact = intel.predictions.price_impact
        advice = intel.predictions.recommendation
        conc = tiers.concentration
        icon = DIRECTION_ICONS[impact.direction]

        title = f"{icon} {intel.symbol} whales: {advice.action} ({impact.direction}, {impact.confidence}%)"

        summary = [
            f"Holders: {tiers.total_holders} "
            f"(mega {len(tiers.mega_whales)}, whale {len(tiers.whales)}, "
            f"dolphin {len(tiers.dolphins)})",
            f"Top 10: {format_percentage(conc.top10_percentage)} | "
            f"Top 50: {format_percentage(conc.top50_percentage)} | "
            f"Gini: {conc.gini_coefficient:.4f} ({conc.concentration_risk} risk)",
            f"Activity: {behavior.recent_activity} | "
            f"Buy {format_percentage(behavior.patterns.buy_pressure)} / "
            f"Sell {format_percentage(behavior.patterns.sell_pressure)} / "
            f"Hodl {format_percentage(behavior.patterns.hodl_strength)}",
            f"Impact: {impact.direction} {impact.magnitude} over {impact.timeframe} "
            f"({impact.confidence}%)",
            f"Action: {advice.action} ({advice.risk_level} risk)",
        ]

        if self.verbosity == "compact":
            body = (
                f"{intel.symbol}: {advice.action}, {impact.direction} {impact.magnitude} "
                f"impact, {advice.risk_level} risk"
            )
        else:
            body = "\n".join([*summary, *self._bullets(advice.reasoning)])

        plain_lines = [f"WHALE INTELLIGENCE: {intel.symbol}", "=" * 30, "", *summary]
        if self.verbosity == "detailed":
            for name, holders in (
                ("mega", tiers.mega_whales),
                ("whale", tiers.whales),
                ("dolphin", tiers.dolphins),
            ):
                if holders:
                    plain_lines += ["", f"{tier_display_name(name)}s:", *self._holder_lines(holders)]
        if advice.reasoning:
            plain_lines += ["", "Reasoning:", *self._bullets(advice.reasoning)]
        plain_lines += ["", f"Updated: {intel.last_updated.isoformat()}"]

        esc = escape_telegram_markdown
        md_lines = [f"{icon} *{esc(intel.symbol)} Whale Intelligence*", ""]
        md_lines += [esc(line) for line in summary]
        if self.verbosity == "detailed" and advice.reasoning:
            md_lines += ["", *(f"• {esc(reason)}" for reason in advice.reasoning)]

        return FormattedReport(
            title=title,
            body=body,
            telegram_markdown="\n".join(md_lines),
            plain_text="\n".join(plain_lines),
        )

    @staticmethod
    def _bullets(lines: tuple[str, ...]) -> list[str]:
        return [f"- {line}" for line in lines]

    @staticmethod
    def _holder_lines(holders: tuple[WhaleHolder, ...]) -> list[str]:
        lines = [
            f"- {truncate_address(h.address)} {h.label}: "
            f"{h.balance_formatted} ({format_percentage(h.percentage, 2)})"
            for h in holders[:MAX_LISTED_HOLDERS]
        ]
        if len(holders) > MAX_LISTED_HOLDERS:
            lines.append(f"- ... and {len(holders) - MAX_LISTED_HOLDERS} more")
        return lines
