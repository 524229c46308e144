"""Trade scoring: risk metrics, rule-based recommendation and on-chain adjustment."""

from trade_intel.trade.models import (
    BlockchainAdjustment,
    BlockchainInsightSummary,
    PositionSize,
    Recommendation,
    RiskMetrics,
    TradeAnalysis,
    TradeSetup,
)
from trade_intel.trade.onchain_adjustment import (
    OnChainThresholds,
    calculate_blockchain_adjustment,
    summarize_blockchain_data,
)
from trade_intel.trade.recommendation import (
    RecommendationConfig,
    ScoringState,
    TradeRecommendationEngine,
    generate_recommendation,
)
from trade_intel.trade.risk import RiskThresholds, calculate_risk_metrics
from trade_intel.trade.validation import (
    InvalidTradeSetup,
    ensure_valid_trade_setup,
    parse_leverage,
    parse_position_size,
    trade_setup_from_form,
    validate_trade_setup,
)

__all__ = [
    "BlockchainAdjustment",
    "BlockchainInsightSummary",
    "InvalidTradeSetup",
    "OnChainThresholds",
    "PositionSize",
    "Recommendation",
    "RecommendationConfig",
    "RiskMetrics",
    "RiskThresholds",
    "ScoringState",
    "TradeAnalysis",
    "TradeRecommendationEngine",
    "TradeSetup",
    "calculate_blockchain_adjustment",
    "calculate_risk_metrics",
    "ensure_valid_trade_setup",
    "generate_recommendation",
    "parse_leverage",
    "parse_position_size",
    "summarize_blockchain_data",
    "trade_setup_from_form",
    "validate_trade_setup",
]
