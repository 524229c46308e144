"""Whale intelligence: tier classification, behaviour analysis and prediction."""

from trade_intel.whale.behavior import (
    WhaleBehaviorAnalyzer,
    WhaleBehaviorConfig,
    analyze_whale_behavior,
)
from trade_intel.whale.models import (
    ConcentrationStats,
    EnhancedWhaleIntelligence,
    PressureMetrics,
    PriceImpact,
    WhaleBehaviorPattern,
    WhaleHolder,
    WhalePrediction,
    WhaleRecommendation,
    WhaleTierAnalysis,
)
from trade_intel.whale.prediction import (
    WhalePredictionConfig,
    WhalePredictionEngine,
    predict_from_whale_activity,
)
from trade_intel.whale.tiers import (
    WhaleTierClassifier,
    WhaleTierConfig,
    classify_whale_tiers,
    gini_coefficient,
)

__all__ = [
    "ConcentrationStats",
    "EnhancedWhaleIntelligence",
    "PressureMetrics",
    "PriceImpact",
    "WhaleBehaviorAnalyzer",
    "WhaleBehaviorConfig",
    "WhaleBehaviorPattern",
    "WhaleHolder",
    "WhalePrediction",
    "WhalePredictionConfig",
    "WhalePredictionEngine",
    "WhaleRecommendation",
    "WhaleTierAnalysis",
    "WhaleTierClassifier",
    "WhaleTierConfig",
    "analyze_whale_behavior",
    "classify_whale_tiers",
    "gini_coefficient",
    "predict_from_whale_activity",
]
