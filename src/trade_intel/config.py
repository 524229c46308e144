"""Configuration management service with Pydantic Settings.

This module provides centralized configuration for the trade intelligence
engines, loading and validating environment variables. Every section
converts to the frozen config dataclass its engine consumes, so engines stay
usable without the environment.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from decimal import Decimal
from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from trade_intel.ingestor.onchain import OnChainBuilderConfig
from trade_intel.trade.recommendation import RecommendationConfig
from trade_intel.trade.risk import RiskThresholds
from trade_intel.whale.behavior import DEFAULT_HISTORICAL_ACCURACY, WhaleBehaviorConfig
from trade_intel.whale.prediction import WhalePredictionConfig
from trade_intel.whale.tiers import WhaleTierConfig

_ENV_FILE = ".env"
_ENV_FILE_ENCODING = "utf-8"


class RiskSettings(BaseSettings):
    """Risk-metric thresholds, in percent of entry price."""

    model_config = SettingsConfigDict(env_prefix="RISK_", extra="ignore")

    min_risk_reward_ratio: float = Field(
        default=1.5,
        alias="RISK_MIN_RISK_REWARD_RATIO",
        gt=0.0,
        le=100.0,
        description="Ratio below which a setup is flagged",
    )
    max_acceptable_loss_pct: float = Field(
        default=5.0,
        alias="RISK_MAX_ACCEPTABLE_LOSS_PCT",
        gt=0.0,
        le=100.0,
        description="Stop-loss distance above which a warning is emitted",
    )
    high_risk_loss_pct: float = Field(
        default=10.0,
        alias="RISK_HIGH_RISK_LOSS_PCT",
        gt=0.0,
        le=100.0,
        description="Stop-loss distance that forces STRONG_AVOID",
    )
    min_profit_target_pct: float = Field(
        default=3.0,
        alias="RISK_MIN_PROFIT_TARGET_PCT",
        ge=0.0,
        le=1000.0,
        description="Profit target below which costs may not be covered",
    )
    high_profit_target_pct: float = Field(
        default=15.0,
        alias="RISK_HIGH_PROFIT_TARGET_PCT",
        ge=0.0,
        le=1000.0,
        description="Profit target above which confidence is raised",
    )

    def to_config(self) -> RiskThresholds:
        return RiskThresholds(
            min_risk_reward_ratio=self.min_risk_reward_ratio,
            max_acceptable_loss_pct=self.max_acceptable_loss_pct,
            high_risk_loss_pct=self.high_risk_loss_pct,
            min_profit_target_pct=self.min_profit_target_pct,
            high_profit_target_pct=self.high_profit_target_pct,
        )


class RecommendationSettings(BaseSettings):
    """Recommendation engine bounds and leverage cut-offs."""

    model_config = SettingsConfigDict(env_prefix="RECOMMENDATION_", extra="ignore")

    min_confidence: int = Field(
        default=20,
        alias="RECOMMENDATION_MIN_CONFIDENCE",
        ge=0,
        le=100,
        description="Lower confidence clamp",
    )
    max_confidence: int = Field(
        default=95,
        alias="RECOMMENDATION_MAX_CONFIDENCE",
        ge=0,
        le=100,
        description="Upper confidence clamp",
    )
    leverage_confidence_floor: int = Field(
        default=25,
        alias="RECOMMENDATION_LEVERAGE_CONFIDENCE_FLOOR",
        ge=0,
        le=100,
        description="Confidence floor applied after the leverage adjustment",
    )
    moderate_leverage: float = Field(
        default=5.0,
        alias="RECOMMENDATION_MODERATE_LEVERAGE",
        ge=1.0,
        le=1000.0,
        description="Leverage above which confidence drops by 10",
    )
    high_leverage: float = Field(
        default=10.0,
        alias="RECOMMENDATION_HIGH_LEVERAGE",
        ge=1.0,
        le=1000.0,
        description="Leverage above which confidence drops by 20 with a downgrade",
    )

    def to_config(self, risk: RiskThresholds | None = None) -> RecommendationConfig:
        return RecommendationConfig(
            risk=risk or RiskThresholds(),
            min_confidence=self.min_confidence,
            max_confidence=self.max_confidence,
            leverage_confidence_floor=self.leverage_confidence_floor,
            moderate_leverage=self.moderate_leverage,
            high_leverage=self.high_leverage,
        )


class WhaleSettings(BaseSettings):
    """Whale tier, behaviour and prediction settings."""

    model_config = SettingsConfigDict(env_prefix="WHALE_", extra="ignore")

    mega_percentage: float = Field(
        default=1.0,
        alias="WHALE_MEGA_PERCENTAGE",
        ge=0.0,
        le=100.0,
        description="Supply share (%) qualifying a mega whale",
    )
    mega_balance: float = Field(
        default=1000.0,
        alias="WHALE_MEGA_BALANCE",
        ge=0.0,
        description="Balance qualifying a mega whale",
    )
    whale_percentage: float = Field(
        default=0.1,
        alias="WHALE_WHALE_PERCENTAGE",
        ge=0.0,
        le=100.0,
        description="Supply share (%) qualifying a whale",
    )
    whale_balance: float = Field(
        default=100.0,
        alias="WHALE_WHALE_BALANCE",
        ge=0.0,
        description="Balance qualifying a whale",
    )
    dolphin_percentage: float = Field(
        default=0.01,
        alias="WHALE_DOLPHIN_PERCENTAGE",
        ge=0.0,
        le=100.0,
        description="Supply share (%) qualifying a dolphin",
    )
    dolphin_balance: float = Field(
        default=10.0,
        alias="WHALE_DOLPHIN_BALANCE",
        ge=0.0,
        description="Balance qualifying a dolphin",
    )
    high_concentration: float = Field(
        default=70.0,
        alias="WHALE_HIGH_CONCENTRATION",
        ge=0.0,
        le=100.0,
        description="Top-10 share (%) above which concentration risk is High",
    )
    medium_concentration: float = Field(
        default=40.0,
        alias="WHALE_MEDIUM_CONCENTRATION",
        ge=0.0,
        le=100.0,
        description="Top-10 share (%) above which concentration risk is Medium",
    )
    window_hours: int = Field(
        default=48,
        alias="WHALE_WINDOW_HOURS",
        ge=1,
        le=24 * 30,
        description="Transfer look-back window for behaviour analysis (hours)",
    )
    coordination_window_seconds: int = Field(
        default=3600,
        alias="WHALE_COORDINATION_WINDOW_SECONDS",
        ge=1,
        le=86_400,
        description="Cluster window for coordinated movements (seconds)",
    )
    min_coordinated_transfers: int = Field(
        default=3,
        alias="WHALE_MIN_COORDINATED_TRANSFERS",
        ge=2,
        le=1000,
        description="Minimum transfers in a window to count as coordinated",
    )
    whale_set_size: int = Field(
        default=50,
        alias="WHALE_SET_SIZE",
        ge=1,
        le=10_000,
        description="How many top holders form the whale set",
    )
    strong_pressure: float = Field(
        default=70.0,
        alias="WHALE_STRONG_PRESSURE",
        ge=0.0,
        le=100.0,
        description="Buy/sell pressure (%) above which a prediction turns directional",
    )
    prediction_max_confidence: int = Field(
        default=95,
        alias="WHALE_PREDICTION_MAX_CONFIDENCE",
        ge=0,
        le=100,
        description="Cap on prediction confidence",
    )
    action_confidence: int = Field(
        default=70,
        alias="WHALE_ACTION_CONFIDENCE",
        ge=0,
        le=100,
        description="Confidence above which a directional read becomes BUY or SELL",
    )
    wait_below_confidence: int = Field(
        default=50,
        alias="WHALE_WAIT_BELOW_CONFIDENCE",
        ge=0,
        le=100,
        description="Confidence below which the action is WAIT",
    )
    historical_accuracy: dict[str, float] = Field(
        default_factory=lambda: dict(DEFAULT_HISTORICAL_ACCURACY),
        alias="WHALE_HISTORICAL_ACCURACY",
        description="Historical accuracy by activity label (JSON object)",
    )

    @field_validator("historical_accuracy")
    @classmethod
    def validate_historical_accuracy(cls, v: dict[str, float]) -> dict[str, float]:
        unknown = set(v) - set(DEFAULT_HISTORICAL_ACCURACY)
        if unknown:
            raise ValueError(f"Unknown activity labels in WHALE_HISTORICAL_ACCURACY: {sorted(unknown)}")
        return {**DEFAULT_HISTORICAL_ACCURACY, **v}

    def to_tier_config(self) -> WhaleTierConfig:
        return WhaleTierConfig(
            mega_percentage=self.mega_percentage,
            mega_balance=self.mega_balance,
            whale_percentage=self.whale_percentage,
            whale_balance=self.whale_balance,
            dolphin_percentage=self.dolphin_percentage,
            dolphin_balance=self.dolphin_balance,
            high_concentration=self.high_concentration,
            medium_concentration=self.medium_concentration,
        )

    def to_behavior_config(self) -> WhaleBehaviorConfig:
        return WhaleBehaviorConfig(
            window=timedelta(hours=self.window_hours),
            coordination_window=timedelta(seconds=self.coordination_window_seconds),
            min_coordinated_transfers=self.min_coordinated_transfers,
            whale_set_size=self.whale_set_size,
            historical_accuracy=dict(self.historical_accuracy),
        )

    def to_prediction_config(self) -> WhalePredictionConfig:
        return WhalePredictionConfig(
            strong_pressure=self.strong_pressure,
            max_confidence=self.prediction_max_confidence,
            action_confidence=self.action_confidence,
            wait_below_confidence=self.wait_below_confidence,
        )


class OnChainSettings(BaseSettings):
    """On-chain aggregate thresholds, in token units."""

    model_config = SettingsConfigDict(env_prefix="ONCHAIN_", extra="ignore")

    whale_balance: Decimal = Field(
        default=Decimal("1000000"),
        alias="ONCHAIN_WHALE_BALANCE",
        description="Holder balance above which a holder counts as a whale",
    )
    large_transfer: Decimal = Field(
        default=Decimal("100000"),
        alias="ONCHAIN_LARGE_TRANSFER",
        description="Transfer value above which a transfer counts as large",
    )
    volume_window_hours: int = Field(
        default=24,
        alias="ONCHAIN_VOLUME_WINDOW_HOURS",
        ge=1,
        le=168,
        description="Rolling volume window size (hours)",
    )

    @field_validator("whale_balance", "large_transfer")
    @classmethod
    def validate_positive(cls, v: Decimal) -> Decimal:
        if v <= 0:
            raise ValueError("On-chain thresholds must be > 0")
        return v

    def to_config(self) -> OnChainBuilderConfig:
        return OnChainBuilderConfig(
            whale_balance=self.whale_balance,
            large_transfer=self.large_transfer,
            volume_window=timedelta(hours=self.volume_window_hours),
        )


class Settings(BaseSettings):
    """Main application settings.

    Loads configuration from environment variables with support for
    .env files.

    Example:
        ```python
        from trade_intel.config import get_settings

        settings = get_settings()
        print(settings.risk.min_risk_reward_ratio)
        print(settings.log_level)
        ```
    """

    model_config = SettingsConfigDict(
        env_file=_ENV_FILE,
        env_file_encoding=_ENV_FILE_ENCODING,
        extra="ignore",
    )

    # NOTE: Each nested BaseSettings must be given the same env_file, otherwise it
    # will only read from the process environment (and ignore `.env`).
    risk: RiskSettings = Field(
        default_factory=lambda: RiskSettings(
            _env_file=_ENV_FILE,
            _env_file_encoding=_ENV_FILE_ENCODING,
        )
    )
    recommendation: RecommendationSettings = Field(
        default_factory=lambda: RecommendationSettings(
            _env_file=_ENV_FILE,
            _env_file_encoding=_ENV_FILE_ENCODING,
        )
    )
    whale: WhaleSettings = Field(
        default_factory=lambda: WhaleSettings(
            _env_file=_ENV_FILE,
            _env_file_encoding=_ENV_FILE_ENCODING,
        )
    )
    onchain: OnChainSettings = Field(
        default_factory=lambda: OnChainSettings(
            _env_file=_ENV_FILE,
            _env_file_encoding=_ENV_FILE_ENCODING,
        )
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        alias="LOG_LEVEL",
        description="Logging level",
    )

    def get_logging_level(self) -> int:
        """Get the numeric logging level."""
        level: int = getattr(logging, self.log_level)
        return level

    def recommendation_config(self) -> RecommendationConfig:
        """Recommendation config with the risk thresholds folded in."""
        return self.recommendation.to_config(risk=self.risk.to_config())

    def redacted_summary(self) -> dict[str, str | dict[str, str]]:
        """Get a summary of the effective settings for debug logging.

        Returns:
            Dictionary of settings grouped by section.
        """
        return {
            "risk": {
                "min_risk_reward_ratio": str(self.risk.min_risk_reward_ratio),
                "max_acceptable_loss_pct": str(self.risk.max_acceptable_loss_pct),
                "high_risk_loss_pct": str(self.risk.high_risk_loss_pct),
            },
            "recommendation": {
                "confidence_bounds": (
                    f"{self.recommendation.min_confidence}-{self.recommendation.max_confidence}"
                ),
                "leverage_confidence_floor": str(self.recommendation.leverage_confidence_floor),
            },
            "whale": {
                "window_hours": str(self.whale.window_hours),
                "whale_set_size": str(self.whale.whale_set_size),
                "high_concentration": str(self.whale.high_concentration),
            },
            "onchain": {
                "whale_balance": str(self.onchain.whale_balance),
                "large_transfer": str(self.onchain.large_transfer),
                "volume_window_hours": str(self.onchain.volume_window_hours),
            },
            "log_level": self.log_level,
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the application settings singleton.

    Returns:
        The Settings instance.

    Raises:
        ValidationError: If environment variables have invalid values.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache.

    Useful for testing when you need to reload settings with
    different environment variables.
    """
    get_settings.cache_clear()
