"""
Configuration settings for stocksignals.

Uses pydantic-settings for environment variable management with nested models
for the indicator engine, the signal interpreter and logging.
"""

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from stocksignals.config.constants import (
    BOLLINGER_MULTIPLIER,
    BOLLINGER_PERIOD,
    DEFAULT_INDICATORS,
    EMA_FAST_PERIOD,
    EMA_SLOW_PERIOD,
    MACD_FAST_PERIOD,
    MACD_SIGNAL_PERIOD,
    MACD_SLOW_PERIOD,
    RSI_OVERBOUGHT,
    RSI_OVERSOLD,
    RSI_PERIOD,
    SMA_LONG_PERIOD,
    SMA_MEDIUM_PERIOD,
    SMA_SHORT_PERIOD,
    SQUEEZE_LOOKBACK,
    SQUEEZE_RATIO,
)


class IndicatorSettings(BaseSettings):
    """Lookback windows used by the indicator engine."""

    sma_short: int = Field(default=SMA_SHORT_PERIOD, description="Short SMA period")
    sma_medium: int = Field(default=SMA_MEDIUM_PERIOD, description="Medium SMA period")
    sma_long: int = Field(default=SMA_LONG_PERIOD, description="Long SMA period")
    ema_fast: int = Field(default=EMA_FAST_PERIOD, description="Fast EMA period")
    ema_slow: int = Field(default=EMA_SLOW_PERIOD, description="Slow EMA period")
    rsi_period: int = Field(default=RSI_PERIOD, description="RSI period")
    macd_fast: int = Field(default=MACD_FAST_PERIOD, description="MACD fast EMA period")
    macd_slow: int = Field(default=MACD_SLOW_PERIOD, description="MACD slow EMA period")
    macd_signal: int = Field(default=MACD_SIGNAL_PERIOD, description="MACD signal EMA period")
    bollinger_period: int = Field(default=BOLLINGER_PERIOD, description="Bollinger window")
    bollinger_multiplier: float = Field(
        default=BOLLINGER_MULTIPLIER, description="Bollinger standard deviation multiplier"
    )
    default_indicators: str = Field(
        default=DEFAULT_INDICATORS,
        description="Indicator groups computed when none are requested (comma-separated)",
    )

    model_config = SettingsConfigDict(
        env_prefix="INDICATOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator(
        "sma_short",
        "sma_medium",
        "sma_long",
        "ema_fast",
        "ema_slow",
        "rsi_period",
        "macd_fast",
        "macd_slow",
        "macd_signal",
        "bollinger_period",
    )
    @classmethod
    def validate_period(cls, v: int) -> int:
        """Periods must be positive window lengths."""
        if v < 1:
            raise ValueError(f"period must be >= 1, got {v}")
        return v

    @field_validator("bollinger_multiplier")
    @classmethod
    def validate_multiplier(cls, v: float) -> float:
        """Band multiplier must not invert the bands."""
        if v < 0:
            raise ValueError(f"bollinger_multiplier must be >= 0, got {v}")
        return v

    @model_validator(mode="after")
    def validate_macd_order(self) -> "IndicatorSettings":
        """The MACD fast leg must be shorter than the slow leg."""
        if self.macd_fast >= self.macd_slow:
            raise ValueError(
                f"macd_fast ({self.macd_fast}) must be less than macd_slow ({self.macd_slow})"
            )
        return self


class SignalSettings(BaseSettings):
    """Thresholds used by the signal interpreter."""

    rsi_overbought: float = Field(default=RSI_OVERBOUGHT, description="RSI overbought level")
    rsi_oversold: float = Field(default=RSI_OVERSOLD, description="RSI oversold level")
    squeeze_ratio: float = Field(
        default=SQUEEZE_RATIO, description="Band width ratio that counts as a squeeze"
    )
    squeeze_lookback: int = Field(
        default=SQUEEZE_LOOKBACK, description="Bars between compared band widths"
    )

    model_config = SettingsConfigDict(
        env_prefix="SIGNAL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("rsi_overbought", "rsi_oversold")
    @classmethod
    def validate_rsi_level(cls, v: float) -> float:
        """RSI thresholds live on the 0-100 scale."""
        if not 0 <= v <= 100:
            raise ValueError(f"RSI threshold must be within [0, 100], got {v}")
        return v

    @field_validator("squeeze_ratio")
    @classmethod
    def validate_squeeze_ratio(cls, v: float) -> float:
        """Squeeze ratio is a fraction of the earlier width."""
        if not 0 < v <= 1:
            raise ValueError(f"squeeze_ratio must be within (0, 1], got {v}")
        return v

    @field_validator("squeeze_lookback")
    @classmethod
    def validate_squeeze_lookback(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"squeeze_lookback must be >= 1, got {v}")
        return v

    @model_validator(mode="after")
    def validate_rsi_order(self) -> "SignalSettings":
        """Oversold must sit below overbought."""
        if self.rsi_oversold >= self.rsi_overbought:
            raise ValueError(
                f"rsi_oversold ({self.rsi_oversold}) must be less than "
                f"rsi_overbought ({self.rsi_overbought})"
            )
        return self


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    level: str = Field(default="INFO", description="Logging level")
    format: Literal["json", "pretty"] = Field(
        default="pretty", description="Console renderer: json or pretty"
    )
    file_path: Optional[str] = Field(
        default=None, description="Optional log file path"
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


class Settings(BaseSettings):
    """
    Main settings class combining all configuration domains.

    Loads configuration from environment variables and .env file.
    Uses nested models for organized configuration management.
    """

    indicators: IndicatorSettings = Field(default_factory=IndicatorSettings)
    signals: SignalSettings = Field(default_factory=SignalSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance (singleton pattern).

    Returns:
        Singleton Settings instance
    """
    return Settings()
