"""Engine policy settings.

Every field defaults to the production constant; override through
LEDGER_-prefixed environment variables or the .env file, e.g.

    LEDGER_COOLDOWN_SECONDS=3600
    LEDGER_MIN_CONFIDENCE_BPS=9500
"""

from datetime import timedelta

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from portfolio_ledger.domain.models.policy import RebalancePolicy


class LedgerSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="LEDGER_", extra="ignore")

    cooldown_seconds: int = Field(default=86_400, ge=0)
    max_price_age_seconds: int = Field(default=3_600, ge=0)
    min_confidence_bps: int = Field(default=9_000, ge=0, le=10_000)
    slippage_bps: int = Field(default=200, ge=0, le=10_000)
    performance_interval_seconds: int = Field(default=3_600, ge=0)
    max_assets: int = Field(default=20, gt=0)

    def to_policy(self) -> RebalancePolicy:
        return RebalancePolicy(
            cooldown=timedelta(seconds=self.cooldown_seconds),
            max_price_age=timedelta(seconds=self.max_price_age_seconds),
            min_confidence_bps=self.min_confidence_bps,
            slippage_bps=self.slippage_bps,
            performance_interval=timedelta(seconds=self.performance_interval_seconds),
            max_assets=self.max_assets,
        )
