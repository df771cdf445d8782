# compliance_core/config.py
from pathlib import Path
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from compliance_core.models import CompliancePolicy

ENV_PATH = Path(__file__).resolve().parent.parent / ".env"


class Settings(BaseSettings):
    # Environment settings
    environment: str = "development"
    debug: bool = False
    LOG_LEVEL: str = "INFO"

    # =================================================================
    # ADDRESS HISTORY
    # =================================================================
    ADDRESS_HISTORY_WINDOW_YEARS: int = Field(default=5, gt=0)
    # Policy choice carried over from the application form; confirm with the
    # registration team before changing
    COVERAGE_TOLERANCE: float = Field(default=0.99, gt=0, le=1)

    # =================================================================
    # DBS POLICY
    # =================================================================
    DBS_EXPIRING_SOON_DAYS: int = 90
    DBS_OVERDUE_AFTER_DAYS: int = 28
    DBS_MINIMUM_AGE: int = 16
    DBS_CERTIFICATE_VALIDITY_YEARS: int = 3
    TURNING_AGE_NOTICE_DAYS: int = 90

    CORS_ALLOW_ORIGINS: List[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=str(ENV_PATH),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def compliance_policy(self) -> CompliancePolicy:
        """Build the classifier policy from the configured thresholds."""
        return CompliancePolicy(
            expiring_soon_days=self.DBS_EXPIRING_SOON_DAYS,
            overdue_after_days=self.DBS_OVERDUE_AFTER_DAYS,
            minimum_age=self.DBS_MINIMUM_AGE,
            certificate_validity_years=self.DBS_CERTIFICATE_VALIDITY_YEARS,
            turning_age_notice_days=self.TURNING_AGE_NOTICE_DAYS,
        )


settings = Settings()
