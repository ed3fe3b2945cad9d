# src/dealcheck/adapters/config.py
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    # App & logging
    ENV: str = Field(default="dev")
    LOG_LEVEL: str = Field(default="INFO")

    # -----------------------------
    # Price search defaults
    # -----------------------------
    MIN_ROI: float = Field(default=13.0)        # percent
    MIN_CASHFLOW: float = Field(default=0.0)    # currency / year

    # 1 = nearest whole dollar, 1000 = nearest $1000 (old decrement-scan behaviour)
    PRICE_GRANULARITY: int = Field(default=1)

    # Bound-finding gives up past sale_price * this
    SEARCH_CEILING_MULTIPLE: float = Field(default=1000.0)

    # False lets the search return prices above the sale price
    CAP_AT_SALE_PRICE: bool = Field(default=True)

    model_config = SettingsConfigDict(
        env_prefix="DEALCHECK_",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("MIN_ROI", mode="before")
    @classmethod
    def _percent_like(cls, v: Any) -> Any:
        if v is None:
            return v
        if isinstance(v, str):
            v = v.strip().replace("%", "")
        try:
            return float(v)
        except Exception as err:
            raise ValueError("MIN_ROI must be numeric or percent-like") from err

    @field_validator("PRICE_GRANULARITY", mode="before")
    @classmethod
    def _granularity_positive(cls, v: Any) -> Any:
        i = int(v)
        if i <= 0:
            raise ValueError("PRICE_GRANULARITY must be > 0")
        return i

    @field_validator("SEARCH_CEILING_MULTIPLE", mode="before")
    @classmethod
    def _ceiling_positive(cls, v: Any) -> Any:
        f = float(v)
        if f <= 1:
            raise ValueError("SEARCH_CEILING_MULTIPLE must be > 1")
        return f


config = AppConfig()
