from pydantic import Field
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Application settings and configuration."""

    # API Configuration
    alpha_vantage_api_key: str = Field(default="demo", env="ALPHA_VANTAGE_API_KEY")
    alpha_vantage_base_url: str = Field(default="https://www.alphavantage.co/query")
    request_timeout: float = Field(default=30.0, env="REQUEST_TIMEOUT")

    # Rate limiting (free tier allows roughly 5 calls per minute)
    retry_delay_seconds: float = Field(default=12.0, env="RETRY_DELAY_SECONDS")
    max_rate_limit_retries: int = Field(default=1, env="MAX_RATE_LIMIT_RETRIES")

    # Symbol resolution
    primary_exchange_suffix: str = Field(default=".NS")
    alternate_exchange_suffix: str = Field(default=".BSE")
    target_region: str = Field(default="India", env="TARGET_REGION")

    # Lookup / display
    lookup_debounce_seconds: float = Field(default=0.5, env="LOOKUP_DEBOUNCE_SECONDS")
    currency_symbol: str = Field(default="₹", env="CURRENCY_SYMBOL")

    # Logging
    log_level: str = Field(default="INFO", env="LOG_LEVEL")
    log_file: str = Field(default="stock_analyzer.log", env="LOG_FILE")

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


# Global settings instance
settings = Settings()


class AnalysisConfig:
    """Constants for the synthetic series and level derivation."""

    SERIES_LENGTH = 30

    # Fraction of the session range used as the typical synthetic daily range
    AVERAGE_RANGE_FACTOR = 0.3

    MIN_PRICE = 0.01

    # Percentile positions in the pooled price distribution
    SUPPORT_QUANTILES = (0.10, 0.25, 0.40)
    RESISTANCE_QUANTILES = (0.60, 0.75, 0.90)

    # Short / medium / long term multiples of base volatility
    TARGET_MULTIPLIERS = (0.5, 1.0, 1.5)


analysis_config = AnalysisConfig()
