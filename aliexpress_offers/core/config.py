"""Application configuration settings."""
from pydantic_settings import BaseSettings
from typing import List
from functools import lru_cache

class Settings(BaseSettings):
    """Application settings.

    API credentials are deliberately absent: they are supplied with every
    request and passed explicitly through the pipeline.
    """

    # Affiliate API settings
    affiliate_api_url: str = "https://api-sg.aliexpress.com/sync"
    api_version: str = "2.0"
    target_currency: str = "USD"
    target_language: str = "EN"
    ship_to_country: str = "DZ"
    request_timeout: float = 30.0  # seconds

    # Product page scraping
    product_page_url: str = "https://www.aliexpress.com/item/{product_id}.html"
    scrape_timeout: float = 15.0  # seconds
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    )

    # Server settings
    cors_origins: List[str] = ["*"]

    # Debug / logging settings
    debug: bool = False
    log_level: str = "INFO"
    log_dir: str = "logs"

    class Config:
        """Pydantic config."""
        env_file = ".env"
        case_sensitive = False
        extra = "allow"  # Allow extra fields

@lru_cache()
def get_settings() -> Settings:
    """Get cached settings."""
    return Settings()
