"""Base scraper implementation."""
from abc import ABC, abstractmethod
from typing import Dict
import logging

import httpx

from aliexpress_offers.core.config import Settings
from aliexpress_offers.models.product import ScrapedDetails

logger = logging.getLogger(__name__)

class BaseScraper(ABC):
    """Base class for product page scrapers."""

    # Store name - must be set in subclasses
    store_name: str = ""

    def __init__(self, client: httpx.AsyncClient, settings: Settings):
        """Initialize the scraper with a shared HTTP client and settings."""
        if not self.store_name:
            raise ValueError("Scraper must define store_name")

        self.client = client
        self.settings = settings

    @abstractmethod
    def get_scraper_config(self) -> Dict[str, str]:
        """Get store-specific request headers."""
        pass

    @abstractmethod
    def product_url(self, product_id: str) -> str:
        """Get the public page URL for a product."""
        pass

    @abstractmethod
    def extract_product_info(self, html: str, url: str) -> ScrapedDetails:
        """Extract product information from HTML content."""
        pass

    async def get_raw_content(self, url: str) -> str:
        """Fetch a page as a browser would and return its HTML."""
        logger.info(f"Fetching page: {url}")
        response = await self.client.get(
            url,
            headers=self.get_scraper_config(),
            timeout=self.settings.scrape_timeout,
            follow_redirects=True,
        )
        response.raise_for_status()
        return response.text

    async def get_product_details(self, product_id: str) -> ScrapedDetails:
        """
        Scrape a product page.

        Never raises: a failed fetch or parse yields the default details so
        the caller can carry on with whatever it already has.
        """
        url = self.product_url(product_id)
        try:
            html = await self.get_raw_content(url)
            return self.extract_product_info(html, url)
        except Exception as e:
            logger.error(f"Scraping error for {url}: {e}")
            return ScrapedDetails()
