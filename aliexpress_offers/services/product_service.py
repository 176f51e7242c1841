from datetime import datetime, timezone
from typing import Optional
import logging
import time

import httpx
from fastapi import HTTPException

from aliexpress_offers.core.config import Settings, get_settings
from aliexpress_offers.core.url_normalizer import is_supported_url, normalize_product_id
from aliexpress_offers.models.product import ProductMetadata
from aliexpress_offers.schemas.request_schemas import ProductRequest, ProductResponse
from aliexpress_offers.scrapers import AliExpressScraper
from aliexpress_offers.services.affiliate_api import AffiliateApiClient
from aliexpress_offers.services.offer_service import OfferService

logger = logging.getLogger(__name__)

class ProductService:
    """
    Runs a product lookup from raw URL to finished response.

    validate -> normalize URL -> product id -> API details -> scrape backfill
    -> eight offers -> response. Every step runs sequentially within one
    HTTP client that lives for the duration of the request.
    """

    def __init__(self, settings: Optional[Settings] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Initialize the service.

        Args:
            settings: Settings to use; defaults to the cached application settings.
            transport: Optional httpx transport, used to stub upstream hosts.
        """
        self.settings = settings or get_settings()
        self.transport = transport

    def _create_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            transport=self.transport,
            timeout=self.settings.request_timeout,
            headers={"User-Agent": self.settings.user_agent},
        )

    def validate_request(self, request: ProductRequest) -> str:
        """
        Check a request before any network call is made.

        Returns:
            The stripped URL.

        Raises:
            HTTPException: 400 for a missing URL, missing credentials or a
                non-AliExpress URL.
        """
        url = (request.url or "").strip()
        if not url:
            raise HTTPException(status_code=400, detail="URL is required")

        if not request.has_credentials():
            raise HTTPException(status_code=400, detail="API credentials are required")

        if not is_supported_url(url):
            logger.warning(f"Rejected non-AliExpress URL: {url}")
            raise HTTPException(status_code=400, detail="Please provide a valid AliExpress URL")

        return url

    async def fetch_metadata(
        self,
        product_id: str,
        api_client: AffiliateApiClient,
        scraper: AliExpressScraper,
    ) -> ProductMetadata:
        """API details first, then a scrape to backfill title and image."""
        metadata = ProductMetadata()

        try:
            metadata.update(await api_client.get_product_details(product_id))
        except Exception as e:
            logger.warning(f"API failed for {product_id}, falling back to scraping: {e}")

        scraped = await scraper.get_product_details(product_id)
        metadata.merge_scraped(scraped)
        return metadata

    async def get_product(self, request: ProductRequest) -> ProductResponse:
        """
        Resolve a product and build its response.

        Raises:
            HTTPException: 400 for invalid input or an unresolvable product id.
        """
        url = self.validate_request(request)

        async with self._create_client() as client:
            product_id = await normalize_product_id(url, client)
            if not product_id:
                raise HTTPException(status_code=400, detail="Could not extract product ID from URL")

            api_client = AffiliateApiClient(
                client,
                self.settings,
                app_key=request.app_key,
                app_secret=request.app_secret,
                tracking_id=request.tracking_id,
            )
            scraper = AliExpressScraper(client, self.settings)

            metadata = await self.fetch_metadata(product_id, api_client, scraper)
            offers = await OfferService(api_client).generate_all_offers(product_id)

        searched_at = datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
        return ProductResponse.build(
            response_id=f"{product_id}-{int(time.time() * 1000)}",
            product_id=product_id,
            metadata=metadata,
            searched_at=searched_at,
            offers=offers,
        )
