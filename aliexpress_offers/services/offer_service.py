from typing import List, Optional
import logging

from aliexpress_offers.core.offer_config import OFFER_SHAPES, OfferShape, candidate_source_urls
from aliexpress_offers.schemas.request_schemas import OfferItem
from aliexpress_offers.services.affiliate_api import AffiliateApiClient

logger = logging.getLogger(__name__)

class OfferService:
    """Generates one affiliate link per offer shape, one offer at a time."""

    def __init__(self, api_client: AffiliateApiClient):
        self.api_client = api_client

    async def _generate_offer(self, shape: OfferShape, product_id: str) -> OfferItem:
        target_url = shape.target_url(product_id)
        link: Optional[str] = None

        for attempt, source_url in enumerate(candidate_source_urls(target_url), start=1):
            link = await self.api_client.generate_affiliate_link(source_url)
            if link:
                break
            logger.info(f"Attempt {attempt} failed for {shape.name}")

        if not link:
            logger.warning(f"No affiliate link for {shape.name}, using target URL")

        return OfferItem(name=shape.name, link=link or target_url, success=bool(link))

    async def generate_all_offers(self, product_id: str) -> List[OfferItem]:
        """
        Generate every offer for a product.

        Always returns one item per offer shape, in table order, whatever
        the upstream API does.
        """
        offers = []
        for shape in OFFER_SHAPES:
            offers.append(await self._generate_offer(shape, product_id))

        succeeded = sum(offer.success for offer in offers)
        logger.info(f"Generated {succeeded}/{len(offers)} affiliate links for {product_id}")
        return offers
