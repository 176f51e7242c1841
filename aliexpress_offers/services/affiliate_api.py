"""Client for the AliExpress affiliate sync API."""
from datetime import datetime, timezone
from typing import Any, Dict, Optional
import logging
import re

import httpx

from aliexpress_offers.core.config import Settings
from aliexpress_offers.core.exceptions import AffiliateApiError, ProductNotFoundError
from aliexpress_offers.core.signature import generate_api_signature
from aliexpress_offers.models.product import (
    FREE_SHIPPING,
    NO_DISCOUNT,
    NOT_AVAILABLE,
    UNKNOWN_STORE,
    ProductMetadata,
)

logger = logging.getLogger(__name__)

PRODUCT_DETAIL_METHOD = "aliexpress.affiliate.productdetail.get"
LINK_GENERATE_METHOD = "aliexpress.affiliate.link.generate"

STORE_ID_PATTERN = re.compile(r"/store/([^/?#]+)")
MOBILE_STORE_URL = "https://m.aliexpress.com/store/{store_id}?shopId={store_id}"


def compute_discount(original_price: Any, sale_price: Any) -> str:
    """
    Percentage saved going from the original to the sale price.

    Both values may carry currency noise ("$40.00 USD"). Anything that does
    not parse to two positive numbers gives "0%".

    >>> compute_discount("$40.00 USD", "$20.00 USD")
    '50.0%'
    """
    try:
        original = float(re.sub(r"[^0-9.]", "", str(original_price)))
        sale = float(re.sub(r"[^0-9.]", "", str(sale_price)))
    except ValueError:
        return NO_DISCOUNT

    if original > 0 and sale > 0:
        return f"{(original - sale) / original * 100:.1f}%"
    return NO_DISCOUNT


def normalize_shop_url(shop_url: Optional[str]) -> str:
    """Rewrite /store/<id>/... links to the short mobile store URL."""
    if not shop_url:
        return NOT_AVAILABLE
    match = STORE_ID_PATTERN.search(shop_url)
    if not match:
        return shop_url
    return MOBILE_STORE_URL.format(store_id=match.group(1))


def _dig(data: Dict, *keys) -> Any:
    """Walk nested dicts, returning None as soon as a level is missing."""
    for key in keys:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data


def _format_price(value: Any) -> str:
    return f"{value} USD" if value not in (None, "") else NOT_AVAILABLE


class AffiliateApiClient:
    """
    Signed calls against the affiliate sync endpoint.

    Credentials belong to the caller and are bound per instance; nothing is
    read from process-wide configuration.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        settings: Settings,
        app_key: str,
        app_secret: str,
        tracking_id: str,
    ):
        self.client = client
        self.settings = settings
        self.app_key = app_key
        self.app_secret = app_secret
        self.tracking_id = tracking_id

    def _signed_params(self, method: str, **extra: str) -> Dict[str, str]:
        """Build the common parameter set plus extras, and sign it."""
        params = {
            "method": method,
            "app_key": self.app_key,
            "sign_method": "sha256",
            "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S"),
            "format": "json",
            "v": self.settings.api_version,
            "tracking_id": self.tracking_id,
            **extra,
        }
        params["sign"] = generate_api_signature(params, self.app_secret)
        return params

    async def get_product_details(self, product_id: str) -> ProductMetadata:
        """
        Fetch product metadata from the product detail endpoint.

        Raises:
            AffiliateApiError: If the API reports an error or returns no product.
            httpx.HTTPError: On network failure.
        """
        params = self._signed_params(
            PRODUCT_DETAIL_METHOD,
            product_ids=product_id,
            target_currency=self.settings.target_currency,
            target_language=self.settings.target_language,
            country=self.settings.ship_to_country,
        )

        logger.info(f"Requesting product details for {product_id}")
        response = await self.client.post(
            self.settings.affiliate_api_url,
            data=params,
            timeout=self.settings.request_timeout,
        )
        try:
            data = response.json()
        except ValueError as e:
            raise AffiliateApiError(f"Invalid JSON from affiliate API (status {response.status_code})") from e

        error = data.get("error_response") if isinstance(data, dict) else None
        if error:
            raise AffiliateApiError(error.get("msg") or "API Error")

        products = _dig(
            data,
            "aliexpress_affiliate_productdetail_get_response",
            "resp_result",
            "result",
            "products",
            "product",
        )
        if not products:
            raise ProductNotFoundError(f"No product data returned for {product_id}")

        product = products[0] if isinstance(products, list) else products
        return self._parse_product(product)

    def _parse_product(self, product: Dict[str, Any]) -> ProductMetadata:
        sale_price = product.get("target_sale_price") or product.get("app_sale_price")
        original_price = product.get("target_original_price") or product.get("original_price")

        discount = product.get("target_discount") or ""
        if not discount and sale_price and original_price:
            discount = compute_discount(original_price, sale_price)

        evaluate_rate = product.get("product_score") or product.get("evaluate_rate") or NOT_AVAILABLE
        shipping_fees = product.get("shipping_fees") or FREE_SHIPPING

        return ProductMetadata(
            title=product.get("product_title") or "Unknown Product",
            price=_format_price(sale_price),
            original_price=_format_price(original_price),
            discount=str(discount) if discount else NO_DISCOUNT,
            store_name=product.get("shop_name") or UNKNOWN_STORE,
            evaluate_rate=str(evaluate_rate),
            shop_url=normalize_shop_url(product.get("shop_url")),
            category_name=product.get("first_level_category_name") or NOT_AVAILABLE,
            commission_rate=str(product.get("commission_rate") or NOT_AVAILABLE),
            orders=str(product.get("lastest_volume") or NOT_AVAILABLE),
            image_url=product.get("product_main_image_url") or product.get("first_image_url"),
            shipping_fees=str(shipping_fees),
        )

    async def generate_affiliate_link(self, source_url: str) -> Optional[str]:
        """
        Ask the API for a tracking link for one source URL.

        Returns the first promotion link, or None on any failure so the
        caller can move on to its next source URL.
        """
        try:
            return await self._request_affiliate_link(source_url)
        except Exception as e:
            logger.error(f"Error generating affiliate link for {source_url}: {e}")
            return None

    async def _request_affiliate_link(self, source_url: str) -> Optional[str]:
        params = self._signed_params(
            LINK_GENERATE_METHOD,
            promotion_link_type="0",
            source_values=source_url,
        )

        response = await self.client.get(
            self.settings.affiliate_api_url,
            params=params,
            timeout=self.settings.request_timeout,
        )
        data = response.json()

        if not isinstance(data, dict):
            logger.error(f"Unexpected link generate response: {data!r}")
            return None

        if data.get("error_response"):
            logger.error(f"API error generating affiliate link: {data['error_response']}")
            return None

        links = _dig(
            data,
            "aliexpress_affiliate_link_generate_response",
            "resp_result",
            "result",
            "promotion_links",
            "promotion_link",
        )
        if not links or not isinstance(links, list):
            logger.debug(f"No promotion links returned for {source_url}")
            return None

        first = links[0]
        return first.get("promotion_link") if isinstance(first, dict) else None
