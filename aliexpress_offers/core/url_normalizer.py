"""Turn user supplied text into an AliExpress product id."""
from typing import Optional
import logging
import re

import httpx

logger = logging.getLogger(__name__)

SUPPORTED_DOMAINS = ("aliexpress.com", "alix.live", "s.click.aliexpress.com")

URL_PATTERN = re.compile(
    r"https?://(?:[a-zA-Z]|[0-9]|[$-_@.&+]|[!*\(\),]|(?:%[0-9a-fA-F][0-9a-fA-F]))+"
)

# Most specific first; the first match wins. ASCII digits only.
PRODUCT_ID_PATTERNS = [
    re.compile(r"[?&]productIds?=(\d+)", re.ASCII),
    re.compile(r"/item/(\d+)\.(?:html|htm)", re.ASCII),
    re.compile(r"/item/(\d+)(?:\?|$)", re.ASCII),
    re.compile(r"/product/(\d+)", re.ASCII),
    re.compile(r"/i/(\d+)", re.ASCII),
    re.compile(r"/p/[^/]+/index\.html[?&]productIds?=(\d+)", re.ASCII),
    re.compile(r"/ssr/.*?[?&]productIds?=(\d+)", re.ASCII),
    re.compile(r"/[a-z0-9]+\.html\?.*?productId(?:s)?=(\d+)", re.ASCII),
]

# Heuristic: may also catch order or phone numbers pasted next to the link.
BARE_NUMBER_PATTERN = re.compile(r"\b\d{10,20}\b", re.ASCII)


def is_supported_url(text: str) -> bool:
    """Check whether the text mentions one of the AliExpress domains."""
    return any(domain in text for domain in SUPPORTED_DOMAINS)


def find_aliexpress_url(text: str) -> str:
    """Return the first AliExpress URL embedded in the text, or the text itself."""
    for url in URL_PATTERN.findall(text):
        if is_supported_url(url):
            return url
    return text


def extract_product_id(text: str) -> Optional[str]:
    """
    Extract a product id from a URL or from free text containing one.

    Args:
        text: A URL, or arbitrary text with a URL somewhere inside it.

    Returns:
        The numeric product id, or None if nothing looks like one.
    """
    target_url = find_aliexpress_url(text)

    for pattern in PRODUCT_ID_PATTERNS:
        match = pattern.search(target_url)
        if match:
            return match.group(1)

    numeric_match = BARE_NUMBER_PATTERN.search(text)
    if numeric_match:
        return numeric_match.group(0)

    return None


async def resolve_redirects(url: str, client: httpx.AsyncClient) -> str:
    """
    Follow redirects for the first AliExpress URL in the text and return where it lands.

    Short links (s.click, alix.live) only reveal the product id after the
    redirect chain. On any network failure the cleaned input URL is returned.
    """
    match = URL_PATTERN.search(find_aliexpress_url(url))
    clean_url = match.group(0) if match else url

    try:
        response = await client.head(clean_url, follow_redirects=True)
        final_url = str(response.url)
        if final_url != clean_url:
            logger.debug(f"Resolved {clean_url} -> {final_url}")
        return final_url
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logger.warning(f"Could not resolve redirects for {clean_url}: {e}")
        return clean_url


async def normalize_product_id(raw: str, client: httpx.AsyncClient) -> Optional[str]:
    """Resolve redirects, then extract the product id from the final URL or the raw input."""
    final_url = await resolve_redirects(raw, client)
    product_id = extract_product_id(final_url) or extract_product_id(raw)
    if product_id:
        logger.info(f"Extracted product id {product_id} from {raw!r}")
    else:
        logger.warning(f"No product id found in {raw!r} (resolved to {final_url})")
    return product_id
