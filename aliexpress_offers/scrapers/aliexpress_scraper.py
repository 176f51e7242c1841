from typing import Dict, Optional, Tuple
import json
import logging
import re

from parsel import Selector

from .base_scraper import BaseScraper
from aliexpress_offers.models.product import DEFAULT_SCRAPED_TITLE, ScrapedDetails

logger = logging.getLogger(__name__)

RUN_PARAMS_PATTERN = re.compile(r"window\.runParams\s*=\s*(\{.*?\});")
THUMBNAIL_SUFFIX_PATTERN = re.compile(r"_\d+x\d+\.(jpg|png|webp).*")
MAX_TITLE_LENGTH = 250

HTML_ENTITIES = (
    ("&amp;", "&"),
    ("&quot;", '"'),
    ("&lt;", "<"),
    ("&gt;", ">"),
)


def clean_title(title: str) -> str:
    for entity, char in HTML_ENTITIES:
        title = title.replace(entity, char)
    return title[:MAX_TITLE_LENGTH].strip()


def clean_image_url(image_url: str) -> str:
    """Make the URL absolute and drop the _NNNxNNN thumbnail suffix."""
    if image_url.startswith("//"):
        image_url = f"https:{image_url}"
    return THUMBNAIL_SUFFIX_PATTERN.sub("", image_url)


class AliExpressScraper(BaseScraper):
    """Scraper for AliExpress product pages."""

    store_name = "aliexpress"

    def get_scraper_config(self) -> Dict[str, str]:
        """Get AliExpress-specific request headers."""
        return {
            "User-Agent": self.settings.user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.5",
            "Referer": "https://www.google.com/",
            "Pragma": "no-cache",
            "Cache-Control": "no-cache",
        }

    def product_url(self, product_id: str) -> str:
        return self.settings.product_page_url.format(product_id=product_id)

    def _extract_run_params(self, selector: Selector) -> Tuple[Optional[str], Optional[str]]:
        """Pull title and image out of the inline window.runParams blob."""
        title = image_url = None
        for script in selector.css("script::text").getall():
            if "window.runParams" not in script:
                continue
            match = RUN_PARAMS_PATTERN.search(script)
            if not match:
                continue
            try:
                params = json.loads(match.group(1))
            except json.JSONDecodeError as e:
                logger.debug(f"Could not parse runParams: {e}")
                continue

            data = params.get("data") or params
            detail = data.get("productDetailModule") or {}
            title = (
                detail.get("title")
                or (data.get("titleModule") or {}).get("subject")
                or data.get("subject")
            )
            images = (data.get("imageModule") or {}).get("imagePathList") or detail.get("imagePathList") or []
            image_url = images[0] if images else None
        return title, image_url

    def _extract_title(self, selector: Selector) -> Optional[str]:
        return (
            selector.css('meta[property="og:title"]::attr(content)').get()
            or selector.css('meta[name="twitter:title"]::attr(content)').get()
            or (selector.css(".product-title-text").xpath("string()").get() or "").strip()
            or (selector.css("h1").xpath("string()").get() or "").strip()
            or (selector.css("title::text").get() or "").strip()
        )

    def _extract_image(self, selector: Selector) -> Optional[str]:
        return (
            selector.css('meta[property="og:image"]::attr(content)').get()
            or selector.css('meta[name="twitter:image"]::attr(content)').get()
            or selector.css(".magnifier-image::attr(src)").get()
            or selector.css(".magnifier-image::attr(data-src)").get()
        )

    def extract_product_info(self, html: str, url: str) -> ScrapedDetails:
        """Extract title and image from AliExpress HTML."""
        selector = Selector(text=html)

        title, image_url = self._extract_run_params(selector)

        if not title:
            title = self._extract_title(selector)
        if not image_url:
            image_url = self._extract_image(selector)

        # Last resort: first image served from the kf/ asset folder
        if not image_url:
            image_url = selector.css('img[src*="kf/"]::attr(src)').get()

        details = ScrapedDetails(
            title=clean_title(title) if title else "",
            image_url=clean_image_url(image_url) if image_url else None,
        )
        if not details.title:
            details.title = DEFAULT_SCRAPED_TITLE

        logger.info(f"Scraped {url}: title={details.title[:60]!r}, image={details.image_url}")
        return details
