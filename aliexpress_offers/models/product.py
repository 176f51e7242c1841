"""Product data model."""
from dataclasses import dataclass, fields
from typing import Optional

NOT_AVAILABLE = "N/A"
UNKNOWN_STORE = "Unknown Store"
NO_DISCOUNT = "0%"
FREE_SHIPPING = "Free Shipping"
DEFAULT_SCRAPED_TITLE = "AliExpress Product"

# Titles the API hands back when it has nothing better.
PLACEHOLDER_TITLES = ("Unknown Product", "Unable to extract title")


@dataclass
class ScrapedDetails:
    """Title and image scraped from the public product page."""
    title: str = DEFAULT_SCRAPED_TITLE
    image_url: Optional[str] = None


@dataclass
class ProductMetadata:
    """Product information, starting from placeholders and filled in by the API and scraper."""
    title: str = ""
    price: str = NOT_AVAILABLE
    original_price: str = NOT_AVAILABLE
    discount: str = NO_DISCOUNT
    store_name: str = UNKNOWN_STORE
    evaluate_rate: str = NOT_AVAILABLE
    shop_url: str = NOT_AVAILABLE
    category_name: str = NOT_AVAILABLE
    commission_rate: str = NOT_AVAILABLE
    orders: str = NOT_AVAILABLE
    image_url: Optional[str] = None
    shipping_fees: str = FREE_SHIPPING

    def update(self, other: "ProductMetadata") -> None:
        """Take every field from another metadata object."""
        for field in fields(self):
            setattr(self, field.name, getattr(other, field.name))

    def has_real_title(self) -> bool:
        return bool(self.title) and self.title not in PLACEHOLDER_TITLES

    def merge_scraped(self, scraped: ScrapedDetails) -> None:
        """
        Backfill title and image from a scrape.

        Only missing or placeholder values are replaced; the scraper never
        provides price, discount or store fields so those are left alone.
        """
        if not self.has_real_title():
            self.title = scraped.title
        if not self.image_url:
            self.image_url = scraped.image_url
