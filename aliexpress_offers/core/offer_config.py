"""Offer shapes and the source-URL retry policy used for affiliate links."""
from dataclasses import dataclass
from typing import Callable, List, Tuple

SHARE_REDIRECT_URL = "https://star.aliexpress.com/share/share.htm?redirectUrl={target}"


@dataclass(frozen=True)
class OfferShape:
    """A named promotional URL template, keyed on the product id."""
    name: str
    url_template: str

    def target_url(self, product_id: str) -> str:
        return self.url_template.format(product_id=product_id)


# Order is part of the response contract.
OFFER_SHAPES: Tuple[OfferShape, ...] = (
    OfferShape(
        "Coin Page Offer",
        "https://m.aliexpress.com/p/coin-index/index.html?_immersiveMode=true&productIds={product_id}",
    ),
    OfferShape("Direct Product Link", "https://www.aliexpress.com/item/{product_id}.html?sourceType=620"),
    OfferShape("Super Deals", "https://www.aliexpress.com/item/{product_id}.html?sourceType=562"),
    OfferShape("Big Save Discount", "https://www.aliexpress.com/item/{product_id}.html?sourceType=680"),
    OfferShape("Limited Discount", "https://www.aliexpress.com/item/{product_id}.html?sourceType=561"),
    OfferShape("Potential Discount", "https://www.aliexpress.com/item/{product_id}.html?sourceType=504"),
    OfferShape("Bundle Direct", "https://www.aliexpress.com/item/{product_id}.html?sourceType=570"),
    OfferShape(
        "Bundle Deals Page",
        "https://www.aliexpress.com/ssr/300000512/BundleDeals2?&pha_manifest=ssr&productIds={product_id}",
    ),
)


def direct_source(target_url: str) -> str:
    return target_url


def share_redirect_source(target_url: str) -> str:
    # The affiliate API resolves through the wrapper; target is not encoded.
    return SHARE_REDIRECT_URL.format(target=target_url)


# Tried in order for every offer; the first one that yields a link wins.
SOURCE_URL_POLICY: Tuple[Callable[[str], str], ...] = (
    direct_source,
    share_redirect_source,
)


def candidate_source_urls(target_url: str) -> List[str]:
    """Source URLs to submit for one offer, in attempt order."""
    return [build(target_url) for build in SOURCE_URL_POLICY]
