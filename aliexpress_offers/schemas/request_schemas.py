from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional

from aliexpress_offers.models.product import ProductMetadata

class ProductRequest(BaseModel):
    """Lookup request. Every field is optional here so missing values get a clear 400."""
    model_config = ConfigDict(populate_by_name=True)

    url: Optional[str] = None
    app_key: Optional[str] = Field(None, alias="appKey")
    app_secret: Optional[str] = Field(None, alias="appSecret")
    tracking_id: Optional[str] = Field(None, alias="trackingId")

    def has_credentials(self) -> bool:
        return all(
            value and value.strip()
            for value in (self.app_key, self.app_secret, self.tracking_id)
        )

class OfferItem(BaseModel):
    """One generated offer; link falls back to the raw target URL on failure."""
    name: str
    link: str
    success: bool

class ProductResponse(BaseModel):
    """Product lookup result with its eight offers."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    product_id: str = Field(alias="productId")
    title: str
    image_url: Optional[str] = Field(None, alias="imageUrl")
    price: str
    original_price: str = Field(alias="originalPrice")
    discount: str
    store_name: str = Field(alias="storeName")
    evaluate_rate: str = Field(alias="evaluateRate")
    shop_url: str = Field(alias="shopUrl")
    category_name: str = Field(alias="categoryName")
    commission_rate: str = Field(alias="commissionRate")
    orders: str
    shipping_fees: str
    searched_at: str = Field(alias="searchedAt")
    offers: List[OfferItem]

    @classmethod
    def build(
        cls,
        response_id: str,
        product_id: str,
        metadata: ProductMetadata,
        searched_at: str,
        offers: List[OfferItem],
    ) -> "ProductResponse":
        return cls(
            id=response_id,
            product_id=product_id,
            title=metadata.title,
            image_url=metadata.image_url,
            price=metadata.price,
            original_price=metadata.original_price,
            discount=metadata.discount,
            store_name=metadata.store_name,
            evaluate_rate=metadata.evaluate_rate,
            shop_url=metadata.shop_url,
            category_name=metadata.category_name,
            commission_rate=metadata.commission_rate,
            orders=metadata.orders,
            shipping_fees=metadata.shipping_fees,
            searched_at=searched_at,
            offers=offers,
        )

class ErrorResponse(BaseModel):
    message: str
