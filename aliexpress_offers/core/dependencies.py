from aliexpress_offers.core.config import get_settings
from aliexpress_offers.services.product_service import ProductService

def get_product_service() -> ProductService:
    """Get product service instance"""
    return ProductService(get_settings())
