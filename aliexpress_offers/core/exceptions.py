class AffiliateApiError(Exception):
    """Raised when the affiliate API rejects a call or returns no usable data."""


class ProductNotFoundError(AffiliateApiError):
    """Raised when a product detail response carries no products."""
