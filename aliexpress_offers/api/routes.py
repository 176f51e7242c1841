"""API route handlers."""
from fastapi import APIRouter, Depends, HTTPException
from typing import Dict
import logging
import traceback

from aliexpress_offers.core.dependencies import get_product_service
from aliexpress_offers.schemas.request_schemas import ErrorResponse, ProductRequest, ProductResponse
from aliexpress_offers.services.product_service import ProductService

logger = logging.getLogger(__name__)
router = APIRouter()

@router.post(
    "/product",
    response_model=ProductResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def get_product(
    request: ProductRequest,
    service: ProductService = Depends(get_product_service),
) -> ProductResponse:
    """
    Look up an AliExpress product and generate its affiliate offers.

    Args:
        request: URL (or text containing one) plus the caller's API credentials.

    Returns:
        Product metadata and eight offers in fixed order.

    Raises:
        HTTPException: 400 for bad input, 500 for anything unexpected.
    """
    logger.info(f"Received product request for URL: {request.url}")
    try:
        return await service.get_product(request)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error processing product: {e}")
        logger.error(traceback.format_exc())
        raise HTTPException(status_code=500, detail=str(e) or "Failed to process product")

@router.get("/health")
async def get_health() -> Dict[str, str]:
    """Get the health status of the API."""
    return {"status": "healthy"}
