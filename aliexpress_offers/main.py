from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from aliexpress_offers.api.routes import router as api_router
from aliexpress_offers.core.config import get_settings
from aliexpress_offers.core.logging_config import configure_logging
import logging
import traceback

settings = get_settings()
configure_logging(settings)

logger = logging.getLogger(__name__)
logger.info("Starting AliExpress offers API")

# Create FastAPI app
app = FastAPI(
    title="AliExpress Offers API",
    description="API for resolving AliExpress products and generating affiliate offer links",
    version="1.0.0"
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router, prefix="/api")

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail)},
    )

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Invalid request body: {exc.errors()}")
    return JSONResponse(
        status_code=400,
        content={"message": "Invalid request body"},
    )

# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Global exception handler caught: {exc}")
    logger.error(traceback.format_exc())
    return JSONResponse(
        status_code=500,
        content={"message": str(exc) or "Failed to process product"},
    )

# Health check endpoint
@app.get("/health")
def health_check():
    """Check if the API is healthy."""
    return {"status": "healthy"}
