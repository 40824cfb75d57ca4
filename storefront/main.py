"""
Storefront Application

Lindocare baby-products storefront: guest cart and wishlist kept in device
storage, replayed to the Lindo backend when the shopper signs in.
"""

import os
import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.templating import Jinja2Templates
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

from .routes import (
    admin_router,
    auth_router,
    cart_router,
    catalog_router,
    checkout_router,
    wishlist_router,
)
from .routes.deps import DEVICE_ID_HEADER, get_device_session
from .core.config import settings
from .core.session import DeviceSession, session_manager
from .services.lindo_client import LindoAPIError, LindoClientError, NotAuthenticatedError

# Load environment variables
load_dotenv()

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

ENDPOINTS = {
    "auth": "/api/auth",
    "cart": "/api/cart",
    "wishlist": "/api/wishlist",
    "products": "/api/products/{id}",
    "category": "/api/category/{name}",
    "search": "/api/search",
    "checkout": "/api/checkout",
    "payment": "/api/payment/verify",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info("Storefront starting up...")
    logger.info(f"Lindo backend: {settings.api_base_url}")

    owns_client = session_manager.http_client is None
    if owns_client:
        session_manager.http_client = httpx.AsyncClient(timeout=settings.request_timeout)

    yield

    logger.info("Storefront shutting down...")
    removed = session_manager.cleanup_old_sessions()
    logger.debug(f"Dropped {removed} idle device session(s)")
    if owns_client:
        await session_manager.http_client.aclose()
        session_manager.http_client = None


# Create FastAPI app
app = FastAPI(
    title="Lindocare Storefront",
    description="Baby-products storefront with guest-to-account cart and wishlist sync",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=[DEVICE_ID_HEADER],
)

templates_dir = os.path.join(os.path.dirname(__file__), "templates")
templates = Jinja2Templates(directory=templates_dir) if os.path.exists(templates_dir) else None


@app.exception_handler(LindoClientError)
async def lindo_error_handler(request: Request, exc: LindoClientError):
    """Backend failures that escape a page controller"""
    status_code = 502
    if isinstance(exc, NotAuthenticatedError):
        status_code = 401
    elif isinstance(exc, LindoAPIError) and exc.status_code in (401, 404):
        status_code = exc.status_code
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


# Include routers
app.include_router(auth_router)
app.include_router(cart_router)
app.include_router(wishlist_router)
app.include_router(catalog_router)
app.include_router(checkout_router)
app.include_router(admin_router)


@app.get("/")
async def home(request: Request, session: DeviceSession = Depends(get_device_session)):
    """Storefront landing page"""
    if templates:
        return templates.TemplateResponse(
            request,
            "index.html",
            {
                "title": settings.app_name,
                "currency": settings.currency,
                "api_base_url": settings.api_base_url,
                "header": session.header.snapshot(),
                "endpoints": ENDPOINTS,
            },
            headers={DEVICE_ID_HEADER: session.device_id},
        )
    return {
        "message": "Lindocare Storefront API",
        "docs": "/docs",
        "endpoints": ENDPOINTS,
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": "storefront",
        "backend": settings.api_base_url,
        "devices": len(session_manager.sessions),
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "storefront.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
