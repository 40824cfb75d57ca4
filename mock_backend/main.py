"""
Mock Lindo Backend

An in-memory stand-in for the Lindo REST API (catalog, carts, wishlists,
orders, DPO payments and users) used for local development and tests.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from dotenv import load_dotenv

from .config import settings
from .database import product_db, user_db
from .routes import auth_router, cart_router, orders_router, products_router, user_router, wishlist_router

# Load environment variables
load_dotenv()

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info("Mock Lindo backend starting up...")
    logger.info(f"Catalog: {len(product_db.products)} products, {len(user_db.users)} user(s)")
    yield
    logger.info("Mock Lindo backend shutting down...")


# Create FastAPI app
app = FastAPI(
    title="Mock Lindo Backend",
    description="In-memory stand-in for the Lindo storefront API",
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
)


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    return [{"loc": list(e.get("loc", ())), "msg": e.get("msg", "")} for e in exc.errors()]


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    """Errors carry a ``message`` field, as the real backend's do"""
    return JSONResponse(status_code=exc.status_code, content={"message": exc.detail})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"message": "Invalid request", "errors": jsonable_errors(exc)},
    )


# Include API routers
app.include_router(products_router)
app.include_router(cart_router)
app.include_router(wishlist_router)
app.include_router(orders_router)
app.include_router(user_router)
app.include_router(auth_router)


@app.get("/")
async def home():
    return {
        "message": "Mock Lindo API",
        "docs": "/docs",
        "endpoints": {
            "products": "/product/getAllProduct",
            "cart": "/cart/getCartByUserId",
            "wishlist": "/wishlist/getUserWishlistProducts/{userId}",
            "orders": "/orders/createOrder",
            "login": "/user/Login",
            "reset_password": "/auth/resetPassword",
        },
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "mock-lindo-backend"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "mock_backend.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
