"""
FastAPI app assembly: middleware, error handlers and router wiring.
"""
import logging
import time

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from storefront.api.admin import router as admin_router
from storefront.api.auth import router as auth_router
from storefront.api.cart import router as cart_router
from storefront.api.categories import router as categories_router
from storefront.api.error_handlers import internal_error_response, register_error_handlers
from storefront.api.orders import router as orders_router
from storefront.api.products import router as products_router
from storefront.api.rate_limit import RateLimiter
from storefront.db.models.base import now_utc
from storefront.utils.settings import get_settings

settings = get_settings()

# Configure logging
LOG_LEVEL = getattr(logging, settings.log_level, logging.INFO)
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)
logger.setLevel(LOG_LEVEL)
logger.info("app_startup: log_level=%s", settings.log_level)

access_logger = logging.getLogger("storefront.access")

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "X-DNS-Prefetch-Control": "off",
}

# Database schema is managed by Alembic migrations.

app = FastAPI(
    title="Storefront API",
    description="E-commerce backend: catalog, cart, checkout and store administration.",
    version="1.0.0",
)

# Avoid implicit trailing-slash redirects for predictable URLs
app.router.redirect_slashes = False

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.state.rate_limiter = RateLimiter(settings.rate_limit_max, settings.rate_limit_window_seconds)


# Middleware: per-client request limit on the API surface
@app.middleware("http")
async def limit_api_requests(request: Request, call_next):
    if request.url.path.startswith("/api/"):
        client = request.client.host if request.client else "unknown"
        allowed, retry_after = request.app.state.rate_limiter.check(client)
        if not allowed:
            return JSONResponse(
                {"success": False, "error": "Too many requests, please try again later."},
                status_code=429,
                headers={"Retry-After": str(retry_after)},
            )
    return await call_next(request)


# Middleware: security headers and access log on every response, 500s included
@app.middleware("http")
async def security_headers_and_access_log(request: Request, call_next):
    started = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception as exc:
        response = internal_error_response(request, exc)
    for name, value in SECURITY_HEADERS.items():
        response.headers.setdefault(name, value)
    access_logger.info(
        "%s %s %s %.1fms",
        request.method,
        request.url.path,
        response.status_code,
        (time.perf_counter() - started) * 1000,
    )
    return response


register_error_handlers(app)

app.include_router(auth_router)
app.include_router(products_router)
app.include_router(categories_router)
app.include_router(cart_router)
app.include_router(orders_router)
app.include_router(admin_router)


@app.get("/health", tags=["service"])
def health():
    return {"status": "OK", "timestamp": now_utc().isoformat()}
