from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import logging
import time
from voucher_admin.config import settings
from voucher_admin.errors import AdminError, AuthenticationError, RedemptionError, ValidationError
from voucher_admin.api import customers, orders, products, public_voucher, stores, users, vouchers

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    Logs the registered routes before accepting requests.
    """
    app.state.start_time = time.time()

    logger.info("=" * 80)
    logger.info("REGISTERED ROUTES AT STARTUP:")
    for route in app.routes:
        if hasattr(route, "path") and hasattr(route, "methods"):
            logger.info(f"  {sorted(route.methods)} {route.path}")
    logger.info("=" * 80)
    logger.info(f"Platform API: {settings.API_URL}")

    yield


app = FastAPI(
    title="Voucher Admin",
    description="Administration service for gift vouchers, orders and their catalog",
    version=VERSION,
    lifespan=lifespan,
)


@app.exception_handler(AdminError)
async def admin_error_handler(request: Request, exc: AdminError):
    content = {"detail": exc.message, "type": type(exc).__name__, "status": "error"}
    headers = None

    if isinstance(exc, ValidationError) and exc.fields:
        content["fields"] = exc.fields
    if isinstance(exc, RedemptionError):
        content["code"] = exc.code
        if exc.current is not None:
            content["current"] = exc.current.model_dump(by_alias=True, mode="json")
    if isinstance(exc, AuthenticationError):
        headers = {"WWW-Authenticate": "Bearer"}

    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {type(exc).__name__}: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code} {type(exc).__name__}")

    return JSONResponse(status_code=exc.status_code, content=content, headers=headers)


# Global Exception Handler to prevent raw text "Internal Server Error"
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"GLOBAL ERROR: {str(exc)}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": str(exc), "type": type(exc).__name__, "status": "error"}
    )


# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(users.router)
app.include_router(customers.router)
app.include_router(stores.router)
app.include_router(products.router)
app.include_router(vouchers.router)
app.include_router(orders.router)
app.include_router(public_voucher.router)


@app.get("/api/v1/health")
def health_check(request: Request):
    """Health check endpoint"""
    start_time = getattr(request.app.state, "start_time", None)
    uptime = time.time() - start_time if start_time else 0
    return {
        "status": "healthy",
        "version": VERSION,
        "platform": settings.API_URL,
        "uptime": int(uptime),
    }


if __name__ == "__main__":
    import uvicorn
    import os
    port = int(os.getenv("PORT", 8080))
    uvicorn.run(app, host="0.0.0.0", port=port)
