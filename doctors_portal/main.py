import time

import uvicorn
from fastapi import FastAPI, Request, status, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from slowapi.errors import RateLimitExceeded

from doctors_portal.config import get_settings
from doctors_portal.database import init_db, close_db, ping_db
from doctors_portal.utils.logger import get_logger
from doctors_portal.rate_limit import limiter

logger = get_logger("main")
settings = get_settings()

# Routers
from doctors_portal.routers import bookings as bookings_router
from doctors_portal.routers import catalog as catalog_router
from doctors_portal.routers import doctors as doctors_router
from doctors_portal.routers import payments as payments_router
from doctors_portal.routers import users as users_router
from doctors_portal.services.booking_service import recover_recorded_payments

app = FastAPI(
    title="Doctors Portal API",
    debug=settings.APP_DEBUG,
)

app.state.limiter = limiter

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(payments_router.router)
app.include_router(catalog_router.router)
app.include_router(users_router.router)
app.include_router(bookings_router.router)
app.include_router(doctors_router.router)


def error_body(status_code: int, detail) -> dict:
    """Single error envelope for every failure the API reports."""
    message = detail if isinstance(detail, str) else "Request failed"
    return {"message": message, "detail": detail, "status_code": status_code}


def jsonable_errors(exc: RequestValidationError) -> list:
    # ctx may hold exception objects that JSONResponse cannot serialise
    return [{k: v for k, v in err.items() if k != "ctx"} for err in exc.errors()]


# Error handlers
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    logger.warning(f"HTTP {exc.status_code}: {exc.detail} - Path: {request.url.path}")
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.status_code, exc.detail),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Validation error: {exc.errors()} - Path: {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"message": "Invalid request", "detail": jsonable_errors(exc), "status_code": 422},
    )


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    logger.warning(f"Rate limit hit: {exc.detail} - Path: {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content=error_body(429, f"Rate limit exceeded: {exc.detail}"),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(500, "Internal server error"),
    )


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    logger.info(
        f"{request.method} {request.url.path} - "
        f"Status: {response.status_code} - "
        f"Time: {process_time:.3f}s"
    )
    return response


@app.get("/", response_class=PlainTextResponse)
async def root():
    return "Hello from Doctors Portal"


@app.get("/healthz")
async def healthz():
    return {"status": "ok"}


@app.get("/readyz")
async def readyz():
    if not await ping_db():
        raise HTTPException(status_code=503, detail="Database not ready")
    return {"status": "ok", "database": "up"}


@app.on_event("startup")
async def on_startup():
    logger.info("Starting application...")
    await init_db()
    logger.info("Database initialized")
    recovered = await recover_recorded_payments()
    if recovered:
        logger.info(f"Recovered {recovered} pending payment(s)")


@app.on_event("shutdown")
async def on_shutdown():
    close_db()
    logger.info("Shutting down application...")


def run() -> None:
    uvicorn.run("doctors_portal.main:app", host="0.0.0.0", port=settings.PORT)


if __name__ == "__main__":
    run()
