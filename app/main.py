import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from app.database import create_db_and_tables
from app.config import settings
from app.routes import (
    admin_history,
    admin_orders,
    admin_payments,
    health,
    user_orders,
)
from app.services.exceptions import (
    AlreadyDeletedError,
    ConflictError,
    InvalidArgumentError,
    InvalidTransitionError,
    NotEligibleError,
    NotFoundError,
    ServiceOrderError,
)

logger = logging.getLogger(__name__)

# most specific first
ERROR_RESPONSES = (
    (NotFoundError, 404, "Order not found"),
    (AlreadyDeletedError, 400, "Order is already deleted"),
    (NotEligibleError, 400, "Order is not eligible for this action"),
    (InvalidTransitionError, 400, "Cannot advance order status further"),
    (InvalidArgumentError, 422, "Invalid value"),
    (ConflictError, 409, "Order was changed by another request, reload and retry"),
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Run DB creation ONLY in local
    if settings.env == "local":
        create_db_and_tables()
    yield

app = FastAPI(title="Laundry Orders API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ServiceOrderError)
async def service_order_error_handler(request: Request, exc: ServiceOrderError):
    for error_type, status_code, detail in ERROR_RESPONSES:
        if isinstance(exc, error_type):
            logger.info("%s %s -> %s: %s", request.method, request.url.path, status_code, exc)
            return JSONResponse(status_code=status_code, content={"detail": detail})
    logger.error("Unmapped order error on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=400, content={"detail": "Request could not be processed"})


app.include_router(health.router, prefix="/health", tags=["Health"])
app.include_router(user_orders.router, prefix="/orders", tags=["Orders"])
app.include_router(admin_orders.router, prefix="/admin/orders", tags=["Admin Orders"])
app.include_router(admin_history.router, prefix="/admin/history", tags=["Admin History"])
app.include_router(admin_payments.router, prefix="/admin/payments", tags=["Admin Payments"])


@app.get("/")
def root():
    return {
        "order_endpoints": [
            "/orders", "/orders/{order_id}/timer-status",
            "/orders/{order_id}/payment-proof"
        ],
        "admin_order_endpoints": [
            "/admin/orders", "/admin/orders/{order_id}",
            "/admin/orders/timers/active", "/admin/orders/timers/expired",
            "/admin/orders/{order_id}/start-timer", "/admin/orders/{order_id}/advance-status"
        ],
        "admin_history_endpoints": [
            "/admin/history", "/admin/history/type/{type}"
        ],
        "admin_payment_endpoints": [
            "/admin/payments/wallet", "/admin/payments/analytics"
        ]
    }
