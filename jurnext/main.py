from contextlib import asynccontextmanager
from typing import Optional
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from jurnext.config import Settings, get_settings
from jurnext.database import Database
from jurnext.middleware.security import setup_security_middleware
from jurnext.routers import (
    users_router,
    tickets_router,
    bookings_router,
    payments_router,
    admin_router
)
from jurnext.services.gateway import CheckoutGateway, CheckoutGatewayError, StripeCheckoutGateway

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    checkout_gateway: Optional[CheckoutGateway] = None
) -> FastAPI:
    settings = settings or get_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s"
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        database = Database(settings.database_url)
        database.open()
        app.state.database = database
        logger.info("Database opened")
        yield
        database.close()
        logger.info("Database closed")

    app = FastAPI(
        title="Jurnext",
        description="Ticket marketplace API",
        version="1.0.0",
        lifespan=lifespan
    )

    app.state.settings = settings
    app.state.checkout_gateway = checkout_gateway or StripeCheckoutGateway(settings)

    setup_security_middleware(app, settings)

    app.include_router(users_router)
    app.include_router(tickets_router)
    app.include_router(bookings_router)
    app.include_router(payments_router)
    app.include_router(admin_router)

    @app.get("/", response_class=PlainTextResponse)
    async def home():
        return "Hello from Server.."

    @app.exception_handler(CheckoutGatewayError)
    async def checkout_gateway_error_handler(request: Request, exc: CheckoutGatewayError):
        logger.error(f"Checkout gateway failure on {request.url.path}: {exc}")
        return JSONResponse(status_code=502, content={"detail": "Payment provider error"})

    @app.exception_handler(IntegrityError)
    async def integrity_error_handler(request: Request, exc: IntegrityError):
        logger.warning(f"Constraint violation on {request.url.path}: {exc.orig}")
        return JSONResponse(status_code=409, content={"detail": "Conflicting record"})

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError):
        logger.error(f"Database failure on {request.url.path}: {exc}")
        return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})

    return app


app = create_app()
