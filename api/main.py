from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

from common.core.config import Settings, get_settings
from common.core.exceptions import ValidationError
from common.core.otel_axiom_exporter import configure_telemetry, get_logger
from common.providers.rate_limiter.limiter import limiter
from api.v1.routes.router import api_router
from internal.routes.router import internal_router
from packages.billing.context import BillingContext
from packages.billing.exceptions import (
    BillingError,
    BillingResourceNotFoundError,
    ConfigurationError,
    GatewayError,
    MalformedNotificationError,
    StoreError,
)

logger = get_logger(__name__)

# Most specific first: the first matching class decides the status
ERROR_STATUS = [
    (MalformedNotificationError, 400),
    (BillingResourceNotFoundError, 404),
    (GatewayError, 502),
    (StoreError, 503),
    (ConfigurationError, 500),
    (BillingError, 500),
]


def status_for(error: BillingError) -> int:
    for error_class, status_code in ERROR_STATUS:
        if isinstance(error, error_class):
            return status_code
    return 500


async def billing_error_handler(request: Request, exc: BillingError) -> JSONResponse:
    status_code = status_for(exc)
    log = logger.error if status_code >= 500 else logger.warning
    log(
        f"{exc.__class__.__name__} on {request.url.path}: {exc}",
        extra={"error_code": exc.code, "status_code": status_code, **exc.context},
    )
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "error": exc.code, "context": exc.context},
    )


async def validation_error_handler(
    request: Request, exc: ValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={"detail": str(exc), "error": "validation_error", "context": {}},
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("Starting application...")
    owns_context = getattr(app.state, "billing", None) is None
    if owns_context:
        app.state.billing = BillingContext.from_settings(app.state.settings)
        logger.info("Billing context initialized")
    yield
    # Shutdown
    logger.info("Shutting down application...")
    if owns_context:
        await app.state.billing.close()


def create_app(settings: Settings) -> FastAPI:
    """Build the API. The lifespan builds the billing context unless one
    was installed on ``app.state.billing`` beforehand."""
    configure_telemetry(settings)

    # Only expose OpenAPI docs in local development
    docs_enabled = settings.docs_enabled
    app = FastAPI(
        title=settings.app_name,
        version=settings.api_version,
        lifespan=lifespan,
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
    )
    app.state.settings = settings
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(BillingError, billing_error_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)

    # Instrument FastAPI with OpenTelemetry
    FastAPIInstrumentor.instrument_app(app)

    app.add_middleware(GZipMiddleware, minimum_size=1000)

    app.include_router(api_router, prefix="/api/v1")

    # K8s probes at root level, not under /api/v1
    app.include_router(internal_router)
    return app


app = create_app(get_settings())
