"""
FastAPI Application Entry Point

Sabor & Arte Storefront API.
Supports both Mock services (development) and Supabase (production).

Endpoints:
    - POST /api/auth/register: Create an account and receive a token
    - POST /api/auth/login: Exchange credentials for a token
    - GET /api/menu: Menu grouped by category
    - POST /api/pedidos: Submit the cart as an order (auth)
    - POST /api/finalizar: Submit the cart with delivery details (auth)
    - GET /api/pedidos: The caller's orders, newest first (auth)
    - GET /health: System health check

Run:
    uvicorn sabor_arte.main:app --port 3000
"""

import logging
from datetime import datetime
from typing import Optional
from contextlib import asynccontextmanager

from fastapi import APIRouter, Depends, FastAPI, Header, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from sabor_arte.core.config import Settings, get_settings, setup_logging
from sabor_arte.core.exceptions import StorefrontError, ValidationError
from sabor_arte.flows import (
    CredentialGateway,
    Identity,
    LoginFlow,
    MenuReader,
    OrderHistoryReader,
    OrderSubmissionFlow,
    RegistrationFlow,
)
from sabor_arte.schemas import (
    ErrorResponse,
    FinalizedOrderCreateResponse,
    FinalizeOrderCreate,
    HealthResponse,
    LoginRequest,
    MenuItemResponse,
    OrderCreate,
    OrderCreateResponse,
    OrderResponse,
    RegisterRequest,
    SessionResponse,
)
from sabor_arte.services import BackendServices, build_services

logger = logging.getLogger(__name__)


# =============================================================================
# DEPENDENCIES
# =============================================================================

def get_services(request: Request) -> BackendServices:
    return request.app.state.services


async def require_identity(
    authorization: Optional[str] = Header(None),
    services: BackendServices = Depends(get_services),
) -> Identity:
    """Credential gateway as a route dependency."""
    return await CredentialGateway(services.auth).authenticate(authorization)


# =============================================================================
# ROUTES
# =============================================================================

router = APIRouter()

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@router.post(
    "/api/auth/register",
    response_model=SessionResponse,
    status_code=201,
    responses=ERROR_RESPONSES,
    tags=["Auth"],
    summary="Register",
)
async def register(
    payload: RegisterRequest,
    services: BackendServices = Depends(get_services),
) -> SessionResponse:
    """Create identity and profile, and sign the new user in."""
    return await RegistrationFlow(services.auth, services.store).register(payload)


@router.post(
    "/api/auth/login",
    response_model=SessionResponse,
    responses={**ERROR_RESPONSES, 503: {"model": ErrorResponse}},
    tags=["Auth"],
    summary="Login",
)
async def login(
    payload: LoginRequest,
    services: BackendServices = Depends(get_services),
) -> SessionResponse:
    return await LoginFlow(services.auth).login(payload)


@router.get(
    "/api/menu",
    response_model=dict[str, list[MenuItemResponse]],
    responses={500: {"model": ErrorResponse}},
    tags=["Menu"],
    summary="Menu by Category",
)
async def get_menu(
    services: BackendServices = Depends(get_services),
) -> dict[str, list[MenuItemResponse]]:
    return await MenuReader(services.store).grouped()


@router.post(
    "/api/pedidos",
    response_model=OrderCreateResponse,
    status_code=201,
    responses=ERROR_RESPONSES,
    tags=["Orders"],
    summary="Create Order",
)
async def create_order(
    payload: OrderCreate,
    identity: Identity = Depends(require_identity),
    services: BackendServices = Depends(get_services),
) -> OrderCreateResponse:
    order = await OrderSubmissionFlow(services.store).submit(identity, payload)
    return OrderCreateResponse(message="Order placed successfully!", order=order)


@router.post(
    "/api/finalizar",
    response_model=FinalizedOrderCreateResponse,
    status_code=201,
    responses=ERROR_RESPONSES,
    tags=["Orders"],
    summary="Finalize Order with Delivery Details",
)
async def finalize_order(
    payload: FinalizeOrderCreate,
    identity: Identity = Depends(require_identity),
    services: BackendServices = Depends(get_services),
) -> FinalizedOrderCreateResponse:
    order = await OrderSubmissionFlow(services.store).finalize(identity, payload)
    return FinalizedOrderCreateResponse(message="Order finalized successfully!", order=order)


@router.get(
    "/api/pedidos",
    response_model=list[OrderResponse],
    responses={401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    tags=["Orders"],
    summary="List My Orders",
)
async def list_orders(
    identity: Identity = Depends(require_identity),
    services: BackendServices = Depends(get_services),
) -> list[OrderResponse]:
    return await OrderHistoryReader(services.store).list_for(identity)


@router.get("/", tags=["Root"])
async def root(request: Request) -> dict[str, str]:
    """API root with navigation links."""
    settings: Settings = request.app.state.settings
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "environment": settings.env_mode.value,
        "documentation": "/docs",
        "health": "/health",
    }


@router.get(
    "/health",
    response_model=HealthResponse,
    tags=["Health"],
    summary="System Health Check",
)
async def health_check(
    services: BackendServices = Depends(get_services),
) -> HealthResponse:
    """Verify the auth service and the store are reachable."""
    auth_status = "healthy" if await services.auth.health_check() else "unhealthy"
    store_status = "healthy" if await services.store.health_check() else "unhealthy"

    overall = "operational" if auth_status == store_status == "healthy" else "degraded"

    return HealthResponse(
        status=overall,
        auth_service=auth_status,
        store=store_status,
        timestamp=datetime.now(),
    )


# =============================================================================
# ERROR HANDLERS
# =============================================================================

def _error_body(message: str, code: str, detail: Optional[str] = None) -> dict:
    return ErrorResponse(error=message, code=code, detail=detail).model_dump(exclude_none=True)


async def storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
    """Translate a flow failure into its status and JSON body."""
    if exc.status_code >= 500:
        logger.error(f"{exc.code} on {request.method} {request.url.path}: {exc.message} ({exc.detail})")
    else:
        logger.info(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")

    return JSONResponse(status_code=exc.status_code, content=_error_body(exc.message, exc.code))


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed input as 400 ValidationError instead of FastAPI's 422."""
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        problems.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))

    message = "Missing or invalid fields. " + "; ".join(problems)
    logger.info(f"ValidationError on {request.method} {request.url.path}: {message}")

    return JSONResponse(
        status_code=ValidationError.status_code,
        content=_error_body(message, ValidationError.code),
    )


def _unhandled_error_handler(debug: bool):
    async def handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all exception handler."""
        logger.exception(f"Unhandled exception: {exc}")

        return JSONResponse(
            status_code=500,
            content=_error_body(
                "Internal Server Error",
                "InternalError",
                str(exc) if debug else "An unexpected error occurred",
            ),
        )

    return handler


# =============================================================================
# APPLICATION LIFECYCLE
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application startup and shutdown events.
    """
    settings: Settings = app.state.settings
    services: BackendServices = app.state.services

    logger.info("=" * 60)
    logger.info(f"Starting {settings.app_name}")
    logger.info(f"   Version: {settings.app_version}")
    logger.info(f"   Environment: {settings.env_mode.value}")
    logger.info(f"   Auth Service: {services.auth.provider_name}")
    logger.info(f"   Row Store: {services.store.provider_name}")
    logger.info("=" * 60)

    await services.prepare()
    logger.info("Application ready!")

    yield  # Application runs

    logger.info("Shutting down...")
    await services.close()
    logger.info("Cleanup complete")


def create_app(
    settings: Optional[Settings] = None,
    services: Optional[BackendServices] = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Configuration (defaults to the cached environment settings)
        services: Pre-built collaborators; built from `settings` when omitted

    Raises:
        ConfigurationError: If real services are selected and their
            configuration is incomplete
    """
    settings = settings or get_settings()
    setup_logging(settings)

    if services is None:
        services = build_services(settings)

    app = FastAPI(
        title=settings.app_name,
        description="Order-taking backend for the Sabor & Arte storefront.",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings
    app.state.services = services

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StorefrontError, storefront_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler(settings.debug))

    app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run("sabor_arte.main:app", host=settings.api_host, port=settings.api_port)
