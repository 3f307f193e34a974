from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

# Core
from core.config import settings
from core.config_validator import validate_config_on_startup
from core.errors import ResidenceError
from core.logging_config import logger

# -------------------------------------------------
# Routers
# -------------------------------------------------
from routers.auth import router as auth_router
from routers.requests import request_routers
from routers.notifications import router as notifications_router
from routers.announcements import router as announcements_router
from routers.applications import router as applications_router
from routers.reports import router as reports_router
from routers.finance import router as finance_router
from routers.admins import router as admins_router
from routers.messages import router as messages_router
from routers.health import router as health_router


# -------------------------------------------------
# Startup / shutdown
# -------------------------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting {settings.PROJECT_NAME} ({settings.ENV})")
    validate_config_on_startup()
    for route in app.routes:
        path = getattr(route, "path", None)
        if path is None:
            continue
        methods = ",".join(sorted(getattr(route, "methods", None) or []))
        logger.debug(f"Route {methods:10s} {path}")
    yield
    logger.info(f"{settings.PROJECT_NAME} shutting down")


# -------------------------------------------------
# Create the Application
# -------------------------------------------------
def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version="1.0.0",
        description="Residence Portal API: student requests, approvals and guest checkout",
        lifespan=lifespan,
    )

    # -------------------------------------------------
    # CORS
    # -------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -------------------------------------------------
    # Error handling
    # -------------------------------------------------
    @app.exception_handler(ResidenceError)
    async def handle_domain(request: Request, exc: ResidenceError):
        if exc.status_code >= 500:
            logger.error(f"{exc.code} at {request.url}: {exc.message}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.message, "code": exc.code},
        )

    @app.exception_handler(RequestValidationError)
    async def handle_validation(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        if errors:
            first = errors[0]
            field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
            message = f"{field}: {first.get('msg')}" if field else first.get("msg")
        else:
            message = "Invalid request"
        return JSONResponse(
            status_code=400,
            content={"error": message, "code": "validation_error"},
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http(request: Request, exc: StarletteHTTPException):
        if exc.status_code in (401, 403, 500):
            logger.warning(f"HTTP {exc.status_code} at {request.url}: {exc.detail}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unhandled(request: Request, exc: Exception):
        logger.error("Unhandled error at %s", request.url, exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "code": "internal_error"},
        )

    # -------------------------------------------------
    # Register Routers
    # -------------------------------------------------

    # Auth
    app.include_router(auth_router)

    # Student requests (complaints, maintenance, sleepovers, guests)
    for request_router in request_routers:
        app.include_router(request_router)

    # Inbox + noticeboard
    app.include_router(notifications_router)
    app.include_router(announcements_router)

    # Admin
    app.include_router(applications_router)
    app.include_router(messages_router)
    app.include_router(reports_router)
    app.include_router(finance_router)
    app.include_router(admins_router)

    # Health
    app.include_router(health_router)

    return app


# Create the global FastAPI instance
app = create_app()
