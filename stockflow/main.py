"""FastAPI application entry point."""
from contextlib import asynccontextmanager
import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from stockflow.config import Settings, settings as default_settings
from stockflow.database import Base, create_db_engine, create_session_factory
from stockflow.exceptions import StockFlowError
from stockflow.logging_config import configure_logging
from stockflow.routes import auth, dashboard, requests, stocks, users

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    """Render every error as ``{"message": ..., "errors": [...]?}``."""

    @app.exception_handler(StockFlowError)
    async def stockflow_error_handler(request: Request, exc: StockFlowError):
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": "Invalid request data", "errors": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Internal server error"},
        )


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """Build the application with its own engine, session factory and settings."""
    app_settings = app_settings or default_settings
    configure_logging(app_settings.LOG_LEVEL)

    engine = create_db_engine(app_settings.DATABASE_URL, echo=app_settings.DEBUG)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Create database tables
        Base.metadata.create_all(bind=engine)
        logger.info("%s %s started", app_settings.APP_NAME, app_settings.APP_VERSION)
        yield

    app = FastAPI(
        title=app_settings.APP_NAME,
        version=app_settings.APP_VERSION,
        description="Stock catalog with a request and approval workflow",
        lifespan=lifespan,
    )
    app.state.settings = app_settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include routers
    app.include_router(auth.router, prefix="/api")
    app.include_router(stocks.router, prefix="/api")
    app.include_router(stocks.admin_router, prefix="/api")
    app.include_router(requests.router, prefix="/api")
    app.include_router(requests.admin_router, prefix="/api")
    app.include_router(users.router, prefix="/api")
    app.include_router(dashboard.router, prefix="/api")

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


app = create_app()
