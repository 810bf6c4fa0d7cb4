"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from dropwin.api.dependencies import Services, build_services
from dropwin.domain.errors import (
    AddressCollisionError,
    DropwinError,
    MailboxNotFoundError,
    MalformedInputError,
    MessageNotFoundError,
    ReadFetchError,
    SyncStateError,
)
from dropwin.infrastructure import Settings, configure_logging, get_settings

# Most specific first; the first isinstance match wins
_ERROR_STATUS: list[tuple[type[DropwinError], int, str]] = [
    (MalformedInputError, 400, "Invalid request"),
    (MessageNotFoundError, 404, "Message not found"),
    (ReadFetchError, 502, "Could not read the message"),
    (MailboxNotFoundError, 404, "Mailbox not found"),
    (SyncStateError, 409, "No mailbox selected"),
    (AddressCollisionError, 503, "Could not allocate a new address"),
]


async def handle_dropwin_error(request: Request, exc: DropwinError) -> JSONResponse:
    """Render domain errors as ``{success: false, error}``."""
    for error_type, status_code, summary in _ERROR_STATUS:
        if isinstance(exc, error_type):
            break
    else:
        status_code, summary = 500, "Internal error"

    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc}")

    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": f"{summary}: {exc}"},
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    settings: Settings = app.state.settings
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")

    if getattr(app.state, "services", None) is None:
        app.state.services = build_services(settings)
    services: Services = app.state.services

    restored = await services.engine.restore()
    if restored:
        logger.info(f"Restored selection: {restored}")

    yield

    # Cleanup on shutdown
    logger.info("Shutting down...")
    await services.aclose()
    logger.info("Shutdown complete")


def create_app(settings: Settings | None = None, services: Services | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or (services.settings if services else get_settings())

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Disposable inboxes with automatic polling",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.services = services

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(DropwinError, handle_dropwin_error)

    # Register routes
    from dropwin.api.mailbox_routes import router as mailbox_router
    from dropwin.api.routes import router

    app.include_router(router)
    app.include_router(mailbox_router)

    return app


def serve() -> None:
    """Run the API with uvicorn using host and port from settings."""
    import uvicorn

    settings = get_settings()
    configure_logging(settings.log_level)
    uvicorn.run(create_app(settings), host=settings.api_host, port=settings.api_port)


# Create app instance
app = create_app()


if __name__ == "__main__":
    serve()
