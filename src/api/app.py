from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from sqlmodel import SQLModel
from .error import ClientError, ServerError
import logging

logger = logging.getLogger(__name__)


async def handle_client_error(request: Request, exc: ClientError):
    error_dict = {"code": exc.base_error.code, "message": exc.base_error.message}
    logger.warning(f"Client error: {error_dict}")
    return JSONResponse(status_code=exc.status_code, content={"error": error_dict})


async def handle_validation_error(request: Request, exc: RequestValidationError):
    # Bodies that are not a JSON object get the same 400 envelope as other client errors
    error_dict = {"code": "INVALID_REQUEST", "message": "Invalid request body"}
    logger.warning(f"Request validation failed at {[e['loc'] for e in exc.errors()]}")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": error_dict})


async def handle_server_error(request: Request, exc: ServerError):
    error_dict = {"code": exc.base_error.code, "message": exc.public_message}
    logger.error(f"Server error: {exc.base_error.code} - {exc.base_error.message}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": error_dict}
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    from src.depends import engine
    import src.domain.entities  # noqa: F401 - registers tables on SQLModel.metadata

    if app.state.config.AUTO_CREATE_TABLES:
        async with engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)

    yield

    # Let in-flight reset mails finish before the process goes away
    results = await app.state.mail_dispatcher.drain()
    if results:
        logger.info(f"Drained {len(results)} pending mail deliveries on shutdown")
    await engine.dispose()


def create_app(ApplicationConfig) -> FastAPI:
    from src.depends import (
        build_mail_dispatcher,
        build_password_hasher,
        build_reset_link_builder,
        build_reset_token_manager,
    )

    app = FastAPI(
        title="AI Career Assistant Auth API",
        version=ApplicationConfig.APP_VERSION,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # One instance of each per process; the token manager is the only owner of token state
    app.state.config = ApplicationConfig
    app.state.reset_token_manager = build_reset_token_manager(ApplicationConfig)
    app.state.mail_dispatcher = build_mail_dispatcher(ApplicationConfig)
    app.state.reset_link_builder = build_reset_link_builder(ApplicationConfig)
    app.state.password_hasher = build_password_hasher(ApplicationConfig)

    from src.api.routes import auth, debug, health_check

    prefix = ApplicationConfig.API_PREFIX
    app.include_router(health_check.router, prefix=prefix, tags=["Health"])
    app.include_router(auth.router, prefix=prefix, tags=["Authentication"])
    app.include_router(debug.router, prefix=prefix, tags=["Debug"])

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)

    return app
