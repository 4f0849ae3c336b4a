# server/main.py

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from api import auth, honks, users
from config import Settings
from core.credentials import CredentialStore
from core.errors import (
    AuthenticationFailure,
    DerivationError,
    HonkError,
    NotFound,
    StoreError,
    UsernameTaken,
    ValidationError,
)
from database import build_engine, build_session_factory, init_db


logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s - %(message)s"
)
logger = logging.getLogger("main")


ERROR_STATUS = {
    AuthenticationFailure: status.HTTP_401_UNAUTHORIZED,
    UsernameTaken: status.HTTP_400_BAD_REQUEST,
    NotFound: status.HTTP_404_NOT_FOUND,
    ValidationError: status.HTTP_400_BAD_REQUEST,
    StoreError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    DerivationError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


async def handle_honk_error(request: Request, exc: HonkError):
    status_code = ERROR_STATUS.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
    if status_code >= 500:
        logger.error("%s %s failed: %r", request.method, request.url.path, exc, exc_info=exc)
        return JSONResponse(status_code=status_code, content={"detail": "Internal server error"})

    headers = {"WWW-Authenticate": "Bearer"} if status_code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(status_code=status_code, content={"detail": exc.message}, headers=headers)


def create_app(settings: Settings) -> FastAPI:

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        engine = build_engine(settings.database_url)
        init_db(engine)
        app.state.engine = engine
        app.state.session_factory = build_session_factory(engine)
        app.state.credentials = CredentialStore.from_settings(settings)
        logger.info("%s backend started", settings.project_name)
        yield
        app.state.credentials.shutdown()
        engine.dispose()

    app = FastAPI(
        title=f"{settings.project_name} Backend",
        version=settings.version,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(HonkError, handle_honk_error)

    app.include_router(auth.router)
    app.include_router(honks.router)
    app.include_router(users.router)

    @app.get("/")
    def root():
        return {"status": "ok", "project": settings.project_name, "version": settings.version}

    return app


app = create_app(Settings.from_env())
