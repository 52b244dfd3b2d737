# api/main.py
from dotenv import load_dotenv
import os

env = os.getenv("APP_ENV", "local")
if env == "local":
    load_dotenv(".env.local")
else:
    load_dotenv(".env")

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from typing import Optional
import logging

from database.db import build_engine, build_session_factory, init_db
from api.routers import health, journals, publications, kpis, parsing

logger = logging.getLogger(__name__)

CATALOG_ROUTERS = (journals, publications, kpis, parsing)


def _allowed_origins() -> list:
    if env == "local":
        return ["http://localhost:3000", "http://localhost:5173"]  # Common dev ports
    origins_str = os.getenv("ALLOWED_ORIGINS", "")
    return [origin.strip() for origin in origins_str.split(",") if origin.strip()]


def create_app(database_url: Optional[str] = None) -> FastAPI:
    """
    Builds the API. The store engine is created, migrated and disposed by the
    app lifespan; request handlers only see sessions from app.state.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting Publication KPI API, initializing DB")
        engine = build_engine(database_url)
        try:
            init_db(engine)
        except Exception as e:
            logger.error(f"Failed to initialize database: {e}", exc_info=True)
            engine.dispose()
            raise
        app.state.engine = engine
        app.state.session_factory = build_session_factory(engine)
        yield
        logger.info("Shutting down Publication KPI API")
        engine.dispose()

    app = FastAPI(
        title="Publication KPI API",
        version="1.0.0",
        description="Journal and publication catalogs with yearly KPI reports.",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=_allowed_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"Invalid payload on {request.url.path}: {exc.errors()}")
        return JSONResponse(status_code=400, content={"detail": "Invalid request payload"})

    app.include_router(health.router)
    for module in CATALOG_ROUTERS:
        app.include_router(module.router, tags=["Catalog"])
        # Paths used by the existing dashboard frontend
        app.include_router(module.router, prefix="/api", include_in_schema=False)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("api.main:app", host="0.0.0.0", port=int(os.getenv("PORT", "3000")))
