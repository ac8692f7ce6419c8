# storefront/main.py
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from . import storage
from .catalog import catalog_router
from .catalog.errors import StoreQueryError
from .config import Settings
from .seed import seed_if_empty


logger = logging.getLogger(__name__)


def _bootstrap(settings: Settings) -> None:
    engine = storage.configure(settings)
    storage.init_db(engine)
    logger.info("Catalog store ready at %s", engine.url)
    if settings.seed_file:
        with storage.session_scope() as session:
            seed_if_empty(session, settings.seed_file)


def create_app(settings: Optional[Settings] = None, bootstrap: bool = True) -> FastAPI:
    settings = settings or Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="Worksheet Storefront Catalog",
        description=(
            "Read-only catalogue API: tag-group filters, text search and "
            "pagination over published worksheet products."
        ),
        version="1.0.0",
    )
    app.state.settings = settings

    if bootstrap:
        _bootstrap(settings)

    @app.exception_handler(StoreQueryError)
    async def store_query_error_handler(request: Request, exc: StoreQueryError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    # Quick liveness probe
    @app.get("/")
    def health_check():
        return {"status": "ok"}

    app.include_router(catalog_router)
    return app


def run() -> None:
    import uvicorn

    settings = Settings.from_env()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)
