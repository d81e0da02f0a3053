import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pymongo.database import Database
from strawberry.fastapi import GraphQLRouter

from app.config import Settings, settings
from app.db.mongo import ensure_indexes, get_db
from app.api.graphql.context import get_context
from app.api.graphql.schema import schema
from app.services.store import CatalogStore

logger = logging.getLogger(__name__)


def setup_logging(level: str) -> None:
    root = logging.getLogger()
    if root.handlers:
        # Already configured (tests, repeated create_app calls)
        return
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def create_app(db: Optional[Database] = None, app_settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the API around an explicit MongoDB database handle.
    Falls back to the configured connection when `db` is not given.
    """
    cfg = app_settings or settings
    setup_logging(cfg.log_level)

    database = db if db is not None else get_db()

    app = FastAPI(
        title="Client Projects API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )
    app.state.store = CatalogStore(database, transactions=cfg.mongo_transactions)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.on_event("startup")
    def _startup() -> None:
        ensure_indexes(database)
        logger.info(f"Indexes ensured on '{database.name}' (env={cfg.app_env})")

    @app.get("/health")
    def health():
        database.command("ping")
        return {"mongo": "ok", "env": cfg.app_env}

    # GraphiQL only outside production
    graphql_router = GraphQLRouter(
        schema,
        context_getter=get_context,
        graphql_ide="graphiql" if cfg.graphiql_enabled else None,
    )
    app.include_router(graphql_router, prefix="/graphql")

    return app


app = create_app()


def run() -> None:
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
