from fastapi import Depends, Request

from app.services.catalog import CatalogService
from app.services.store import CatalogStore


def get_store(request: Request) -> CatalogStore:
    """Return the store the running app was built with."""
    return request.app.state.store


def get_catalog(store: CatalogStore = Depends(get_store)) -> CatalogService:
    return CatalogService(store)
