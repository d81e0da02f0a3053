from fastapi import Depends
from strawberry.fastapi import BaseContext

from app.deps import get_catalog
from app.services.catalog import CatalogService


class GraphQLContext(BaseContext):
    def __init__(self, catalog: CatalogService):
        super().__init__()
        self.catalog = catalog


async def get_context(catalog: CatalogService = Depends(get_catalog)) -> GraphQLContext:
    return GraphQLContext(catalog)
