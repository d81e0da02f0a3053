# app/services/catalog.py
"""
Client/project operations with the referential-integrity rules:

  - a project can only be created for a client that exists
  - deleting a client deletes its projects first

Every blocking store call runs in the threadpool so a slow MongoDB round
trip only suspends the request that issued it.
"""
import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import List, Optional, Type, TypeVar

from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from pymongo.errors import DuplicateKeyError, PyMongoError

from app.models.schemas import ClientIn, ClientPatch, ProjectIn, ProjectPatch, ProjectStatus
from app.services.errors import (
    IntegrityViolationError,
    NotFoundError,
    ServiceError,
    StoreFailureError,
    ValidationError,
)
from app.services.store import CatalogStore, Doc, to_object_id

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@contextmanager
def _operation(name: str):
    """Tag any failure with the operation name and map driver errors to kinds."""
    try:
        yield
    except ServiceError as e:
        e.operation = name
        logger.warning(e.message)
        raise
    except DuplicateKeyError as e:
        logger.warning(f"Failed to {name}: duplicate key {e.details}")
        raise IntegrityViolationError("Project name already exists", operation=name) from e
    except PyMongoError as e:
        logger.error(f"Failed to {name}: {e}", exc_info=True)
        raise StoreFailureError(str(e), operation=name) from e


def _validate(model: Type[M], **data) -> M:
    try:
        return model(**data)
    except PydanticValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ValidationError(problems) from e


def _changes(patch: BaseModel) -> Doc:
    # Omitted and falsy values keep the stored value
    fields = {k: v for k, v in patch.model_dump().items() if v}
    if isinstance(fields.get("status"), ProjectStatus):
        fields["status"] = fields["status"].value
    return fields


class CatalogService:
    def __init__(self, store: CatalogStore):
        self.store = store

    # ---------- queries ----------
    async def get_client(self, client_id: str) -> Optional[Doc]:
        with _operation("fetch client"):
            return await run_in_threadpool(self.store.find_client, client_id)

    async def list_clients(self) -> List[Doc]:
        with _operation("list clients"):
            return await run_in_threadpool(self.store.list_clients)

    async def get_project(self, project_id: str) -> Optional[Doc]:
        with _operation("fetch project"):
            return await run_in_threadpool(self.store.find_project, project_id)

    async def list_projects(self, client_id: Optional[str] = None) -> List[Doc]:
        with _operation("list projects"):
            return await run_in_threadpool(self.store.list_projects, client_id)

    # ---------- client mutations ----------
    async def add_client(self, name: str, email: str, phone: str) -> Doc:
        with _operation("add client"):
            data = _validate(ClientIn, name=name, email=email, phone=phone)
            now = _now()
            client = await run_in_threadpool(
                self.store.insert_client,
                {**data.model_dump(), "created_at": now, "updated_at": now},
            )
            logger.info(f"Created client {client['_id']}")
            return client

    async def update_client(
        self,
        client_id: str,
        name: Optional[str] = None,
        email: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> Doc:
        with _operation("update client"):
            if await run_in_threadpool(self.store.find_client, client_id) is None:
                raise NotFoundError("Client not found")
            fields = _changes(ClientPatch(name=name, email=email, phone=phone))
            fields["updated_at"] = _now()
            client = await run_in_threadpool(self.store.update_client, client_id, fields)
            if client is None:
                raise NotFoundError("Client not found")
            return client

    async def delete_client(self, client_id: str) -> Doc:
        """Delete a client together with all of its projects."""
        with _operation("delete client"):
            if await run_in_threadpool(self.store.find_client, client_id) is None:
                raise NotFoundError("Client not found")
            client, removed = await run_in_threadpool(self.store.delete_client_cascade, client_id)
            if client is None:
                raise NotFoundError("Client not found")
            logger.info(f"Deleted client {client_id} and {removed} project(s)")
            return client

    # ---------- project mutations ----------
    async def add_project(
        self,
        name: str,
        description: str,
        client_id: str,
        status: ProjectStatus = ProjectStatus.NOT_STARTED,
    ) -> Doc:
        with _operation("add project"):
            data = _validate(
                ProjectIn,
                name=name,
                description=description,
                status=status or ProjectStatus.NOT_STARTED,
                client_id=client_id,
            )
            # Integrity check before the insert
            if await run_in_threadpool(self.store.find_client, data.client_id) is None:
                raise NotFoundError("Client not found")
            now = _now()
            project = await run_in_threadpool(
                self.store.insert_project,
                {
                    "name": data.name,
                    "description": data.description,
                    "status": data.status.value,
                    "client_id": to_object_id(data.client_id),
                    "created_at": now,
                    "updated_at": now,
                },
            )
            logger.info(f"Created project {project['_id']} for client {data.client_id}")
            return project

    async def update_project(
        self,
        project_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
        status: Optional[ProjectStatus] = None,
    ) -> Doc:
        with _operation("update project"):
            if await run_in_threadpool(self.store.find_project, project_id) is None:
                raise NotFoundError("Project not found")
            fields = _changes(ProjectPatch(name=name, description=description, status=status))
            fields["updated_at"] = _now()
            project = await run_in_threadpool(self.store.update_project, project_id, fields)
            if project is None:
                raise NotFoundError("Project not found")
            return project

    async def delete_project(self, project_id: str) -> Doc:
        with _operation("delete project"):
            project = await run_in_threadpool(self.store.delete_project, project_id)
            if project is None:
                raise NotFoundError("Project not found")
            logger.info(f"Deleted project {project_id}")
            return project
