# app/api/graphql/schema.py
from typing import List, Optional

import strawberry
from strawberry.types import Info

from app.models.schemas import ProjectStatus
from app.services.store import Doc

strawberry.enum(ProjectStatus, name="ProjectStatus", description="Lifecycle state of a project")


def _id(doc: Doc) -> strawberry.ID:
    return strawberry.ID(str(doc["_id"]))


# ---------- Object types ----------
@strawberry.type
class Client:
    id: strawberry.ID
    name: str
    email: str
    phone: str

    @strawberry.field(description="Projects owned by this client")
    async def projects(self, info: Info) -> List["Project"]:
        docs = await info.context.catalog.list_projects(self.id)
        return [Project.from_doc(d) for d in docs]

    @classmethod
    def from_doc(cls, doc: Doc) -> "Client":
        return cls(id=_id(doc), name=doc["name"], email=doc["email"], phone=doc["phone"])


@strawberry.type
class Project:
    id: strawberry.ID
    name: str
    description: str
    status: str
    client_id: strawberry.Private[str]

    @strawberry.field(description="Owning client, null if the reference no longer resolves")
    async def client(self, info: Info) -> Optional[Client]:
        doc = await info.context.catalog.get_client(self.client_id)
        return Client.from_doc(doc) if doc else None

    @classmethod
    def from_doc(cls, doc: Doc) -> "Project":
        return cls(
            id=_id(doc),
            name=doc["name"],
            description=doc.get("description", ""),
            status=doc.get("status", ProjectStatus.NOT_STARTED.value),
            client_id=str(doc.get("client_id", "")),
        )


# ---------- Queries ----------
@strawberry.type
class Query:
    @strawberry.field
    async def client(self, info: Info, id: strawberry.ID) -> Optional[Client]:
        doc = await info.context.catalog.get_client(id)
        return Client.from_doc(doc) if doc else None

    @strawberry.field
    async def clients(self, info: Info) -> List[Client]:
        return [Client.from_doc(d) for d in await info.context.catalog.list_clients()]

    @strawberry.field
    async def project(self, info: Info, id: strawberry.ID) -> Optional[Project]:
        doc = await info.context.catalog.get_project(id)
        return Project.from_doc(doc) if doc else None

    @strawberry.field
    async def projects(self, info: Info) -> List[Project]:
        return [Project.from_doc(d) for d in await info.context.catalog.list_projects()]


# ---------- Mutations ----------
@strawberry.type
class Mutation:
    @strawberry.mutation
    async def add_client(self, info: Info, name: str, email: str, phone: str) -> Client:
        doc = await info.context.catalog.add_client(name, email, phone)
        return Client.from_doc(doc)

    @strawberry.mutation
    async def update_client(
        self,
        info: Info,
        id: strawberry.ID,
        name: Optional[str] = None,
        email: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> Client:
        doc = await info.context.catalog.update_client(id, name=name, email=email, phone=phone)
        return Client.from_doc(doc)

    @strawberry.mutation(description="Delete a client and all of its projects")
    async def delete_client(self, info: Info, id: strawberry.ID) -> Client:
        return Client.from_doc(await info.context.catalog.delete_client(id))

    @strawberry.mutation
    async def add_project(
        self,
        info: Info,
        name: str,
        description: str,
        client_id: strawberry.ID,
        status: ProjectStatus = ProjectStatus.NOT_STARTED,
    ) -> Project:
        doc = await info.context.catalog.add_project(name, description, client_id, status=status)
        return Project.from_doc(doc)

    @strawberry.mutation
    async def delete_project(self, info: Info, id: strawberry.ID) -> Project:
        return Project.from_doc(await info.context.catalog.delete_project(id))

    @strawberry.mutation
    async def update_project(
        self,
        info: Info,
        id: strawberry.ID,
        name: Optional[str] = None,
        description: Optional[str] = None,
        status: Optional[ProjectStatus] = None,
    ) -> Project:
        doc = await info.context.catalog.update_project(
            id, name=name, description=description, status=status
        )
        return Project.from_doc(doc)


schema = strawberry.Schema(query=Query, mutation=Mutation)
