# app/services/store.py
import logging
from typing import Any, Dict, List, Optional, Tuple

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.database import Database
from pymongo.errors import PyMongoError

from app.services.errors import NotFoundError

logger = logging.getLogger(__name__)

Doc = Dict[str, Any]


def to_object_id(value: Optional[str]) -> Optional[ObjectId]:
    """Parse an opaque GraphQL id; None when it cannot name a document."""
    if isinstance(value, ObjectId):
        return value
    if not value or not ObjectId.is_valid(value):
        return None
    return ObjectId(value)


class CatalogStore:
    """
    Blocking data access for the `clients` and `projects` collections.

    The database handle is passed in so tests (and multiple apps) can run
    against isolated instances. Callers on the event loop are expected to
    dispatch these methods to a worker thread.
    """

    def __init__(self, db: Database, transactions: bool = False):
        self.db = db
        self.clients = db["clients"]
        self.projects = db["projects"]
        self.transactions = transactions

    # ---------- clients ----------
    def find_client(self, client_id) -> Optional[Doc]:
        oid = to_object_id(client_id)
        if oid is None:
            return None
        return self.clients.find_one({"_id": oid})

    def list_clients(self) -> List[Doc]:
        return list(self.clients.find())

    def insert_client(self, doc: Doc) -> Doc:
        doc = dict(doc)
        doc["_id"] = self.clients.insert_one(doc).inserted_id
        return doc

    def update_client(self, client_id, fields: Doc) -> Optional[Doc]:
        return self.clients.find_one_and_update(
            {"_id": to_object_id(client_id)},
            {"$set": fields},
            return_document=ReturnDocument.AFTER,
        )

    def delete_client_cascade(self, client_id) -> Tuple[Optional[Doc], int]:
        """
        Delete a client and every project referencing it.
        Returns (deleted client or None, number of projects removed).
        """
        oid = to_object_id(client_id)
        if oid is None:
            return None, 0

        if self.transactions:
            with self.db.client.start_session() as session:
                return session.with_transaction(lambda s: self._cascade_in_session(oid, s))

        # No transaction: keep what we remove so it can be put back
        removed = list(self.projects.find({"client_id": oid}))
        if removed:
            self.projects.delete_many({"_id": {"$in": [p["_id"] for p in removed]}})
        try:
            client = self.clients.find_one_and_delete({"_id": oid})
        except PyMongoError as e:
            logger.error(f"Client {oid} delete failed ({e}); restoring {len(removed)} projects")
            self._restore(removed)
            raise
        if client is None:
            # Deleted concurrently after the caller's existence check
            logger.warning(f"Client {oid} vanished during delete; restoring {len(removed)} projects")
            self._restore(removed)
            return None, 0
        return client, len(removed)

    def _restore(self, projects: List[Doc]) -> None:
        if not projects:
            return
        try:
            self.projects.insert_many(projects)
        except PyMongoError as e:
            logger.error(f"Failed to restore projects {[str(p['_id']) for p in projects]}: {e}")

    def _cascade_in_session(self, oid: ObjectId, session) -> Tuple[Doc, int]:
        deleted = self.projects.delete_many({"client_id": oid}, session=session).deleted_count
        client = self.clients.find_one_and_delete({"_id": oid}, session=session)
        if client is None:
            # Aborts the transaction, projects stay in place
            raise NotFoundError("Client not found")
        return client, int(deleted or 0)

    # ---------- projects ----------
    def find_project(self, project_id) -> Optional[Doc]:
        oid = to_object_id(project_id)
        if oid is None:
            return None
        return self.projects.find_one({"_id": oid})

    def list_projects(self, client_id=None) -> List[Doc]:
        if client_id is None:
            return list(self.projects.find())
        oid = to_object_id(client_id)
        if oid is None:
            return []
        return list(self.projects.find({"client_id": oid}))

    def insert_project(self, doc: Doc) -> Doc:
        doc = dict(doc)
        doc["_id"] = self.projects.insert_one(doc).inserted_id
        return doc

    def update_project(self, project_id, fields: Doc) -> Optional[Doc]:
        return self.projects.find_one_and_update(
            {"_id": to_object_id(project_id)},
            {"$set": fields},
            return_document=ReturnDocument.AFTER,
        )

    def delete_project(self, project_id) -> Optional[Doc]:
        oid = to_object_id(project_id)
        if oid is None:
            return None
        return self.projects.find_one_and_delete({"_id": oid})
