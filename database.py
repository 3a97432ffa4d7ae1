"""
MongoDB access

DocumentStore owns the single MongoClient for the process. It is created
and connected in the application lifespan and handed to route handlers
through the ``get_store`` dependency.
"""

import logging
from datetime import date, datetime
from typing import Any, Dict, Optional

from bson import Decimal128, ObjectId
from fastapi import Request
from pymongo import ASCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import InvalidName, PyMongoError
from pymongo.server_api import ServerApi

from errors import StoreError, ValidationError

logger = logging.getLogger(__name__)


class DocumentStore:
    def __init__(self, uri: str, database_name: str, users_collection: str = "users"):
        self.uri = uri
        self.database_name = database_name
        self.users_collection = users_collection
        self.client: Optional[MongoClient] = None
        self.db: Optional[Database] = None

    @property
    def is_connected(self) -> bool:
        return self.db is not None

    def connect(self):
        """Open the client, check the server answers and prepare indexes.

        Raises StoreError on any failure so startup can be aborted.
        """
        try:
            client = MongoClient(self.uri, server_api=ServerApi("1"))
            client.admin.command("ping")
            db = client[self.database_name]
            self._ensure_indexes(db)
        except PyMongoError as e:
            logger.error(f"MongoDB connection error: {e}")
            raise StoreError(str(e), "connect")
        self.client = client
        self.db = db
        logger.info(f"Connected to MongoDB database '{self.database_name}'")

    def _ensure_indexes(self, db):
        # email uniqueness is enforced here, not by a read before insert
        db[self.users_collection].create_index([("email", ASCENDING)], unique=True)

    def close(self):
        if self.client is not None:
            self.client.close()
            logger.info("MongoDB connection closed")
        self.client = None
        self.db = None

    def collection(self, name: str) -> Collection:
        if self.db is None:
            raise StoreError("database not connected", "collection")
        try:
            return self.db[name]
        except InvalidName:
            raise ValidationError("Invalid collection name", field="collectionName")

    def has_collection(self, name: str) -> bool:
        if self.db is None:
            raise StoreError("database not connected", "list_collections")
        return name in self.db.list_collection_names()

    def ping(self) -> bool:
        if self.db is None:
            return False
        try:
            self.db.command("ping")
            return True
        except PyMongoError as e:
            logger.error(f"MongoDB ping failed: {e}")
            return False


def get_store(request: Request) -> DocumentStore:
    store = getattr(request.app.state, "store", None)
    if store is None or not store.is_connected:
        raise StoreError("database not connected", "lookup")
    return store


def serialize_value(v: Any) -> Any:
    if isinstance(v, ObjectId):
        return str(v)
    if isinstance(v, (datetime, date)):
        return v.isoformat()
    if isinstance(v, dict):
        return serialize_doc(v)
    if isinstance(v, (list, tuple)):
        return [serialize_value(x) for x in v]
    if isinstance(v, Decimal128):
        # string keeps the exact decimal value
        return str(v.to_decimal())
    if v is None or isinstance(v, (str, int, float, bool)):
        return v
    # Binary, Regex, Timestamp and other BSON-only types
    return str(v)


def serialize_doc(doc: Dict[str, Any]):
    if not doc:
        return doc
    return {k: serialize_value(v) for k, v in doc.items() if k != "password"}
