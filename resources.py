"""
Generic collection endpoints.

``/api/{collection_name}`` binds the path segment to a MongoDB collection
for the duration of the request, so any collection can be listed or
updated without per-resource code.
"""

import logging
from typing import Any, Dict

from bson import ObjectId
from bson.errors import InvalidId
from fastapi import APIRouter, Body, Depends
from pymongo.collection import Collection

from config import Settings, get_app_settings
from database import DocumentStore, get_store, serialize_doc
from errors import NotFoundError, ValidationError
from schemas import UpdateResult

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["resources"])


def bind_collection(
    collection_name: str,
    store: DocumentStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> Collection:
    collection = store.collection(collection_name)
    if settings.strict_collections and not store.has_collection(collection_name):
        raise NotFoundError("Collection", collection_name)
    logger.debug(f"Bound collection {collection.name}", extra={"collection": collection.name})
    return collection


def parse_object_id(value: str) -> ObjectId:
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise ValidationError("Invalid id", field="id")


@router.get("/{collection_name}")
def list_documents(collection: Collection = Depends(bind_collection)):
    docs = [serialize_doc(d) for d in collection.find({})]
    logger.info(f"Retrieved {len(docs)} documents from {collection.name}")
    return docs


@router.put("/{collection_name}/{document_id}", response_model=UpdateResult)
def update_document(
    document_id: str,
    payload: Dict[str, Any] = Body(...),
    collection: Collection = Depends(bind_collection),
):
    oid = parse_object_id(document_id)
    # _id is immutable in MongoDB
    changes = {k: v for k, v in payload.items() if k != "_id"}
    if not changes:
        return UpdateResult(msg="error")
    result = collection.update_one({"_id": oid}, {"$set": changes})
    return UpdateResult(msg="success" if result.modified_count == 1 else "error")
