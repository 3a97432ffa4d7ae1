"""
Storefront endpoints: placing orders and searching lessons.
"""

import logging
import re
from typing import Optional

from fastapi import APIRouter, Body, Depends, status

from config import Settings, get_app_settings
from database import DocumentStore, get_store, serialize_doc
from errors import ValidationError
from schemas import Order, OrderCreated

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["storefront"])

SEARCH_FIELDS = ("title", "description", "location", "price", "availableInventory")


def build_search_filter(keyword: str) -> dict:
    """Case-insensitive substring match on any of SEARCH_FIELDS.

    Fields are converted to strings first so numeric prices and
    inventory counts can be matched too. Missing fields become "".
    """
    pattern = re.escape(keyword)
    return {
        "$expr": {
            "$or": [
                {
                    "$regexMatch": {
                        "input": {"$convert": {"input": f"${field}", "to": "string", "onError": "", "onNull": ""}},
                        "regex": pattern,
                        "options": "i",
                    }
                }
                for field in SEARCH_FIELDS
            ]
        }
    }


# Orders
@router.post("/orders", status_code=status.HTTP_201_CREATED, response_model=OrderCreated)
def create_order(
    order: Optional[Order] = Body(None),
    store: DocumentStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
):
    order = order or Order()
    # cart is checked first so an empty cart always gets its own message
    if not order.items:
        raise ValidationError("Cart items missing", field="items")
    if not order.address_complete():
        raise ValidationError("Address details incomplete", field="address")

    result = store.collection(settings.orders_collection).insert_one(order.to_document())
    logger.info(f"Order {result.inserted_id} placed with {len(order.items)} item(s)")
    return OrderCreated(message="Order placed successfully", orderId=str(result.inserted_id))


# Search
@router.get("/search")
def search_lessons(
    keyword: str = "",
    store: DocumentStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
):
    docs = store.collection(settings.lessons_collection).find(build_search_filter(keyword))
    results = [serialize_doc(d) for d in docs]
    logger.info(f"Search '{keyword}' matched {len(results)} lesson(s)")
    return results
