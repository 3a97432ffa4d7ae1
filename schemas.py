"""
Database Schemas

Pydantic models for the documents the storefront writes. Lessons are
read as stored and have no model here. Order and user models validate
request bodies at the endpoints that create those documents.
Required-field rules are checked in the handlers so each missing class
of field gets its own message.
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Any

ADDRESS_FIELDS = ("firstName", "lastName", "address", "city", "state", "zip")

# Orders collection
# Values are kept exactly as submitted; only presence is checked.
class Order(BaseModel):
    firstName: Any = None
    lastName: Any = None
    address: Any = None
    city: Any = None
    state: Any = None
    zip: Any = None
    phoneNumber: Any = None
    method: Any = Field(None, description="Delivery or payment method")
    gift: Any = None
    items: Optional[List[Any]] = Field(None, description="Booked lessons: lessonID, title, location, image, price, quantity")

    @field_validator("items", mode="before")
    @classmethod
    def drop_non_list_items(cls, v):
        # anything that isn't an array counts as a missing cart
        return v if isinstance(v, list) else None

    def address_complete(self) -> bool:
        return all(getattr(self, f) for f in ADDRESS_FIELDS)

    def to_document(self) -> dict:
        data = self.model_dump()
        data["items"] = data["items"] or []
        return data


class OrderCreated(BaseModel):
    message: str
    orderId: str

# Users collection
class UserSignup(BaseModel):
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class UserSignin(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class UserPublic(BaseModel):
    id: str
    email: str
    firstName: Optional[str] = None
    lastName: Optional[str] = None


class SigninResult(BaseModel):
    message: str
    user: UserPublic


class InsertResult(BaseModel):
    acknowledged: bool
    insertedId: str


class UpdateResult(BaseModel):
    msg: str
