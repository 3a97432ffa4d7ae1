"""
Signup and signin.

There are no sessions or tokens: signin only confirms the credentials and
returns the public part of the user document.
"""

import logging

from fastapi import APIRouter, Depends
from pymongo.errors import DuplicateKeyError

from config import Settings, get_app_settings
from database import DocumentStore, get_store
from errors import AuthError, ConflictError, ValidationError
from schemas import InsertResult, SigninResult, UserPublic, UserSignin, UserSignup
from security import hash_password, verify_password

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["accounts"])


@router.post("/signup", response_model=InsertResult)
def signup(
    user: UserSignup,
    store: DocumentStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
):
    if not user.email or not user.password:
        raise ValidationError("Email and password are required", field="email")

    doc = user.model_dump()
    doc["password"] = hash_password(user.password)
    try:
        # the unique index on email rejects duplicates atomically
        result = store.collection(settings.users_collection).insert_one(doc)
    except DuplicateKeyError:
        raise ConflictError("User already exists")
    logger.info(f"User {result.inserted_id} signed up")
    return InsertResult(acknowledged=result.acknowledged, insertedId=str(result.inserted_id))


@router.post("/signin", response_model=SigninResult)
def signin(
    credentials: UserSignin,
    store: DocumentStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
):
    if not credentials.email or not credentials.password:
        raise ValidationError("Email and password are required", field="email")

    found = store.collection(settings.users_collection).find_one({"email": credentials.email})
    if not found or not verify_password(credentials.password, found.get("password")):
        raise AuthError()

    return SigninResult(
        message="Login successful",
        user=UserPublic(
            id=str(found["_id"]),
            email=found["email"],
            firstName=found.get("firstName"),
            lastName=found.get("lastName"),
        ),
    )
