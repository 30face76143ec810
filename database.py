"""
MongoDB access helpers.

Collections are named after the lowercase entity: "user", "category",
"product", "cart_item", "order".
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from bson import ObjectId
from fastapi import HTTPException
from pydantic import BaseModel
from pymongo import ASCENDING, MongoClient, ReturnDocument

from config import DATABASE_NAME, DATABASE_URL

logger = logging.getLogger(__name__)

_client = None
db = None

if DATABASE_URL and DATABASE_NAME:
    _client = MongoClient(DATABASE_URL)
    db = _client[DATABASE_NAME]


def set_database(database) -> None:
    """Swap the active database handle (used by tests and scripts)."""
    global db
    db = database


def get_db():
    if db is None:
        raise HTTPException(status_code=503, detail="Database not available. Set DATABASE_URL and DATABASE_NAME.")
    return db


def now() -> datetime:
    return datetime.now(timezone.utc)


def oid(id_str: str) -> ObjectId:
    if not ObjectId.is_valid(id_str):
        raise HTTPException(status_code=400, detail="Invalid id")
    return ObjectId(id_str)


def to_str_id(doc: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if not doc:
        return doc
    d = dict(doc)
    if d.get("_id") is not None:
        d["id"] = str(d.pop("_id"))
    return d


def create_document(collection_name: str, data: Union[BaseModel, dict]) -> str:
    """Insert a document, stamping created_at/updated_at. Returns the new id."""
    if isinstance(data, BaseModel):
        data_dict = data.model_dump()
    else:
        data_dict = dict(data)
    stamp = now()
    data_dict.setdefault("created_at", stamp)
    data_dict["updated_at"] = stamp
    result = get_db()[collection_name].insert_one(data_dict)
    return str(result.inserted_id)


def get_documents(
    collection_name: str,
    filter_dict: Optional[Dict[str, Any]] = None,
    sort: Optional[List[tuple]] = None,
    limit: Optional[int] = None,
) -> List[Dict[str, Any]]:
    cursor = get_db()[collection_name].find(filter_dict or {})
    if sort:
        cursor = cursor.sort(sort)
    if limit:
        cursor = cursor.limit(limit)
    return list(cursor)


def find_by_id(collection_name: str, id_str: str) -> Optional[Dict[str, Any]]:
    if not ObjectId.is_valid(id_str):
        return None
    return get_db()[collection_name].find_one({"_id": ObjectId(id_str)})


def update_document(collection_name: str, id_str: str, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Apply a $set to one document and return it after the update."""
    changes = dict(changes)
    changes["updated_at"] = now()
    return get_db()[collection_name].find_one_and_update(
        {"_id": oid(id_str)},
        {"$set": changes},
        return_document=ReturnDocument.AFTER,
    )


def ensure_indexes() -> None:
    if db is None:
        logger.warning("No database configured; skipping index creation")
        return
    db["user"].create_index([("email", ASCENDING)], unique=True)
    db["cart_item"].create_index([("user_id", ASCENDING), ("product_id", ASCENDING)], unique=True)
    db["order"].create_index([("order_number", ASCENDING)], unique=True)
    db["product"].create_index([("category_id", ASCENDING)])
    logger.info("Database indexes ensured")
