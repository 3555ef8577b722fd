"""
In-memory REST collection endpoints

Development backend speaking the envelope format models expect with
``root_key = "resp"``: {"code": 0, "resp": <payload>, "msg": ""}.
"""

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional
import logging
import uuid


# Router for collection endpoints
router = APIRouter(prefix="/v1", tags=["Collections"])

# Logger for API operations
logger = logging.getLogger(__name__)

PRIMARY_KEY = "_id"


class Envelope(BaseModel):
    """Response envelope wrapping every payload."""

    code: int = Field(0, description="Business status code, 0 on success")
    resp: Any = Field(None, description="Payload")
    msg: str = Field("", description="Human readable message")


class CollectionStore:
    """Thread-unsafe in-memory collections keyed by name then by id."""

    def __init__(self):
        self.collections: Dict[str, Dict[str, Dict[str, Any]]] = {}

    def collection(self, name: str) -> Dict[str, Dict[str, Any]]:
        return self.collections.setdefault(name, {})

    def clear(self) -> None:
        self.collections.clear()


collections = CollectionStore()


def _get_item(collection: str, item_id: str) -> Dict[str, Any]:
    items = collections.collection(collection)
    if item_id not in items:
        raise HTTPException(status_code=404, detail=f"{collection}/{item_id} not found")
    return items[item_id]


async def _read_body(request: Request) -> Dict[str, Any]:
    if not await request.body():
        return {}
    body = await request.json()
    if not isinstance(body, dict):
        raise HTTPException(status_code=422, detail="Request body must be a JSON object")
    return body


@router.get("/{collection}", response_model=Envelope)
async def list_items(collection: str, request: Request) -> Envelope:
    """List items, filtered by query params (string equality)."""
    filters = dict(request.query_params)
    items: List[Dict[str, Any]] = [
        item for item in collections.collection(collection).values()
        if all(str(item.get(key)) == value for key, value in filters.items())
    ]
    return Envelope(resp=items)


@router.get("/{collection}/{item_id}", response_model=Envelope)
async def get_item(collection: str, item_id: str) -> Envelope:
    return Envelope(resp=_get_item(collection, item_id))


@router.post("/{collection}", response_model=Envelope)
async def create_item(collection: str, request: Request) -> Envelope:
    """Create an item with a generated primary key."""
    item = await _read_body(request)
    item[PRIMARY_KEY] = uuid.uuid4().hex
    collections.collection(collection)[item[PRIMARY_KEY]] = item

    logger.info(f"Created {collection}/{item[PRIMARY_KEY]}")
    return Envelope(resp=item)


@router.put("/{collection}/{item_id}", response_model=Envelope)
async def update_item(collection: str, item_id: str, request: Request) -> Envelope:
    item = _get_item(collection, item_id)
    item.update(await _read_body(request))
    item[PRIMARY_KEY] = item_id
    return Envelope(resp=item)


@router.delete("/{collection}/{item_id}", response_model=Envelope)
async def delete_item(collection: str, item_id: str) -> Envelope:
    item = _get_item(collection, item_id)
    del collections.collection(collection)[item_id]

    logger.info(f"Deleted {collection}/{item_id}")
    return Envelope(resp=item)


@router.delete("/{collection}", response_model=Envelope)
async def clear_collection(collection: str, request: Request) -> Envelope:
    """Delete items by ``ids`` in the body, or every item when none are given."""
    body = await _read_body(request)
    items = collections.collection(collection)
    ids: Optional[List[str]] = body.get("ids")

    if ids is None:
        removed = len(items)
        items.clear()
    else:
        removed = sum(1 for item_id in ids if items.pop(item_id, None) is not None)

    return Envelope(resp={"removed": removed})
