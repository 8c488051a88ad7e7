# src/db/documents.py
"""
Async document store over SQLite.

Documents are JSON objects grouped in collections, addressed by an opaque id
assigned on create. Every create stamps a server-side `createdAt`. Any error
of the underlying store is re-raised as RemoteError so callers only have one
failure type to handle.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Tuple

import aiosqlite

from db.database import connect, new_id, now_iso
from utils.logger import get_logger

_logger = get_logger(__name__)

COLLECTIONS = ("products", "orders", "users", "categories")

_STORE_ERRORS = (aiosqlite.Error, OSError)


class RemoteError(Exception):
    """A remote call failed; the message is fit to show to the user."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(RemoteError):
    pass


def _field_path(name: str) -> str:
    if not name.replace("_", "").isalnum():
        raise ValueError(f"Invalid field name: {name!r}")
    return f"$.{name}"


def _row_to_doc(row) -> Dict[str, Any]:
    doc = json.loads(row["data"])
    doc["id"] = row["id"]
    return doc


async def create(collection: str, data: Dict[str, Any]) -> str:
    """Insert a new document and return its id."""
    doc_id = new_id()
    created = now_iso()
    payload = {k: v for k, v in data.items() if k != "id"}
    payload["createdAt"] = created
    try:
        async with connect() as conn:
            await conn.execute(
                "INSERT INTO documents(collection, id, data, created_at) VALUES (?, ?, ?, ?);",
                (collection, doc_id, json.dumps(payload), created),
            )
            await conn.commit()
    except _STORE_ERRORS as e:
        _logger.error(f"create in {collection} failed: {e}")
        raise RemoteError(f"Failed to write to {collection}") from e
    return doc_id


async def read_all(
    collection: str,
    order_by: Optional[str] = None,
    descending: bool = False,
    where: Optional[Tuple[str, Any]] = None,
) -> List[Dict[str, Any]]:
    """
    Every document in `collection`, optionally filtered by one field equality
    and ordered by one field. Without `order_by`, insertion order.
    """
    sql = "SELECT id, data FROM documents WHERE collection = ?"
    params: List[Any] = [collection]
    if where is not None:
        field, value = where
        sql += " AND json_extract(data, ?) = ?"
        params.extend([_field_path(field), value])
    if order_by:
        direction = "DESC" if descending else "ASC"
        sql += f" ORDER BY json_extract(data, ?) {direction}, rowid {direction}"
        params.append(_field_path(order_by))
    else:
        sql += " ORDER BY rowid"

    try:
        async with connect() as conn:
            cur = await conn.execute(sql + ";", tuple(params))
            rows = await cur.fetchall()
            await cur.close()
    except _STORE_ERRORS as e:
        _logger.error(f"read_all of {collection} failed: {e}")
        raise RemoteError(f"Failed to fetch {collection}") from e
    return [_row_to_doc(row) for row in rows]


async def read_one(collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
    try:
        async with connect() as conn:
            cur = await conn.execute(
                "SELECT id, data FROM documents WHERE collection = ? AND id = ?;",
                (collection, doc_id),
            )
            row = await cur.fetchone()
            await cur.close()
    except _STORE_ERRORS as e:
        _logger.error(f"read_one {collection}/{doc_id} failed: {e}")
        raise RemoteError(f"Failed to fetch from {collection}") from e
    return _row_to_doc(row) if row else None


async def update(collection: str, doc_id: str, fields: Dict[str, Any]) -> None:
    """Shallow-merge `fields` into an existing document."""
    try:
        async with connect() as conn:
            cur = await conn.execute(
                "SELECT data FROM documents WHERE collection = ? AND id = ?;",
                (collection, doc_id),
            )
            row = await cur.fetchone()
            await cur.close()
            if not row:
                raise NotFoundError(f"No document {doc_id} in {collection}")
            data = json.loads(row["data"])
            data.update({k: v for k, v in fields.items() if k != "id"})
            await conn.execute(
                "UPDATE documents SET data = ? WHERE collection = ? AND id = ?;",
                (json.dumps(data), collection, doc_id),
            )
            await conn.commit()
    except _STORE_ERRORS as e:
        _logger.error(f"update {collection}/{doc_id} failed: {e}")
        raise RemoteError(f"Failed to update {collection}") from e


async def set_document(
    collection: str, doc_id: str, data: Dict[str, Any], merge: bool = True
) -> None:
    """Write a document under a caller-chosen id, merging into it if it exists."""
    try:
        async with connect() as conn:
            cur = await conn.execute(
                "SELECT data, created_at FROM documents WHERE collection = ? AND id = ?;",
                (collection, doc_id),
            )
            row = await cur.fetchone()
            await cur.close()
            payload = {k: v for k, v in data.items() if k != "id"}
            if row is None:
                created = now_iso()
                payload.setdefault("createdAt", created)
                await conn.execute(
                    "INSERT INTO documents(collection, id, data, created_at) VALUES (?, ?, ?, ?);",
                    (collection, doc_id, json.dumps(payload), created),
                )
            else:
                old = json.loads(row["data"])
                if merge:
                    payload = {**old, **payload}
                elif "createdAt" in old:
                    payload.setdefault("createdAt", old["createdAt"])
                await conn.execute(
                    "UPDATE documents SET data = ? WHERE collection = ? AND id = ?;",
                    (json.dumps(payload), collection, doc_id),
                )
            await conn.commit()
    except _STORE_ERRORS as e:
        _logger.error(f"set {collection}/{doc_id} failed: {e}")
        raise RemoteError(f"Failed to write to {collection}") from e


async def delete(collection: str, doc_id: str) -> None:
    """Delete a document. Deleting a missing document is not an error."""
    try:
        async with connect() as conn:
            await conn.execute(
                "DELETE FROM documents WHERE collection = ? AND id = ?;",
                (collection, doc_id),
            )
            await conn.commit()
    except _STORE_ERRORS as e:
        _logger.error(f"delete {collection}/{doc_id} failed: {e}")
        raise RemoteError(f"Failed to delete from {collection}") from e
