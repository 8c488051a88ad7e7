# manages connection to db, provides helper methods internal to db package
import asyncio
import json
import os
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from sqlite3 import Row

import aiosqlite

from db.seed import DEMO_CATEGORIES, DEMO_PRODUCTS
from utils import config
from utils.logger import get_logger

_logger = get_logger(__name__)

DB_PATH = config.DB_PATH
SEED_DEMO_DATA = config.SEED_DEMO_DATA

SCHEMA = """
CREATE TABLE IF NOT EXISTS documents (
    collection  TEXT NOT NULL,
    id          TEXT NOT NULL,
    data        TEXT NOT NULL,
    created_at  TEXT NOT NULL,
    PRIMARY KEY (collection, id)
);
CREATE INDEX IF NOT EXISTS idx_documents_collection ON documents (collection);

CREATE TABLE IF NOT EXISTS auth_users (
    uid           TEXT PRIMARY KEY,
    email         TEXT NOT NULL UNIQUE COLLATE NOCASE,
    pwd_hash      TEXT NOT NULL,
    display_name  TEXT,
    disabled      INTEGER NOT NULL DEFAULT 0,
    created_at    TEXT NOT NULL
);
"""

_initialized = False
_init_lock = asyncio.Lock()


def now_iso() -> str:
    """Server-side timestamp; ISO strings sort chronologically."""
    return datetime.now(timezone.utc).isoformat()


def new_id() -> str:
    return uuid.uuid4().hex


async def _seed(conn: aiosqlite.Connection) -> None:
    _logger.info(
        f"Seeding {len(DEMO_PRODUCTS)} demo products "
        f"and {len(DEMO_CATEGORIES)} categories..."
    )
    for name in DEMO_CATEGORIES:
        await conn.execute(
            "INSERT INTO documents(collection, id, data, created_at) VALUES (?, ?, ?, ?);",
            ("categories", new_id(), json.dumps({"name": name}), now_iso()),
        )
    for product in DEMO_PRODUCTS:
        created = now_iso()
        await conn.execute(
            "INSERT INTO documents(collection, id, data, created_at) VALUES (?, ?, ?, ?);",
            (
                "products",
                new_id(),
                json.dumps({**product, "createdAt": created}),
                created,
            ),
        )


async def _init_db(conn: aiosqlite.Connection) -> None:
    await conn.executescript(SCHEMA)
    if SEED_DEMO_DATA:
        await _seed(conn)
    await conn.commit()


async def _table_exists(conn: aiosqlite.Connection, table_name: str) -> bool:
    cur = await conn.execute(
        """
        SELECT name
        FROM sqlite_master
        WHERE type = 'table'
          AND name = ?;
        """,
        (table_name,),
    )
    row = await cur.fetchone()
    await cur.close()
    return row is not None


@asynccontextmanager
async def connect() -> aiosqlite.Connection:
    """Async context manager yielding an aiosqlite connection.

    Creates the schema (and demo catalog, when enabled) on first use.
    """
    global _initialized
    directory = os.path.dirname(DB_PATH)
    if directory:
        os.makedirs(directory, exist_ok=True)
    conn = await aiosqlite.connect(DB_PATH)
    conn.row_factory = Row
    try:
        if not _initialized:
            async with _init_lock:
                if not _initialized:
                    if not await _table_exists(conn, "documents"):
                        _logger.info(f"Initializing database at {DB_PATH}...")
                        await _init_db(conn)
                    _initialized = True
        yield conn
    finally:
        await conn.close()
