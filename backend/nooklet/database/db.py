"""
Database connection and initialization.
"""

import aiosqlite
from pathlib import Path
from nooklet.config import settings
from nooklet.logging import get_logger

logger = get_logger('database')

DATABASE_PATH = Path(settings.DATABASE_PATH)


async def connect(db_path: str | Path = DATABASE_PATH) -> aiosqlite.Connection:
    """
    Open a connection with row access by name and foreign keys enforced.

    :param db_path: Path to the SQLite database file
    :type db_path: str | Path
    :return: Open database connection; the caller closes it
    :rtype: aiosqlite.Connection
    """
    db = await aiosqlite.connect(db_path)
    db.row_factory = aiosqlite.Row
    await db.execute("PRAGMA foreign_keys = ON")
    return db


async def init_db(db_path: str | Path = DATABASE_PATH):
    """
    Initialize database with schema.

    :param db_path: Path to the SQLite database file
    :type db_path: str | Path
    :return: None
    :rtype: None
    """
    db_path = Path(db_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)

    async with aiosqlite.connect(db_path) as db:
        schema_path = Path(__file__).parent / "init_db.sql"
        with open(schema_path) as f:
            await db.executescript(f.read())
        await db.commit()
        logger.info(f"Database initialized at {db_path}")
