# perfmon/db.py
"""
Database Connection Management

Version: 1.0.0
Features:
- Singleton pattern with thread-safe double-checked locking
- Connection pooling with auto-reconnect
- Health check utilities
- Query execution helpers (dict rows, DataFrames, mutations)
"""

import json
import logging
import threading
from contextlib import contextmanager
from datetime import datetime
from typing import Tuple, Optional, Dict, Any, List, Union
from urllib.parse import quote_plus

import pandas as pd
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.pool import QueuePool, StaticPool
from sqlalchemy.sql.elements import TextClause

from .config import config

logger = logging.getLogger(__name__)

Query = Union[str, TextClause]

# ==================== SINGLETON ENGINE ====================

_engine = None
_engine_lock = threading.Lock()


def get_db_engine() -> Engine:
    """
    Get SQLAlchemy database engine (singleton pattern)

    Thread-safe implementation using double-checked locking.
    Reuses the same engine across all calls to prevent
    connection pool exhaustion.
    """
    global _engine

    if _engine is None:
        with _engine_lock:
            if _engine is None:
                _engine = _create_engine()

    return _engine


def build_db_url(db_config: Dict[str, Any]) -> str:
    """Build the SQLAlchemy URL from the database configuration"""
    if db_config.get("url"):
        return db_config["url"]

    password = quote_plus(str(db_config["password"]))
    return (
        f"{db_config['driver']}://{db_config['user']}:{password}"
        f"@{db_config['host']}:{db_config['port']}/{db_config['database']}"
    )


def _create_engine() -> Engine:
    """Create new database engine with configured settings"""
    db_config = config.get_db_config()
    app_config = config.app_config
    url = build_db_url(db_config)

    if url.startswith("sqlite"):
        # One shared connection so in-memory databases survive across calls
        logger.info("🔌 Creating SQLite engine")
        return create_engine(
            url,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )

    pool_size = app_config.get("DB_POOL_SIZE", 5)
    pool_recycle = app_config.get("DB_POOL_RECYCLE", 3600)

    logger.info(
        f"🔌 Creating database engine: {db_config['driver']}://{db_config['user']}:***"
        f"@{db_config['host']}:{db_config['port']}/{db_config['database']}"
    )

    engine = create_engine(
        url,
        poolclass=QueuePool,
        pool_size=pool_size,
        max_overflow=10,
        pool_timeout=30,
        pool_recycle=pool_recycle,
        pool_pre_ping=True,  # Auto-reconnect on stale connections
        echo=False
    )

    logger.info(f"✅ Database engine created (pool_size={pool_size}, recycle={pool_recycle}s)")

    return engine


# ==================== CONNECTION MANAGEMENT ====================

def check_db_connection() -> Tuple[bool, Optional[str]]:
    """
    Check if database connection is healthy

    Returns:
        Tuple of (is_connected: bool, error_message: str or None)
    """
    try:
        engine = get_db_engine()
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True, None
    except OperationalError as e:
        logger.error(f"❌ Database connection failed: {e}")
        return False, "Cannot connect to database. Please check your network connection."
    except Exception as e:
        logger.error(f"❌ Database error: {e}")
        return False, f"Database error: {str(e)}"


def reset_db_engine():
    """Dispose the engine; the next query reconnects with current settings"""
    global _engine

    with _engine_lock:
        if _engine is not None:
            try:
                _engine.dispose()
                logger.info("🔄 Database engine disposed")
            except Exception as e:
                logger.error(f"Error disposing engine: {e}")
            _engine = None


# ==================== CONTEXT MANAGERS ====================

@contextmanager
def get_connection():
    """
    Context manager for database connections

    Usage:
        with get_connection() as conn:
            result = conn.execute(text("SELECT * FROM accounts"))
    """
    engine = get_db_engine()
    conn = engine.connect()
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


@contextmanager
def get_transaction():
    """
    Context manager for database transactions

    Usage:
        with get_transaction() as conn:
            conn.execute(text("INSERT INTO users ..."))
            conn.execute(text("INSERT INTO users_meta ..."))
            # Auto-commit on success, auto-rollback on exception
    """
    engine = get_db_engine()
    conn = engine.connect()
    trans = conn.begin()
    try:
        yield conn
        trans.commit()
    except Exception:
        trans.rollback()
        raise
    finally:
        conn.close()


# ==================== QUERY HELPERS ====================

def _as_clause(query: Query) -> TextClause:
    return query if isinstance(query, TextClause) else text(query)


def execute_query(query: Query, params: Dict = None) -> List[Dict]:
    """
    Execute SELECT query and return results as list of dicts
    """
    engine = get_db_engine()

    with engine.connect() as conn:
        result = conn.execute(_as_clause(query), params or {})
        return [dict(row._mapping) for row in result]


def execute_query_df(query: Query, params: Dict = None) -> pd.DataFrame:
    """
    Execute SELECT query and return results as DataFrame
    """
    engine = get_db_engine()
    with engine.connect() as conn:
        return pd.read_sql(_as_clause(query), conn, params=params or {})


def execute_update(query: Query, params: Dict = None) -> int:
    """
    Execute INSERT/UPDATE/DELETE query

    Returns:
        Number of affected rows
    """
    engine = get_db_engine()

    with engine.connect() as conn:
        result = conn.execute(_as_clause(query), params or {})
        conn.commit()
        return result.rowcount


# ==================== VALUE HELPERS ====================

def now_timestamp() -> str:
    """Current local time in a format every supported dialect accepts"""
    return datetime.now().strftime("%Y-%m-%d %H:%M:%S")


def to_json(value: Optional[Dict]) -> Optional[str]:
    return json.dumps(value) if value is not None else None


def from_json(value: Any) -> Dict:
    """Decode a JSON column; drivers return either str or already-decoded values"""
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return {}
    if isinstance(value, (bytes, bytearray)):
        value = value.decode()
    if isinstance(value, str):
        try:
            decoded = json.loads(value)
        except ValueError:
            logger.warning("Could not decode JSON column value")
            return {}
        return decoded if isinstance(decoded, dict) else {}
    return dict(value) if isinstance(value, dict) else {}


# ==================== EXPORTS ====================

__all__ = [
    'get_db_engine',
    'build_db_url',
    'check_db_connection',
    'reset_db_engine',
    'get_connection',
    'get_transaction',
    'execute_query',
    'execute_query_df',
    'execute_update',
    'now_timestamp',
    'to_json',
    'from_json',
]
