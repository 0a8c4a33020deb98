"""
Database connector — SQLAlchemy engine factory and catalog inspection entry point.
Supports SQLite and PostgreSQL. Holds one connection for the whole inspection run.
"""
import logging
from typing import Optional
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import OperationalError

from config import settings
from core.catalog_provider import CatalogProvider, InspectorCatalogProvider, PostgresCatalogProvider
from core.naming import get_naming_convention
from core.schema_assembler import read_tables
from models.connection import ConnectionRequest
from models.schema import Table

logger = logging.getLogger(__name__)


def create_engine_from_request(req: ConnectionRequest):
    """Build and test a SQLAlchemy engine from a ConnectionRequest."""
    url = req.get_sqlalchemy_url()
    engine = create_engine(url, pool_pre_ping=True)
    # Validate the connection immediately
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except OperationalError as e:
        engine.dispose()
        raise ValueError(f"Could not connect to database: {e}") from e
    return engine


def connection_request_from_settings(service_name: str = "default") -> ConnectionRequest:
    return ConnectionRequest(
        db_type=settings.DB_TYPE,
        service_name=service_name,
        file_path=settings.DB_FILE_PATH or None,
        host=settings.DB_HOST,
        port=settings.DB_PORT,
        database=settings.DB_NAME,
        username=settings.DB_USER,
        password=settings.DB_PASSWORD,
        db_schema=settings.DB_SCHEMA,
    )


def _get_default_schema(db_type: str, requested: Optional[str] = None) -> Optional[str]:
    if db_type == "postgresql":
        return requested or settings.DB_SCHEMA
    return None   # SQLite has no schema concept


def build_provider(conn: Connection, req: ConnectionRequest, table_names: list[str]) -> CatalogProvider:
    """Pick the catalog adapter for the connected dialect."""
    naming = get_naming_convention(settings.SEQUENCE_NAMING)
    schema = _get_default_schema(req.db_type, req.db_schema)
    if conn.dialect.name == "postgresql" and settings.CATALOG_ADAPTER != "inspector":
        return PostgresCatalogProvider(conn, table_names, schema=schema, naming=naming)
    return InspectorCatalogProvider(conn, table_names, schema=schema, naming=naming)


def inspect_schema(req: ConnectionRequest, table_names: Optional[list[str]] = None) -> list[Table]:
    """
    Inspect the target tables and elect their main unique indexes.
    Raises ValueError when the database is unreachable and CatalogQueryError
    when any catalog query fails; no partial result is returned.
    """
    names = table_names if table_names else settings.target_table_list
    engine = create_engine_from_request(req)
    try:
        with engine.connect() as conn:
            provider = build_provider(conn, req, names)
            logger.info("Inspecting %d tables in %s", len(names), req.service_name)
            return read_tables(provider)
    finally:
        engine.dispose()
