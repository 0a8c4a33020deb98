"""
Catalog metadata providers — answer structural questions about one table at a time.

Two adapters share one interface:
  * PostgresCatalogProvider  — raw catalog SQL against pg_catalog / information_schema
  * InspectorCatalogProvider — SQLAlchemy Inspector, dialect-neutral (SQLite, PostgreSQL)

Every call is a single read over a connection held by the caller. Any failure is
raised as CatalogQueryError; nothing is retried and no partial answer is returned.
"""
import logging
from contextlib import contextmanager
from typing import Optional, Protocol, runtime_checkable

from sqlalchemy import inspect as sa_inspect, text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError

from core.naming import SequenceNaming, POSTGRES_SEQUENCE_NAMING

logger = logging.getLogger(__name__)


class CatalogQueryError(RuntimeError):
    """A catalog query failed; the whole inspection run is aborted."""

    def __init__(self, operation: str, table: str, cause: Exception):
        self.operation = operation
        self.table = table
        super().__init__(f"Catalog query '{operation}' failed for table '{table}': {cause}")


@contextmanager
def _catalog_errors(operation: str, table: str):
    try:
        yield
    except SQLAlchemyError as e:
        logger.error("Catalog query %s failed for %s: %s", operation, table, e)
        raise CatalogQueryError(operation, table, e) from e


def _unused_name(base: str, taken) -> str:
    """``base``, or ``base1``, ``base2`` ... when already taken (PostgreSQL's own scheme)."""
    name, n = base, 0
    while name in taken:
        n += 1
        name = f"{base}{n}"
    return name


@runtime_checkable
class CatalogProvider(Protocol):
    """Structural facts about the target tables, one question per call."""

    def list_target_tables(self) -> list[str]: ...

    def get_columns(self, table: str) -> list[str]: ...

    def get_primary_key_columns(self, table: str) -> set[str]: ...

    def get_primary_key_sequence(self, table: str) -> str: ...

    def list_unique_indexes(self, table: str) -> dict[str, list[str]]: ...

    def list_foreign_key_constraint_names(self, table: str) -> list[str]: ...

    def get_foreign_key_column_mapping(self, table: str, constraint_name: str) -> dict[str, str]: ...

    def get_foreign_key_referenced_table(self, table: str, constraint_name: str) -> str: ...


# ── PostgreSQL catalog SQL ────────────────────────────────────────────────────

COLUMNS_SQL = """
    SELECT column_name
    FROM information_schema.columns
    WHERE table_schema = :schema AND table_name = :table
    ORDER BY ordinal_position
"""

# https://wiki.postgresql.org/wiki/Retrieve_primary_key_columns
PK_COLUMNS_SQL = """
    SELECT a.attname
    FROM pg_index i
    JOIN pg_attribute a ON a.attrelid = i.indrelid
        AND a.attnum = ANY(i.indkey)
    WHERE i.indrelid = CAST(:relation AS regclass)
    AND i.indisprimary
"""

PK_CONSTRAINT_SQL = """
    SELECT con.conname, a.attname
    FROM pg_constraint con
    JOIN pg_attribute a ON a.attrelid = con.conrelid
        AND a.attnum = ANY(con.conkey)
    WHERE con.contype = 'p'
    AND con.conrelid = CAST(:relation AS regclass)
"""

SEQUENCES_SQL = """
    SELECT sequence_name
    FROM information_schema.sequences
    WHERE sequence_schema = :schema
"""

UNIQUE_INDEX_NAMES_SQL = """
    SELECT c.relname
    FROM pg_index i
    JOIN pg_class c ON c.oid = i.indexrelid
    WHERE i.indrelid = CAST(:relation AS regclass)
    AND i.indisunique AND NOT i.indisprimary
    ORDER BY c.relname
"""

INDEX_COLUMNS_SQL = """
    SELECT a.attname
    FROM pg_index i
    JOIN pg_attribute a ON a.attrelid = i.indrelid
        AND a.attnum = ANY(i.indkey)
    WHERE i.indexrelid = CAST(:relation AS regclass)
    ORDER BY a.attnum
"""

FK_NAMES_SQL = """
    SELECT con.conname
    FROM pg_constraint con
    WHERE con.contype = 'f'
    AND con.conrelid = CAST(:relation AS regclass)
    ORDER BY con.conname
"""

FK_COLUMN_MAPPING_SQL = """
    SELECT la.attname AS column_name, ra.attname AS foreign_column_name
    FROM pg_constraint con
    CROSS JOIN LATERAL unnest(con.conkey, con.confkey) AS k(local_attnum, foreign_attnum)
    JOIN pg_attribute la ON la.attrelid = con.conrelid AND la.attnum = k.local_attnum
    JOIN pg_attribute ra ON ra.attrelid = con.confrelid AND ra.attnum = k.foreign_attnum
    WHERE con.contype = 'f'
    AND con.conrelid = CAST(:relation AS regclass)
    AND con.conname = :constraint
"""

FK_REFERENCED_TABLE_SQL = """
    SELECT c.relname
    FROM pg_constraint con
    JOIN pg_class c ON c.oid = con.confrelid
    WHERE con.contype = 'f'
    AND con.conrelid = CAST(:relation AS regclass)
    AND con.conname = :constraint
"""


class PostgresCatalogProvider:
    """Reads pg_catalog and information_schema directly."""

    def __init__(
        self,
        conn: Connection,
        table_names: list[str],
        schema: str = "public",
        naming: SequenceNaming = POSTGRES_SEQUENCE_NAMING,
    ):
        self.conn = conn
        self.table_names = list(table_names)
        self.schema = schema
        self.naming = naming

    def _relation(self, name: str) -> str:
        return f'"{self.schema}"."{name}"'

    def _rows(self, operation: str, table: str, sql: str, params: dict) -> list:
        with _catalog_errors(operation, table):
            return self.conn.execute(text(sql), params).fetchall()

    def list_target_tables(self) -> list[str]:
        return list(self.table_names)

    def get_columns(self, table: str) -> list[str]:
        rows = self._rows("columns", table, COLUMNS_SQL, {"schema": self.schema, "table": table})
        return [r[0] for r in rows]

    def get_primary_key_columns(self, table: str) -> set[str]:
        rows = self._rows("primary key", table, PK_COLUMNS_SQL, {"relation": self._relation(table)})
        return {r[0] for r in rows}

    def get_primary_key_sequence(self, table: str) -> str:
        rows = self._rows("primary key sequence", table, PK_CONSTRAINT_SQL, {"relation": self._relation(table)})
        # Only a single-column primary key named "id" can be sequence-backed
        if len(rows) != 1 or rows[0][1] != "id":
            return ""
        constraint_name = rows[0][0]
        sequences = self._rows("primary key sequence", table, SEQUENCES_SQL, {"schema": self.schema})
        return self.naming.match(constraint_name, [r[0] for r in sequences])

    def list_unique_indexes(self, table: str) -> dict[str, list[str]]:
        names = self._rows("unique indexes", table, UNIQUE_INDEX_NAMES_SQL, {"relation": self._relation(table)})
        result: dict[str, list[str]] = {}
        for (index_name,) in names:
            rows = self._rows("index columns", table, INDEX_COLUMNS_SQL, {"relation": self._relation(index_name)})
            result[index_name] = [r[0] for r in rows]
        return result

    def list_foreign_key_constraint_names(self, table: str) -> list[str]:
        rows = self._rows("foreign keys", table, FK_NAMES_SQL, {"relation": self._relation(table)})
        return [r[0] for r in rows]

    def get_foreign_key_column_mapping(self, table: str, constraint_name: str) -> dict[str, str]:
        rows = self._rows(
            f"foreign key {constraint_name}", table, FK_COLUMN_MAPPING_SQL,
            {"relation": self._relation(table), "constraint": constraint_name},
        )
        return {r[0]: r[1] for r in rows}

    def get_foreign_key_referenced_table(self, table: str, constraint_name: str) -> str:
        rows = self._rows(
            f"foreign key {constraint_name}", table, FK_REFERENCED_TABLE_SQL,
            {"relation": self._relation(table), "constraint": constraint_name},
        )
        return rows[0][0] if rows else ""


# ── SQLAlchemy Inspector ──────────────────────────────────────────────────────

class InspectorCatalogProvider:
    """Answers the same questions through SQLAlchemy's reflection API."""

    def __init__(
        self,
        conn: Connection,
        table_names: list[str],
        schema: Optional[str] = None,
        naming: SequenceNaming = POSTGRES_SEQUENCE_NAMING,
    ):
        self.insp = sa_inspect(conn)
        self.table_names = list(table_names)
        self.schema = schema
        self.naming = naming

    def list_target_tables(self) -> list[str]:
        return list(self.table_names)

    def get_columns(self, table: str) -> list[str]:
        with _catalog_errors("columns", table):
            return [c["name"] for c in self.insp.get_columns(table, schema=self.schema)]

    def get_primary_key_columns(self, table: str) -> set[str]:
        with _catalog_errors("primary key", table):
            pk = self.insp.get_pk_constraint(table, schema=self.schema)
        return set(pk.get("constrained_columns") or [])

    def get_primary_key_sequence(self, table: str) -> str:
        with _catalog_errors("primary key sequence", table):
            pk = self.insp.get_pk_constraint(table, schema=self.schema)
            if (pk.get("constrained_columns") or []) != ["id"]:
                return ""
            if not self.insp.dialect.supports_sequences:
                return ""
            sequences = self.insp.get_sequence_names(schema=self.schema)
        return self.naming.match(pk.get("name") or "", sequences)

    def list_unique_indexes(self, table: str) -> dict[str, list[str]]:
        found: dict[str, list[str]] = {}
        with _catalog_errors("unique indexes", table):
            pk_name = self.insp.get_pk_constraint(table, schema=self.schema).get("name")
            for ix in self.insp.get_indexes(table, schema=self.schema):
                if ix.get("unique") and ix.get("name"):
                    # expression members are reported as None
                    found[ix["name"]] = [c for c in ix["column_names"] if c]
            for uc in self.insp.get_unique_constraints(table, schema=self.schema):
                if uc.get("name"):
                    found.setdefault(uc["name"], list(uc["column_names"]))
                else:
                    # inline UNIQUE on SQLite is unnamed; use PostgreSQL's default naming
                    name = _unused_name(f"{table}_{'_'.join(uc['column_names'])}_key", found)
                    found[name] = list(uc["column_names"])
        found.pop(pk_name, None)
        return {name: found[name] for name in sorted(found)}

    def _foreign_keys(self, table: str) -> dict[str, dict]:
        with _catalog_errors("foreign keys", table):
            fks = self.insp.get_foreign_keys(table, schema=self.schema)
        result: dict[str, dict] = {}
        for fk in fks:
            # SQLite leaves inline constraints unnamed; use PostgreSQL's default naming
            name = fk.get("name") or _unused_name(f"{table}_{'_'.join(fk['constrained_columns'])}_fkey", result)
            result[name] = fk
        return result

    def list_foreign_key_constraint_names(self, table: str) -> list[str]:
        return sorted(self._foreign_keys(table))

    def get_foreign_key_column_mapping(self, table: str, constraint_name: str) -> dict[str, str]:
        fk = self._foreign_keys(table).get(constraint_name)
        if fk is None:
            return {}
        return dict(zip(fk["constrained_columns"], fk["referred_columns"]))

    def get_foreign_key_referenced_table(self, table: str, constraint_name: str) -> str:
        fk = self._foreign_keys(table).get(constraint_name)
        return fk["referred_table"] if fk else ""
