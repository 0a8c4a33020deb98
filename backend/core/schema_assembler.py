"""
Schema assembler — builds the Table model and elects each table's main unique index.

Two-phase pipeline:
  1. build every target table from catalog answers, with a provisional election
  2. revoke elections whose columns point at another table's sequence-generated id
"""
import logging
from typing import Optional

from core.catalog_provider import CatalogProvider
from models.schema import Table, UniqueIndex, Reference

logger = logging.getLogger(__name__)

# Columns that mark a unique index as the human-meaningful key, in order of preference
PREFERRED_KEY_COLUMNS = ("label", "name")
SURROGATE_COLUMN = "id"


def _find_index(indexes: dict[str, UniqueIndex], column: str) -> str:
    """Name of the first index (by name) that covers ``column``, or ""."""
    for name in sorted(indexes):
        if column in indexes[name].columns:
            return name
    return ""


def elect_main_unique_index(indexes: dict[str, UniqueIndex]) -> str:
    """Pick the unique index most likely to be a natural key.

    A single index wins outright. With several, an index covering ``label`` beats
    one covering ``name``; otherwise the lexicographically smallest name is used
    so the result does not depend on catalog ordering.
    """
    if not indexes:
        return ""
    if len(indexes) == 1:
        return next(iter(indexes))
    for column in PREFERRED_KEY_COLUMNS:
        found = _find_index(indexes, column)
        if found:
            return found
    return min(indexes)


def build_table(provider: CatalogProvider, table_name: str) -> Table:
    columns = provider.get_columns(table_name)
    pk_columns = provider.get_primary_key_columns(table_name)
    pk_sequence = provider.get_primary_key_sequence(table_name)

    unique_indexes = {
        name: UniqueIndex(name=name, columns=cols)
        for name, cols in provider.list_unique_indexes(table_name).items()
    }
    main_index = elect_main_unique_index(unique_indexes)

    references: list[Reference] = []
    for constraint_name in provider.list_foreign_key_constraint_names(table_name):
        references.append(Reference(
            table_name=provider.get_foreign_key_referenced_table(table_name, constraint_name),
            column_mapping=provider.get_foreign_key_column_mapping(table_name, constraint_name),
            constraint_name=constraint_name,
        ))

    logger.debug(
        "Table %s: %d columns, %d unique indexes, %d references, provisional key %r",
        table_name, len(columns), len(unique_indexes), len(references), main_index,
    )
    return Table(
        name=table_name,
        columns=columns,
        pk_columns=pk_columns,
        pk_sequence=pk_sequence,
        unique_indexes=unique_indexes,
        main_unique_index_name=main_index,
        references=references,
    )


def _points_at_surrogate(table: Table, column: str, by_name: dict[str, Table]) -> Optional[Reference]:
    """Return the reference mapping ``column`` onto a sequence-generated id, if any."""
    for ref in table.references:
        if ref.column_mapping.get(column) != SURROGATE_COLUMN:
            continue
        referenced = by_name.get(ref.table_name)
        # tables outside the inspected set never revoke
        if referenced is not None and referenced.has_surrogate_key:
            return ref
    return None


def revoke_surrogate_backed_keys(tables: list[Table]) -> list[Table]:
    """Clear main unique indexes that only encode a foreign surrogate id.

    Needs the complete table set, since it resolves references by name.
    Running it again on its own output changes nothing.
    """
    by_name = {t.name: t for t in tables}
    for table in tables:
        index = table.main_unique_index
        if index is None:
            continue
        for column in index.columns:
            ref = _points_at_surrogate(table, column, by_name)
            if ref is not None:
                logger.info(
                    "Revoking main unique index %s of %s: %s references %s.id (sequence %s)",
                    table.main_unique_index_name, table.name, column,
                    ref.table_name, by_name[ref.table_name].pk_sequence,
                )
                table.main_unique_index_name = ""
                break
    return tables


def read_tables(provider: CatalogProvider, table_names: Optional[list[str]] = None) -> list[Table]:
    """Assemble every target table, then run the cross-table correction pass."""
    names = table_names if table_names is not None else provider.list_target_tables()
    tables = [build_table(provider, name) for name in names]
    revoke_surrogate_backed_keys(tables)
    logger.info(
        "Assembled %d tables, %d with a main unique index",
        len(tables), sum(1 for t in tables if t.main_unique_index_name),
    )
    return tables
