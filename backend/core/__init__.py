from core.naming import get_naming_convention, SuffixSequenceNaming, ExactSequenceNaming  # noqa: F401
from core.catalog_provider import (  # noqa: F401
    CatalogProvider, CatalogQueryError, PostgresCatalogProvider, InspectorCatalogProvider,
)
from core.schema_assembler import build_table, elect_main_unique_index, revoke_surrogate_backed_keys, read_tables  # noqa: F401
from core.db_connector import create_engine_from_request, inspect_schema  # noqa: F401
