"""POST /api/inspect — read catalog metadata and elect main unique indexes."""
import logging
import time
from fastapi import APIRouter, HTTPException

from core.catalog_provider import CatalogQueryError
from core.db_connector import inspect_schema, connection_request_from_settings
from models.connection import ConnectionRequest, InspectionRequest, InspectionResponse
from models.schema import Table

router = APIRouter()
logger = logging.getLogger(__name__)

# In-memory registry: service_name → inspected tables
_schema_registry: dict[str, list[Table]] = {}


def get_tables(service_name: str) -> list[Table]:
    if service_name not in _schema_registry:
        raise HTTPException(404, detail=f"Service '{service_name}' not found. Please inspect it first.")
    return _schema_registry[service_name]


def list_services() -> list[str]:
    return list(_schema_registry.keys())


def _run_inspection(req: ConnectionRequest, table_names) -> InspectionResponse:
    t0 = time.time()
    try:
        tables = inspect_schema(req, table_names)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except CatalogQueryError as e:
        logger.error("Inspection of %s aborted: %s", req.service_name, e)
        raise HTTPException(status_code=502, detail=str(e))

    _schema_registry[req.service_name] = tables

    return InspectionResponse(
        service_name=req.service_name,
        tables_inspected=len(tables),
        duration_seconds=round(time.time() - t0, 2),
        tables=tables,
    )


@router.post("/inspect", response_model=InspectionResponse, status_code=201)
def inspect(req: InspectionRequest):
    """
    1. Validate DB connection
    2. Read columns, keys, unique indexes and foreign keys of the target tables
    3. Elect and correct each table's main unique index
    4. Store and return the model
    """
    return _run_inspection(req, req.tables)


@router.post("/inspect/default", response_model=InspectionResponse, status_code=201)
def inspect_default():
    """Inspect the database configured in settings."""
    return _run_inspection(connection_request_from_settings(), None)
