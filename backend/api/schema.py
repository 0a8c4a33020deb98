"""GET /api/schema — previously inspected table models."""
from fastapi import APIRouter, HTTPException

from api.inspect import get_tables
from models.schema import Table

router = APIRouter()


@router.get("/schema/{service_name}", response_model=list[Table])
def get_schema(service_name: str):
    return get_tables(service_name)


@router.get("/schema/{service_name}/{table_name}", response_model=Table)
def get_table(service_name: str, table_name: str):
    for table in get_tables(service_name):
        if table.name == table_name:
            return table
    raise HTTPException(404, detail=f"Table '{table_name}' not found in '{service_name}'.")
