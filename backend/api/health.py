"""GET /api/health — liveness and inspected services."""
from fastapi import APIRouter

from api.inspect import list_services
from config import settings

router = APIRouter()


@router.get("/health")
def health_check():
    services = list_services()
    return {
        "status": "ok",
        "target_tables": len(settings.target_table_list),
        "sequence_naming": settings.SEQUENCE_NAMING,
        "services_inspected": len(services),
    }
