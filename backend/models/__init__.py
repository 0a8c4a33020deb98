from models.schema import Table, UniqueIndex, Reference  # noqa: F401
from models.connection import ConnectionRequest, InspectionRequest, InspectionResponse  # noqa: F401
