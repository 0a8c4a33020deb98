"""Pydantic schemas for database connection requests and inspection responses."""
from typing import Optional, Literal
from pydantic import BaseModel, Field

from models.schema import Table


class ConnectionRequest(BaseModel):
    db_type: Literal["sqlite", "postgresql"] = Field(..., description="Database engine type")
    service_name: str = Field(..., description="Unique name for this connection (used as registry key)")

    # SQLite only
    file_path: Optional[str] = Field(None, description="Absolute path to .db file (SQLite only)")

    # PostgreSQL only
    host: Optional[str] = Field(None, description="Database host")
    port: Optional[int] = Field(5432, description="Database port")
    database: Optional[str] = Field(None, description="Database name")
    username: Optional[str] = Field(None, description="Username")
    password: Optional[str] = Field(None, description="Password")
    db_schema: Optional[str] = Field(None, description="Catalog schema to inspect (PostgreSQL only)")

    def get_sqlalchemy_url(self) -> str:
        if self.db_type == "sqlite":
            return f"sqlite:///{self.file_path}"
        return (
            f"postgresql+psycopg2://{self.username}:{self.password}"
            f"@{self.host}:{self.port}/{self.database}"
        )


class InspectionRequest(ConnectionRequest):
    tables: Optional[list[str]] = Field(None, description="Override the configured target tables")


class InspectionResponse(BaseModel):
    service_name: str
    tables_inspected: int
    duration_seconds: float
    tables: list[Table]
