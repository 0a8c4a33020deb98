"""Pydantic schemas for the assembled table model and its natural-key election."""
from typing import Optional
from pydantic import BaseModel, Field


class UniqueIndex(BaseModel):
    """A unique index other than the primary-key index."""
    name: str
    columns: list[str] = Field(default_factory=list)


class Reference(BaseModel):
    """One outgoing foreign key."""
    table_name: str                                             # referenced table
    column_mapping: dict[str, str] = Field(default_factory=dict)  # local column → referenced column
    constraint_name: str = ""


class Table(BaseModel):
    name: str
    columns: list[str] = Field(default_factory=list)
    pk_columns: set[str] = Field(default_factory=set)
    pk_sequence: str = ""               # "" when the primary key is not sequence-backed
    unique_indexes: dict[str, UniqueIndex] = Field(default_factory=dict)
    main_unique_index_name: str = ""    # "" = no reliable natural key
    references: list[Reference] = Field(default_factory=list)

    @property
    def main_unique_index(self) -> Optional[UniqueIndex]:
        if not self.main_unique_index_name:
            return None
        return self.unique_indexes.get(self.main_unique_index_name)

    @property
    def has_surrogate_key(self) -> bool:
        return self.pk_sequence != ""
