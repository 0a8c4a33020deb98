import os
import sys

# Add the parent directory (backend) to the Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pytest
import sqlite3
import tempfile
from fastapi.testclient import TestClient

from core.catalog_provider import CatalogQueryError
from main import app

SQLITE_DDL = [
    """CREATE TABLE rhnchannelfamily (
        id      INTEGER PRIMARY KEY,
        label   TEXT NOT NULL,
        name    TEXT NOT NULL,
        org_id  INTEGER
    )""",
    "CREATE UNIQUE INDEX rhn_channel_family_label_uq ON rhnchannelfamily(label)",
    "CREATE UNIQUE INDEX rhn_channel_family_name_uq ON rhnchannelfamily(name)",
    """CREATE TABLE rhnchannel (
        id                 INTEGER PRIMARY KEY,
        label              TEXT NOT NULL,
        name               TEXT,
        channel_family_id  INTEGER,
        CONSTRAINT rhn_channel_cf_fk FOREIGN KEY (channel_family_id) REFERENCES rhnchannelfamily(id)
    )""",
    "CREATE UNIQUE INDEX rhn_channel_label_uq ON rhnchannel(label)",
    """CREATE TABLE rhnchannelfamilymembers (
        channel_id         INTEGER NOT NULL,
        channel_family_id  INTEGER NOT NULL,
        created            TIMESTAMP,
        FOREIGN KEY (channel_id) REFERENCES rhnchannel(id),
        FOREIGN KEY (channel_family_id) REFERENCES rhnchannelfamily(id)
    )""",
    "CREATE UNIQUE INDEX rhn_cf_members_uq ON rhnchannelfamilymembers(channel_id, channel_family_id)",
    """CREATE TABLE rhnchecksumtype (
        id     INTEGER PRIMARY KEY,
        label  TEXT NOT NULL,
        description TEXT
    )""",
    """CREATE TABLE rhnpackagearch (
        id     INTEGER PRIMARY KEY,
        label  TEXT UNIQUE,
        name   TEXT NOT NULL
    )""",
    """CREATE TABLE rhnarchtype (
        id     INTEGER PRIMARY KEY,
        label  TEXT NOT NULL,
        name   TEXT NOT NULL,
        UNIQUE (label)
    )""",
    """CREATE TABLE rhnchannelerrata (
        channel_id  INTEGER NOT NULL,
        errata_id   INTEGER NOT NULL,
        FOREIGN KEY (channel_id) REFERENCES rhnchannel(id),
        FOREIGN KEY (channel_id) REFERENCES rhnchannelfamily(id)
    )""",
]


@pytest.fixture(scope="session")
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def temp_sqlite_db():
    fd, path = tempfile.mkstemp(suffix=".db")
    try:
        conn = sqlite3.connect(path)
        cur = conn.cursor()
        for stmt in SQLITE_DDL:
            cur.execute(stmt)
        conn.commit()
        conn.close()
        yield path
    finally:
        os.close(fd)
        os.remove(path)


class StaticCatalogProvider:
    """In-memory catalog: {table: {columns, pk, sequence, indexes, fks}}."""

    def __init__(self, catalog: dict):
        self.catalog = catalog
        self.calls: list[tuple] = []

    def _table(self, table):
        self.calls.append(table)
        if table not in self.catalog:
            raise CatalogQueryError("columns", table, LookupError(f"relation \"{table}\" does not exist"))
        return self.catalog[table]

    def list_target_tables(self):
        return list(self.catalog)

    def get_columns(self, table):
        return list(self._table(table)["columns"])

    def get_primary_key_columns(self, table):
        return set(self._table(table).get("pk", []))

    def get_primary_key_sequence(self, table):
        return self._table(table).get("sequence", "")

    def list_unique_indexes(self, table):
        return {k: list(v) for k, v in self._table(table).get("indexes", {}).items()}

    def list_foreign_key_constraint_names(self, table):
        return list(self._table(table).get("fks", {}))

    def get_foreign_key_column_mapping(self, table, constraint_name):
        return dict(self._table(table)["fks"][constraint_name][1])

    def get_foreign_key_referenced_table(self, table, constraint_name):
        return self._table(table)["fks"][constraint_name][0]


RHN_CATALOG = {
    "rhnchannel": {
        "columns": ["id", "parent_channel", "org_id", "channel_arch_id", "label", "basedir", "name"],
        "pk": ["id"],
        "sequence": "rhn_channel_id_seq",
        "indexes": {
            "rhn_channel_name_uq": ["name"],
            "rhn_channel_label_uq": ["label"],
        },
        "fks": {
            "rhn_channel_caid_fk": ("rhnchannelarch", {"channel_arch_id": "id"}),
            "rhn_channel_parent_ch_fk": ("rhnchannel", {"parent_channel": "id"}),
            "rhn_channel_org_fk": ("web_customer", {"org_id": "id"}),
        },
    },
    "rhnchannelarch": {
        "columns": ["id", "label", "name", "arch_type_id"],
        "pk": ["id"],
        "sequence": "rhn_channel_arch_id_seq",
        "indexes": {"rhn_carch_label_uq": ["label"], "rhn_carch_name_uq": ["name"]},
        "fks": {"rhn_carch_atid_fk": ("rhnarchtype", {"arch_type_id": "id"})},
    },
    "rhnchannelfamily": {
        "columns": ["id", "org_id", "name", "label"],
        "pk": ["id"],
        "sequence": "rhn_channel_family_id_seq",
        "indexes": {"rhn_channel_family_label_uq": ["label"], "rhn_channel_family_name_uq": ["name"]},
        "fks": {"rhn_channel_family_org_fk": ("web_customer", {"org_id": "id"})},
    },
    "rhnchannelfamilymembers": {
        "columns": ["channel_id", "channel_family_id", "created", "modified"],
        "indexes": {"rhn_cf_member_uq": ["channel_id", "channel_family_id"]},
        "fks": {
            "rhn_cf_members_c_fk": ("rhnchannel", {"channel_id": "id"}),
            "rhn_cf_members_cf_fk": ("rhnchannelfamily", {"channel_family_id": "id"}),
        },
    },
    "rhnerrataseverity": {
        "columns": ["id", "rank", "label"],
        "pk": ["id"],
        "indexes": {"rhn_errata_sev_label_uq": ["label"]},
    },
    "rhnerrata": {
        "columns": ["id", "advisory", "advisory_name", "severity_id", "org_id"],
        "pk": ["id"],
        "sequence": "rhn_errata_id_seq",
        "indexes": {
            "rhn_errata_advname_org_uq": ["advisory_name", "org_id"],
            "rhn_errata_adv_org_uq": ["advisory", "org_id"],
        },
        "fks": {
            "rhn_errata_sevid_fk": ("rhnerrataseverity", {"severity_id": "id"}),
            "rhn_errata_oid_fk": ("web_customer", {"org_id": "id"}),
        },
    },
    "rhnarchtype": {
        "columns": ["id", "label", "name"],
        "pk": ["id"],
        "sequence": "rhn_archtype_id_seq",
        "indexes": {"rhn_archtype_label_uq": ["label"]},
    },
}


@pytest.fixture
def make_provider():
    return StaticCatalogProvider


@pytest.fixture
def rhn_provider():
    return StaticCatalogProvider(RHN_CATALOG)
