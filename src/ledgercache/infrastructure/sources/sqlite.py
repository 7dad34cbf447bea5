"""SQLite source of record built on aiosqlite.

Reference implementation of ``IRecordStore`` for the four list entities.
Each entity has an explicit mapping from its typed filter class to a
parameterised ``WHERE`` clause; rows are returned as camelCase dicts with
the owning company (and, for products, the vendor) embedded.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

import aiosqlite

from ledgercache.core.entities.filters import (
    ClientFilters,
    DigitalWalletFilters,
    ProductFilters,
    QueryFilterSpec,
    SortDirection,
    VendorFilters,
)

SqlFragment = tuple[str, list[Any]]

SCHEMA = """
CREATE TABLE IF NOT EXISTS companies (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    trading_name TEXT NOT NULL,
    legal_name TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS vendors (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    company_id INTEGER NOT NULL REFERENCES companies(id),
    company_name TEXT NOT NULL,
    contact_person TEXT NOT NULL DEFAULT '',
    contact_email TEXT NOT NULL DEFAULT '',
    items_services_sold TEXT NOT NULL DEFAULT '',
    currency TEXT NOT NULL DEFAULT 'EUR',
    is_active INTEGER NOT NULL DEFAULT 1,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS products (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    company_id INTEGER NOT NULL REFERENCES companies(id),
    vendor_id INTEGER REFERENCES vendors(id),
    name TEXT NOT NULL,
    description TEXT NOT NULL DEFAULT '',
    price REAL NOT NULL DEFAULT 0,
    currency TEXT NOT NULL DEFAULT 'EUR',
    cost REAL NOT NULL DEFAULT 0,
    is_active INTEGER NOT NULL DEFAULT 1,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS clients (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    company_id INTEGER NOT NULL REFERENCES companies(id),
    name TEXT NOT NULL,
    email TEXT NOT NULL DEFAULT '',
    contact_person_name TEXT NOT NULL DEFAULT '',
    industry TEXT NOT NULL DEFAULT '',
    city TEXT NOT NULL DEFAULT '',
    country TEXT NOT NULL DEFAULT '',
    status TEXT NOT NULL DEFAULT 'ACTIVE',
    total_invoiced REAL NOT NULL DEFAULT 0,
    last_invoice_date TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS digital_wallets (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    company_id INTEGER NOT NULL REFERENCES companies(id),
    wallet_type TEXT NOT NULL,
    wallet_name TEXT NOT NULL,
    wallet_address TEXT NOT NULL DEFAULT '',
    currency TEXT NOT NULL DEFAULT '',
    currencies TEXT NOT NULL DEFAULT '',
    blockchain TEXT NOT NULL DEFAULT '',
    description TEXT NOT NULL DEFAULT '',
    is_active INTEGER NOT NULL DEFAULT 1,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
"""


async def connect(database: str = ":memory:") -> aiosqlite.Connection:
    """Open a connection and make sure the schema exists."""
    db = await aiosqlite.connect(database)
    db.row_factory = aiosqlite.Row
    await db.executescript(SCHEMA)
    await db.commit()
    return db


def _like(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _search(columns: tuple[str, ...], term: str) -> SqlFragment:
    clause = " OR ".join(f"t.{c} LIKE ? ESCAPE '\\'" for c in columns)
    return f"({clause})", [_like(term)] * len(columns)


def product_where(filters: ProductFilters) -> list[SqlFragment]:
    clauses: list[SqlFragment] = []
    if filters.is_active is not None:
        clauses.append(("t.is_active = ?", [int(filters.is_active)]))
    if filters.currency:
        clauses.append(("t.currency = ?", [filters.currency]))
    return clauses


def vendor_where(filters: VendorFilters) -> list[SqlFragment]:
    if filters.status is None:
        return []
    return [("t.is_active = ?", [int(filters.status == "active")])]


def client_where(filters: ClientFilters) -> list[SqlFragment]:
    clauses: list[SqlFragment] = []
    if filters.status:
        clauses.append(("t.status = ?", [filters.status]))
    if filters.industry:
        clauses.append(("t.industry = ?", [filters.industry]))
    return clauses


def digital_wallet_where(filters: DigitalWalletFilters) -> list[SqlFragment]:
    clauses: list[SqlFragment] = []
    if filters.wallet_type:
        clauses.append(("t.wallet_type = ?", [filters.wallet_type]))
    if filters.currency:
        clauses.append(
            (
                "(UPPER(t.currency) = ? OR UPPER(t.currencies) LIKE ? ESCAPE '\\')",
                [filters.currency, _like(filters.currency)],
            )
        )
    return clauses


@dataclass(frozen=True)
class TableSpec:
    """How one entity maps onto its table.

    ``columns`` maps public (camelCase) names to column names for every
    writable field; ``sort_columns`` does the same for sortable fields.
    ``visible`` restricts list pages, counts and statistics.
    """

    entity: str
    table: str
    columns: Mapping[str, str]
    search_columns: tuple[str, ...]
    sort_columns: Mapping[str, str]
    where: Callable[[Any], list[SqlFragment]]
    bool_columns: frozenset[str] = frozenset()
    embed_vendor: bool = False
    visible: str | None = None


PRODUCTS_TABLE = TableSpec(
    entity="products",
    table="products",
    columns={
        "companyId": "company_id",
        "vendorId": "vendor_id",
        "name": "name",
        "description": "description",
        "price": "price",
        "currency": "currency",
        "cost": "cost",
        "isActive": "is_active",
    },
    search_columns=("name", "description"),
    sort_columns={"name": "name", "price": "price", "cost": "cost", "createdAt": "created_at"},
    where=product_where,
    bool_columns=frozenset({"is_active"}),
    embed_vendor=True,
)

VENDORS_TABLE = TableSpec(
    entity="vendors",
    table="vendors",
    columns={
        "companyId": "company_id",
        "companyName": "company_name",
        "contactPerson": "contact_person",
        "contactEmail": "contact_email",
        "itemsServicesSold": "items_services_sold",
        "currency": "currency",
        "isActive": "is_active",
    },
    search_columns=("company_name", "contact_person", "contact_email", "items_services_sold"),
    sort_columns={
        "companyName": "company_name",
        "contactPerson": "contact_person",
        "contactEmail": "contact_email",
        "createdAt": "created_at",
        "updatedAt": "updated_at",
    },
    where=vendor_where,
    bool_columns=frozenset({"is_active"}),
)

CLIENTS_TABLE = TableSpec(
    entity="clients",
    table="clients",
    columns={
        "companyId": "company_id",
        "name": "name",
        "email": "email",
        "contactPersonName": "contact_person_name",
        "industry": "industry",
        "city": "city",
        "country": "country",
        "status": "status",
        "totalInvoiced": "total_invoiced",
        "lastInvoiceDate": "last_invoice_date",
    },
    search_columns=("name", "email", "contact_person_name", "industry", "city", "country"),
    sort_columns={
        "name": "name",
        "email": "email",
        "industry": "industry",
        "totalInvoiced": "total_invoiced",
        "lastInvoiceDate": "last_invoice_date",
        "createdAt": "created_at",
    },
    where=client_where,
)

DIGITAL_WALLETS_TABLE = TableSpec(
    entity="digital-wallets",
    table="digital_wallets",
    columns={
        "companyId": "company_id",
        "walletType": "wallet_type",
        "walletName": "wallet_name",
        "walletAddress": "wallet_address",
        "currency": "currency",
        "currencies": "currencies",
        "blockchain": "blockchain",
        "description": "description",
        "isActive": "is_active",
    },
    search_columns=(
        "wallet_name",
        "wallet_address",
        "wallet_type",
        "currency",
        "currencies",
        "blockchain",
        "description",
    ),
    sort_columns={
        "walletName": "wallet_name",
        "walletType": "wallet_type",
        "currency": "currency",
        "blockchain": "blockchain",
        "createdAt": "created_at",
    },
    where=digital_wallet_where,
    bool_columns=frozenset({"is_active"}),
    # Inactive wallets never appear in the list.
    visible="t.is_active = 1",
)

TABLES: dict[str, TableSpec] = {
    spec.entity: spec
    for spec in (PRODUCTS_TABLE, VENDORS_TABLE, CLIENTS_TABLE, DIGITAL_WALLETS_TABLE)
}


class SqliteListSource:
    """Source of record for one entity table."""

    def __init__(self, db: aiosqlite.Connection, spec: TableSpec) -> None:
        self._db = db
        self._spec = spec

    @property
    def entity(self) -> str:
        return self._spec.entity

    def _select(self) -> str:
        spec = self._spec
        select = [
            "t.*",
            "c.trading_name AS company_trading_name",
            "c.legal_name AS company_legal_name",
        ]
        joins = [f"FROM {spec.table} t", "LEFT JOIN companies c ON c.id = t.company_id"]
        if spec.embed_vendor:
            select += [
                "v.company_name AS vendor_company_name",
                "v.is_active AS vendor_is_active",
            ]
            joins.append("LEFT JOIN vendors v ON v.id = t.vendor_id")
        return f"SELECT {', '.join(select)} {' '.join(joins)}"

    def _where(self, filters: QueryFilterSpec) -> SqlFragment:
        clauses: list[SqlFragment] = []
        if self._spec.visible:
            clauses.append((self._spec.visible, []))
        if filters.company is not None:
            clauses.append(("t.company_id = ?", [filters.company]))
        if filters.search:
            clauses.append(_search(self._spec.search_columns, filters.search))
        clauses.extend(self._spec.where(filters))

        if not clauses:
            return "", []
        sql = " WHERE " + " AND ".join(c for c, _ in clauses)
        params = [p for _, ps in clauses for p in ps]
        return sql, params

    def _order_by(self, filters: QueryFilterSpec) -> str:
        column = self._spec.sort_columns.get(filters.sort_field, "created_at")
        direction = "ASC" if filters.sort_direction == SortDirection.ASC else "DESC"
        return f" ORDER BY t.{column} {direction}, t.id {direction}"

    def _to_dict(self, row: aiosqlite.Row) -> dict[str, Any]:
        spec = self._spec
        result: dict[str, Any] = {"id": row["id"]}
        for name, column in spec.columns.items():
            value = row[column]
            if column in spec.bool_columns:
                value = bool(value)
            result[name] = value
        result["createdAt"] = row["created_at"]
        result["updatedAt"] = row["updated_at"]
        result["company"] = {
            "id": row["company_id"],
            "tradingName": row["company_trading_name"],
            "legalName": row["company_legal_name"],
        }
        if spec.embed_vendor:
            result["vendor"] = (
                None
                if row["vendor_id"] is None
                else {
                    "id": row["vendor_id"],
                    "companyName": row["vendor_company_name"],
                    "isActive": bool(row["vendor_is_active"]),
                }
            )
        return result

    async def find_many(self, filters: QueryFilterSpec) -> list[dict[str, Any]]:
        where, params = self._where(filters)
        sql = self._select() + where + self._order_by(filters) + " LIMIT ? OFFSET ?"
        async with self._db.execute(sql, [*params, filters.take, filters.skip]) as cursor:
            rows = await cursor.fetchall()
        return [self._to_dict(row) for row in rows]

    async def count(self, filters: QueryFilterSpec) -> int:
        where, params = self._where(filters)
        sql = f"SELECT COUNT(*) FROM {self._spec.table} t" + where
        async with self._db.execute(sql, params) as cursor:
            row = await cursor.fetchone()
        return int(row[0]) if row else 0

    async def get(self, record_id: int) -> dict[str, Any] | None:
        async with self._db.execute(self._select() + " WHERE t.id = ?", [record_id]) as cursor:
            row = await cursor.fetchone()
        return self._to_dict(row) if row else None

    def _columns_for(self, values: Mapping[str, Any]) -> dict[str, Any]:
        unknown = set(values) - set(self._spec.columns)
        if unknown:
            raise ValueError(f"Unknown fields for {self.entity}: {', '.join(sorted(unknown))}")
        nested = sorted(name for name, value in values.items() if not _is_scalar(value))
        if nested:
            raise ValueError(f"Fields of {self.entity} must be scalars: {', '.join(nested)}")
        return {self._spec.columns[name]: value for name, value in values.items()}

    async def _write(self, sql: str, params: list[Any]) -> aiosqlite.Cursor:
        """Execute and commit one write; constraint violations become ValueError."""
        try:
            cursor = await self._db.execute(sql, params)
        except aiosqlite.IntegrityError as e:
            await self._db.rollback()
            raise ValueError(f"Invalid {self.entity} record: {e}") from e
        await self._db.commit()
        return cursor

    async def create(self, values: Mapping[str, Any]) -> dict[str, Any]:
        columns = self._columns_for(values)
        now = _now()
        columns["created_at"] = now
        columns["updated_at"] = now
        names = ", ".join(columns)
        marks = ", ".join("?" for _ in columns)
        cursor = await self._write(
            f"INSERT INTO {self._spec.table} ({names}) VALUES ({marks})",
            list(columns.values()),
        )
        created = await self.get(cursor.lastrowid)
        if created is None:
            raise RuntimeError(f"{self.entity} row {cursor.lastrowid} vanished after insert")
        return created

    async def update(
        self, record_id: int, values: Mapping[str, Any]
    ) -> dict[str, Any] | None:
        columns = self._columns_for(values)
        columns["updated_at"] = _now()
        assignments = ", ".join(f"{name} = ?" for name in columns)
        cursor = await self._write(
            f"UPDATE {self._spec.table} SET {assignments} WHERE id = ?",
            [*columns.values(), record_id],
        )
        if cursor.rowcount == 0:
            return None
        return await self.get(record_id)

    async def delete(self, record_id: int) -> dict[str, Any] | None:
        existing = await self.get(record_id)
        if existing is None:
            return None
        await self._db.execute(f"DELETE FROM {self._spec.table} WHERE id = ?", [record_id])
        await self._db.commit()
        return existing

    async def statistics(self) -> dict[str, Any]:
        where = f" WHERE {self._spec.visible}" if self._spec.visible else ""
        sql = f"SELECT company_id, COUNT(*) FROM {self._spec.table} t{where} GROUP BY company_id"
        async with self._db.execute(sql) as cursor:
            rows = await cursor.fetchall()
        by_company = {str(company_id): count for company_id, count in rows}
        return {"total": sum(by_company.values()), "byCompany": by_company}


def create_sources(db: aiosqlite.Connection) -> dict[str, SqliteListSource]:
    """Build one source per entity table on a shared connection."""
    return {entity: SqliteListSource(db, spec) for entity, spec in TABLES.items()}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


def _is_scalar(value: Any) -> bool:
    return value is None or isinstance(value, (str, int, float))
