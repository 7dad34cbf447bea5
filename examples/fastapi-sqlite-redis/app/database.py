"""SQLite database for demonstration purposes."""

from pathlib import Path

import aiosqlite

from ledgercache.infrastructure.sources.sqlite import connect

DB_PATH = Path(__file__).parent.parent / "data" / "app.db"

COMPANIES = [
    ("Northwind Trading", "Northwind Trading Ltd"),
    ("Contoso Consulting", "Contoso Consulting GmbH"),
]

VENDORS = [
    (1, "Acme Supplies", "Jane Roe", "jane@acme.example", "Office supplies", "EUR", 1),
    (1, "Globex Hardware", "Hank Scorpio", "hank@globex.example", "Laptops", "USD", 1),
    (2, "Initech Software", "Bill Lumbergh", "bill@initech.example", "Licences", "EUR", 0),
]

CLIENTS = [
    (1, "Umbrella Corp", "ap@umbrella.example", "Albert Wesker", "Pharma", "Raccoon City", "US", "ACTIVE", 12500.0),
    (1, "Wayne Enterprises", "finance@wayne.example", "Lucius Fox", "Manufacturing", "Gotham", "US", "LEAD", 0.0),
    (2, "Stark Industries", "billing@stark.example", "Pepper Potts", "Manufacturing", "Malibu", "US", "ACTIVE", 98000.0),
]

WALLETS = [
    (1, "EXCHANGE", "Kraken main", "kr-001", "EUR", "EUR,USD,BTC", "", "Trading float"),
    (1, "CRYPTO", "Treasury cold wallet", "bc1qexample", "BTC", "BTC", "bitcoin", "Long-term holdings"),
    (2, "PAYPAL", "PayPal business", "pay@contoso.example", "USD", "USD,EUR", "", ""),
]


async def get_db() -> aiosqlite.Connection:
    """Get database connection with the schema in place."""
    DB_PATH.parent.mkdir(parents=True, exist_ok=True)
    return await connect(str(DB_PATH))


async def seed(db: aiosqlite.Connection) -> None:
    """Insert sample data into an empty database."""
    async with db.execute("SELECT COUNT(*) FROM companies") as cursor:
        count = (await cursor.fetchone())[0]
    if count:
        return

    now = "2024-01-15T10:00:00+00:00"
    await db.executemany(
        "INSERT INTO companies (trading_name, legal_name) VALUES (?, ?)", COMPANIES
    )
    await db.executemany(
        """
        INSERT INTO vendors (company_id, company_name, contact_person, contact_email,
                             items_services_sold, currency, is_active, created_at, updated_at)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        [(*row, now, now) for row in VENDORS],
    )
    await db.executemany(
        """
        INSERT INTO products (company_id, vendor_id, name, description, price,
                              currency, cost, is_active, created_at, updated_at)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        [
            (1 + i % 2, 1 + i % 3, f"Product {i:03d}", f"Sample product number {i}",
             10.0 + i, "EUR" if i % 4 else "USD", 5.0 + i / 2, int(i % 7 != 0), now, now)
            for i in range(1, 121)
        ],
    )
    await db.executemany(
        """
        INSERT INTO clients (company_id, name, email, contact_person_name, industry,
                             city, country, status, total_invoiced, created_at, updated_at)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        [(*row, now, now) for row in CLIENTS],
    )
    await db.executemany(
        """
        INSERT INTO digital_wallets (company_id, wallet_type, wallet_name, wallet_address,
                                     currency, currencies, blockchain, description,
                                     created_at, updated_at)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        [(*row, now, now) for row in WALLETS],
    )
    await db.commit()
