"""Endpoint policies for the fast list endpoints.

More volatile entities (clients) get shorter TTLs and freshness windows
than stable ones (digital wallets). Responses built from fresh queries
always get a shorter browser window than cache hits.
"""

from datetime import timedelta

from ledgercache.core.entities.cache_control import FreshnessPolicy
from ledgercache.core.entities.endpoint_policy import ListEndpointPolicy
from ledgercache.core.entities.filters import (
    ClientFilters,
    DigitalWalletFilters,
    ProductFilters,
    VendorFilters,
)

PRODUCTS = ListEndpointPolicy(
    entity="products",
    filter_type=ProductFilters,
    list_ttl=timedelta(minutes=15),
    hit_freshness=FreshnessPolicy(300, 600, 300),
    miss_freshness=FreshnessPolicy(60, 300, 180),
    sort_fields=frozenset({"name", "price", "cost", "createdAt"}),
)

VENDORS = ListEndpointPolicy(
    entity="vendors",
    filter_type=VendorFilters,
    list_ttl=timedelta(minutes=20),
    hit_freshness=FreshnessPolicy(600, 1200, 600),
    miss_freshness=FreshnessPolicy(120, 600, 300),
    sort_fields=frozenset(
        {"companyName", "contactPerson", "contactEmail", "createdAt", "updatedAt"}
    ),
    default_take=50,
)

CLIENTS = ListEndpointPolicy(
    entity="clients",
    filter_type=ClientFilters,
    list_ttl=timedelta(minutes=10),
    hit_freshness=FreshnessPolicy(300, 600, 300),
    miss_freshness=FreshnessPolicy(60, 300, 180),
    sort_fields=frozenset(
        {"name", "email", "industry", "totalInvoiced", "lastInvoiceDate", "createdAt"}
    ),
    stats_ttl=timedelta(minutes=5),
)

DIGITAL_WALLETS = ListEndpointPolicy(
    entity="digital-wallets",
    filter_type=DigitalWalletFilters,
    list_ttl=timedelta(minutes=30),
    hit_freshness=FreshnessPolicy(900, 1800, 900),
    miss_freshness=FreshnessPolicy(300, 900, 600),
    sort_fields=frozenset(
        {"walletName", "walletType", "currency", "blockchain", "createdAt"}
    ),
)

POLICIES: dict[str, ListEndpointPolicy] = {
    policy.entity: policy
    for policy in (PRODUCTS, VENDORS, CLIENTS, DIGITAL_WALLETS)
}

# Entity -> entities whose cached rows embed it.
ENTITY_DEPENDENCIES: dict[str, tuple[str, ...]] = {
    "vendors": ("products",),
    "companies": ("products", "vendors", "clients", "digital-wallets"),
}
