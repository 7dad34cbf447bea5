"""FastAPI adapter for ledgercache."""

from ledgercache.adapters.fastapi.endpoints import ListEndpoints, mount_list_endpoints
from ledgercache.adapters.fastapi.router import create_list_router, to_starlette

__all__ = [
    # Recommended: mount every catalogue endpoint at once
    "mount_list_endpoints",
    "ListEndpoints",
    # Single endpoint
    "create_list_router",
    "to_starlette",
]
