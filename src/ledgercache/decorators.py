"""Mutation decorators.

``@invalidates`` wraps an async write handler. After the write returns,
it schedules cache invalidation for the written row as a detached task,
so the handler's response never waits on (or fails because of) the
cache store.
"""

import functools
import logging
from collections.abc import Callable, Mapping
from typing import Any, TypeVar

from ledgercache.core.interfaces.invalidator import IInvalidator

F = TypeVar("F", bound=Callable[..., Any])

logger = logging.getLogger(__name__)


def invalidates(
    invalidator: IInvalidator,
    entity_type: str,
    *,
    id_key: str = "id",
    aggregate_key: str = "companyId",
) -> Callable[[F], F]:
    """Decorator scheduling invalidation after a successful mutation.

    The decorated coroutine must return the affected row as a mapping,
    or None when nothing was written (e.g. unknown id). Nothing is
    invalidated for None or when the function raises.

    Args:
        invalidator: Service that performs the invalidation.
        entity_type: Entity the mutation writes, e.g. ``"products"``.
        id_key: Row key holding the entity id.
        aggregate_key: Row key holding the owning company id.

    Returns:
        Decorated function.

    Example:
        @invalidates(invalidation_service, "products")
        async def create_product(values: dict) -> dict:
            return await products.create(values)
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            # Write first; a failed write invalidates nothing
            result = await func(*args, **kwargs)

            if result is None:
                return result

            entity_id = aggregate_id = None
            if isinstance(result, Mapping):
                entity_id = result.get(id_key)
                aggregate_id = result.get(aggregate_key)
            else:
                logger.debug(
                    "%s returned %s, invalidating %s without ids",
                    func.__name__, type(result).__name__, entity_type,
                )

            invalidator.schedule(entity_type, entity_id, aggregate_id)
            return result

        return wrapper  # type: ignore

    return decorator
