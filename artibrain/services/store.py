"""
Small helpers shared by the store-facing services.
"""

import uuid
from typing import List, Optional, Sequence, Type, TypeVar, Union

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from artibrain.kernel.errors import CONFLICT, NOT_FOUND, Failure

T = TypeVar("T")


async def flush_or_conflict(session: AsyncSession) -> Optional[Failure]:
    """
    Flush pending changes inside a savepoint.
    
    A unique-constraint violation (slug, email) comes back as CONFLICT and
    leaves the session usable.
    """
    try:
        async with session.begin_nested():
            await session.flush()
    except IntegrityError:
        return CONFLICT
    return None


async def load_all_by_id(
    session: AsyncSession,
    model: Type[T],
    ids: Sequence[uuid.UUID],
) -> Union[List[T], Failure]:
    """All rows for ``ids`` in the given order, or NOT_FOUND if any is missing."""
    wanted = list(dict.fromkeys(ids))
    if not wanted:
        return []
    result = await session.execute(select(model).where(model.id.in_(wanted)))
    found = {row.id: row for row in result.scalars().all()}
    if len(found) != len(wanted):
        return NOT_FOUND
    return [found[i] for i in wanted]


async def exists_where(session: AsyncSession, model, *criteria) -> bool:
    result = await session.execute(select(model.id).where(*criteria).limit(1))
    return result.first() is not None
