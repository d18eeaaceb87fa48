"""Reordering of records that carry an ``order_index``.

Moving a record up or down swaps its ``order_index`` with the adjacent record
of the same partition. The swap is two UPDATE statements committed together,
so either both records change or neither does.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any, Iterable, Literal, Sequence

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import set_committed_value

from sacristy.lib.errors import EntityNotFoundError, ReorderError

logger = logging.getLogger(__name__)

Direction = Literal["up", "down"]


def find_swap_neighbor(
    rows: Sequence[Any],
    target_id: Any,
    direction: Direction,
    partition_key: str | None = None,
) -> Any | None:
    """Return the record ``target_id`` should swap with, or None at the edges.

    Only records sharing the target's ``partition_key`` value are considered.
    Records are sorted by ``order_index`` with a stable sort, so duplicated
    indexes keep the order they arrived in.

    Raises:
        EntityNotFoundError: If no row has ``target_id``.
    """
    if direction not in ("up", "down"):
        raise ValueError(f"Invalid direction: {direction!r}")

    target = next((row for row in rows if row.id == target_id), None)
    if target is None:
        raise EntityNotFoundError("Entry", target_id)

    subset = list(rows)
    if partition_key is not None:
        partition = getattr(target, partition_key)
        subset = [row for row in subset if getattr(row, partition_key) == partition]
    subset.sort(key=lambda row: row.order_index)

    position = next(i for i, row in enumerate(subset) if row.id == target_id)
    neighbor = position - 1 if direction == "up" else position + 1
    if neighbor < 0 or neighbor >= len(subset):
        return None
    return subset[neighbor]


def next_order_index(rows: Iterable[Any]) -> int:
    """Index for a record appended to ``rows``: one past the current max, or 0."""
    return max((row.order_index for row in rows), default=-1) + 1


async def load_partition(
    db_session: AsyncSession,
    model: type,
    partition_key: str | None = None,
    partition_value: Any = None,
) -> list[Any]:
    """Fresh read of the records in one partition, in display order."""
    query = select(model).execution_options(populate_existing=True)
    if partition_key is not None:
        query = query.where(getattr(model, partition_key) == partition_value)
    query = query.order_by(model.order_index, model.created_at, model.id)

    result = await db_session.execute(query)
    return list(result.scalars().all())


async def swap_order(db_session: AsyncSession, model: type, first: Any, second: Any) -> None:
    """Exchange the ``order_index`` of two records in one transaction.

    Only ``order_index`` and ``updated_at`` are written.

    Raises:
        ReorderError: If the database rejects either update. The transaction
            is rolled back, leaving both rows as they were.
    """
    first_id, second_id = first.id, second.id
    first_index, second_index = first.order_index, second.order_index
    now = datetime.now(UTC)

    try:
        for entity_id, new_index in ((first_id, second_index), (second_id, first_index)):
            await db_session.execute(
                update(model)
                .where(model.id == entity_id)
                .values(order_index=new_index, updated_at=now)
                .execution_options(synchronize_session=False)
            )
        await db_session.commit()
    except SQLAlchemyError as exc:
        await db_session.rollback()
        logger.warning(
            "Swapping order of %s %s and %s failed", model.__name__, first_id, second_id,
            exc_info=True,
        )
        raise ReorderError("Não foi possível reordenar os itens.") from exc

    set_committed_value(first, "order_index", second_index)
    set_committed_value(second, "order_index", first_index)
    set_committed_value(first, "updated_at", now)
    set_committed_value(second, "updated_at", now)
