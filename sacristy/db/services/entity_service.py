"""Generic CRUD operations for the record types in the entity registry."""

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from sacristy.db.services.ordering import (
    Direction,
    find_swap_neighbor,
    load_partition,
    next_order_index,
    swap_order,
)
from sacristy.entities import EntitySchema
from sacristy.lib.errors import EntityNotFoundError, FormValidationError

logger = logging.getLogger(__name__)

# Columns the forms never write directly
_PROTECTED = frozenset({"id", "created_at", "updated_at", "order_index"})


async def list_entities(
    db_session: AsyncSession,
    schema: EntitySchema,
    **filters: Any,
) -> list[Any]:
    """List all records of a type in its display order.

    Args:
        db_session: Database session
        schema: Entity type to list
        **filters: Optional ``column=value`` equality filters

    Returns:
        Records freshly loaded from the database
    """
    model = schema.model
    query = select(model).execution_options(populate_existing=True)
    for column, value in filters.items():
        query = query.where(getattr(model, column) == value)
    query = query.order_by(*schema.order_by(model))

    result = await db_session.execute(query)
    return list(result.scalars().all())


async def get_entity(db_session: AsyncSession, schema: EntitySchema, entity_id: UUID) -> Any | None:
    result = await db_session.execute(select(schema.model).where(schema.model.id == entity_id))
    return result.scalar_one_or_none()


async def require_entity(db_session: AsyncSession, schema: EntitySchema, entity_id: UUID) -> Any:
    """Get a record by ID or raise EntityNotFoundError."""
    entity = await get_entity(db_session, schema, entity_id)
    if entity is None:
        raise EntityNotFoundError(schema.label, entity_id)
    return entity


def check_required(schema: EntitySchema, values: dict[str, Any]) -> None:
    """Raise FormValidationError for the first required field left empty."""
    for spec in schema.required_fields:
        value = values.get(spec.name)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise FormValidationError(f"O campo {spec.label} é obrigatório", field=spec.name)


def _writable(values: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in values.items() if k not in _PROTECTED}


async def create_entity(db_session: AsyncSession, schema: EntitySchema, values: dict[str, Any]) -> Any:
    """Insert a record.

    Ordered types are appended to the end of their partition, with the index
    computed from a fresh read inside this call.

    Raises:
        FormValidationError: If a required field is missing.
    """
    values = _writable(values)
    if schema.prepare is not None:
        values = schema.prepare(values, None)
    check_required(schema, values)

    entity = schema.model(**values)

    if schema.ordered:
        entity.order_index = await _append_index(db_session, schema, values)

    db_session.add(entity)
    await db_session.commit()
    await db_session.refresh(entity)
    logger.info("Created %s %s", schema.model.__name__, entity.id)
    return entity


async def update_entity(
    db_session: AsyncSession,
    schema: EntitySchema,
    entity_id: UUID,
    values: dict[str, Any],
) -> Any:
    """Apply form values to an existing record.

    An ordered record whose partition changes is appended to the end of the
    new partition.

    Raises:
        EntityNotFoundError: If the record doesn't exist.
        FormValidationError: If a required field is missing.
    """
    entity = await require_entity(db_session, schema, entity_id)

    values = _writable(values)
    if schema.prepare is not None:
        values = schema.prepare(values, entity)
    check_required(schema, {**_current_values(schema, entity), **values})

    key = schema.partition_key
    moved_partition = (
        schema.ordered
        and key is not None
        and key in values
        and values[key] != getattr(entity, key)
    )
    if moved_partition:
        new_index = await _append_index(db_session, schema, values)

    for column, value in values.items():
        setattr(entity, column, value)
    if moved_partition:
        entity.order_index = new_index

    await db_session.commit()
    await db_session.refresh(entity)
    return entity


async def delete_entity(db_session: AsyncSession, schema: EntitySchema, entity_id: UUID) -> Any:
    """Delete a record and return it.

    Remaining records keep their ``order_index``; gaps are allowed.

    Raises:
        EntityNotFoundError: If the record doesn't exist.
    """
    entity = await require_entity(db_session, schema, entity_id)
    await db_session.delete(entity)
    await db_session.commit()
    logger.info("Deleted %s %s", schema.model.__name__, entity_id)
    return entity


async def toggle_flag(db_session: AsyncSession, schema: EntitySchema, entity_id: UUID) -> bool:
    """Flip the type's boolean toggle field and return the new value."""
    if schema.toggle_field is None:
        raise ValueError(f"{schema.label_plural} have no toggle field")

    entity = await require_entity(db_session, schema, entity_id)
    new_value = not getattr(entity, schema.toggle_field)
    setattr(entity, schema.toggle_field, new_value)
    await db_session.commit()
    return new_value


async def set_image(
    db_session: AsyncSession,
    schema: EntitySchema,
    entity_id: UUID,
    url: str,
    public_id: str,
) -> tuple[Any, str | None]:
    """Point a record at a newly uploaded image.

    Returns:
        The record and the public id of the image it used before, if any
    """
    if schema.image is None:
        raise ValueError(f"{schema.label_plural} have no image")

    entity = await require_entity(db_session, schema, entity_id)
    previous = getattr(entity, schema.image.public_id_field)
    setattr(entity, schema.image.url_field, url)
    setattr(entity, schema.image.public_id_field, public_id)
    await db_session.commit()
    return entity, previous


async def move_entity(
    db_session: AsyncSession,
    schema: EntitySchema,
    entity_id: UUID,
    direction: Direction,
) -> bool:
    """Swap a record with its neighbour in the given direction.

    Returns:
        True if two records were swapped, False when the record was already
        at the edge of its partition (nothing is written).

    Raises:
        EntityNotFoundError: If the record doesn't exist.
        ReorderError: If the swap could not be persisted.
    """
    if not schema.ordered:
        raise ValueError(f"{schema.label_plural} are not manually ordered")

    target = await require_entity(db_session, schema, entity_id)
    key = schema.partition_key
    rows = await load_partition(
        db_session,
        schema.model,
        key,
        getattr(target, key) if key else None,
    )

    neighbor = find_swap_neighbor(rows, entity_id, direction, key)
    if neighbor is None:
        return False

    await swap_order(db_session, schema.model, target, neighbor)
    return True


async def _append_index(db_session: AsyncSession, schema: EntitySchema, values: dict[str, Any]) -> int:
    key = schema.partition_key
    if key is None:
        rows = await load_partition(db_session, schema.model)
    else:
        spec = schema.get_field(key)
        partition = values.get(key, spec.default if spec else None)
        rows = await load_partition(db_session, schema.model, key, partition)
    return next_order_index(rows)


def _current_values(schema: EntitySchema, entity: Any) -> dict[str, Any]:
    return {spec.name: getattr(entity, spec.name, None) for spec in schema.fields}
