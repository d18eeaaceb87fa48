"""Setting service for reading and writing the ``system_settings`` table."""

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from sacristy.db.models import Setting
from sacristy.lib import settings_codec
from sacristy.lib.theme import theme_context


async def get_setting(
    db_session: AsyncSession,
    key: str,
) -> str | None:
    """Get a raw setting value by key.

    Args:
        db_session: Database session
        key: Setting key

    Returns:
        Stored string value or None if not found
    """
    result = await db_session.execute(select(Setting).where(Setting.key == key))
    setting = result.scalar_one_or_none()
    return setting.value if setting else None


async def get_value(db_session: AsyncSession, key: str) -> Any:
    """Get a setting decoded to its declared type, falling back to its default."""
    return settings_codec.decode(key, await get_setting(db_session, key))


async def get_settings(
    db_session: AsyncSession,
    keys: list[str] | None = None,
) -> dict[str, str | None]:
    """Get multiple raw settings as a dictionary.

    Args:
        db_session: Database session
        keys: Optional list of keys to retrieve. If None, returns all settings.

    Returns:
        Dictionary of key-value pairs
    """
    query = select(Setting)
    if keys:
        query = query.where(Setting.key.in_(keys))

    result = await db_session.execute(query)
    settings = result.scalars().all()
    return {s.key: s.value for s in settings}


async def upsert_setting(
    db_session: AsyncSession,
    key: str,
    value: str | None,
    commit: bool = True,
) -> Setting:
    """Set a raw setting value, creating or updating as needed.

    Args:
        db_session: Database session
        key: Setting key
        value: Setting value (can be None)
        commit: Commit immediately; pass False to batch several keys

    Returns:
        The created or updated Setting object
    """
    result = await db_session.execute(select(Setting).where(Setting.key == key))
    setting = result.scalar_one_or_none()

    if setting:
        setting.value = value
    else:
        definition = settings_codec.SETTINGS.get(key)
        setting = Setting(
            key=key,
            value=value,
            description=definition.label if definition else "",
        )
        db_session.add(setting)

    if commit:
        await db_session.commit()
        await db_session.refresh(setting)
    return setting


async def set_value(db_session: AsyncSession, key: str, value: Any) -> Setting:
    """Encode a typed value and store it."""
    return await upsert_setting(db_session, key, settings_codec.encode(key, value))


async def delete_setting(
    db_session: AsyncSession,
    key: str,
) -> bool:
    """Delete a setting by key.

    Returns:
        True if deleted, False if not found
    """
    result = await db_session.execute(select(Setting).where(Setting.key == key))
    setting = result.scalar_one_or_none()

    if not setting:
        return False

    await db_session.delete(setting)
    await db_session.commit()
    return True


async def get_group(db_session: AsyncSession, group: str) -> dict[str, Any]:
    """Every key of a settings group, decoded, with defaults for missing keys."""
    keys = settings_codec.group_keys(group)
    if not keys:
        raise KeyError(f"Unknown settings group: {group!r}")
    stored = await get_settings(db_session, keys)
    return settings_codec.decode_group(group, stored)


async def save_group(db_session: AsyncSession, group: str, values: dict[str, Any]) -> None:
    """Encode and upsert the given values of a group in one commit.

    Keys outside the group are ignored. Secret keys absent from ``values`` keep
    their stored value. A value the codec rejects raises ``ValueError`` before
    anything is written.
    """
    keys = set(settings_codec.group_keys(group))
    if not keys:
        raise KeyError(f"Unknown settings group: {group!r}")

    encoded = {
        key: settings_codec.encode(key, value)
        for key, value in values.items()
        if key in keys
    }
    for key, raw in encoded.items():
        await upsert_setting(db_session, key, raw, commit=False)
    await db_session.commit()

    if group == "theme":
        theme_context.invalidate()
