"""Property settings service — one settings row per property, created on first use."""

import logging
import uuid
from typing import Any

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from rentalops.models.property_settings import PropertySettings

logger = logging.getLogger(__name__)


async def get_or_create_settings(db: AsyncSession, property_id: uuid.UUID) -> PropertySettings:
    """Return the property's settings row, inserting the defaults if there is none.

    Concurrent first reads race on the unique ``property_id``; the loser's
    insert is skipped and it reads the winner's row.
    """
    query = select(PropertySettings).where(PropertySettings.property_id == property_id)
    prop_settings = (await db.execute(query)).scalar_one_or_none()
    if prop_settings is not None:
        return prop_settings

    inserted = await db.execute(
        insert(PropertySettings)
        .values(id=uuid.uuid4(), property_id=property_id)
        .on_conflict_do_nothing(index_elements=[PropertySettings.property_id])
        .returning(PropertySettings.id)
    )
    if inserted.scalar_one_or_none() is not None:
        logger.info("Created default settings for property %s", property_id)
    return (await db.execute(query)).scalar_one()


async def update_settings(
    db: AsyncSession, property_id: uuid.UUID, changes: dict[str, Any]
) -> PropertySettings:
    prop_settings = await get_or_create_settings(db, property_id)
    for field, value in changes.items():
        setattr(prop_settings, field, value)
    await db.flush()
    await db.refresh(prop_settings)
    return prop_settings


async def set_rotating_pins(db: AsyncSession, property_id: uuid.UUID, enabled: bool) -> PropertySettings:
    """Switch PIN rotation on or off; switching off rewinds the cursor to the first PIN."""
    prop_settings = await get_or_create_settings(db, property_id)
    prop_settings.rotating_pins_enabled = enabled
    if not enabled:
        prop_settings.current_pin_index = 0
    await db.flush()
    await db.refresh(prop_settings)
    logger.info("Rotating PINs %s for property %s", "enabled" if enabled else "disabled", property_id)
    return prop_settings
