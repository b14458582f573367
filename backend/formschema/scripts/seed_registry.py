"""Seed the built-in default fields into the attribute registry.

Usage:
    python -m formschema.scripts.seed_registry

Idempotent: fields that already exist (by name) are left untouched.
"""

import asyncio

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from formschema.database import async_session_maker, engine
from formschema.repositories.attribute import AttributeRepository
from formschema.services.default_fields import DEFAULT_FIELD_TEMPLATES, attribute_from_template


async def seed_default_fields(session: AsyncSession) -> list[str]:
    """Insert missing default fields.

    Returns:
        Names of the fields created by this call.
    """
    repo = AttributeRepository(session)
    created = []
    for name in DEFAULT_FIELD_TEMPLATES:
        if await repo.get_by_name(name) is None:
            await repo.add(attribute_from_template(name))
            created.append(name)
    return created


async def main() -> None:
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    print("  Database: connected")

    async with async_session_maker() as session:
        created = await seed_default_fields(session)
        await session.commit()

    if created:
        print(f"  Created default fields: {', '.join(created)}")
    else:
        print("  Default fields already present")

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
