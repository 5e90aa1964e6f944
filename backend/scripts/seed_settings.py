"""Store the default configuration blobs that are not in the database yet."""
from __future__ import annotations

import asyncio

from sqlalchemy import select

from reservation_admin.db.session import get_sessionmaker
from reservation_admin.models.admin_setting import AdminSetting
from reservation_admin.services.settings_service import SETTING_MODELS


async def seed_settings() -> None:
    sessionmaker = get_sessionmaker()
    async with sessionmaker() as session:
        existing = set(
            (await session.execute(select(AdminSetting.setting_key))).scalars()
        )
        created = 0
        for key, (model, _) in SETTING_MODELS.items():
            if key in existing:
                continue
            session.add(
                AdminSetting(setting_key=key, setting_value=model().model_dump(mode="json"))
            )
            created += 1
        if created:
            await session.commit()
        print(f"Seeded {created} setting(s).")


def main() -> None:
    asyncio.run(seed_settings())


if __name__ == "__main__":
    main()
