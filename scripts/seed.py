"""Insert sample lab equipment (idempotent by name).

Usage: DATABASE_URL=postgresql+asyncpg://... python -m scripts.seed
"""

from __future__ import annotations

import argparse
import asyncio
import os

import structlog
from sqlalchemy import select

from labreserve.core.config import DEFAULT_DATABASE_URL
from labreserve.db import Database
from labreserve.logging import setup_logging
from labreserve.models import Equipment

SAMPLE_EQUIPMENT: list[dict[str, str]] = [
    {"name": "Confocal Microscope A", "type": "microscope", "description": "Room 204"},
    {"name": "Confocal Microscope B", "type": "microscope", "description": "Room 204"},
    {"name": "Ultracentrifuge", "type": "centrifuge", "description": "Max 100k rpm"},
    {"name": "qPCR Thermocycler", "type": "pcr", "description": "96-well"},
    {"name": "Flow Cytometer", "type": "cytometer", "description": "4 lasers"},
]


async def seed(database_url: str) -> int:
    logger = structlog.get_logger(__name__)
    db = Database(database_url)
    inserted = 0
    try:
        async with db.session_factory() as session:
            existing = set((await session.execute(select(Equipment.name))).scalars().all())
            for item in SAMPLE_EQUIPMENT:
                if item["name"] in existing:
                    continue
                session.add(Equipment(**item))
                inserted += 1
            await session.commit()
    finally:
        await db.dispose()
    logger.info("seed_equipment_done", inserted=inserted)
    return inserted


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--database-url", default=os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL))
    args = parser.parse_args()
    setup_logging()
    asyncio.run(seed(args.database_url))


if __name__ == "__main__":
    main()
