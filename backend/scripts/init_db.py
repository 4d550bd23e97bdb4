#!/usr/bin/env python3
"""
Create all tables declared in jingo.models

Usage:
    python scripts/init_db.py
"""
import logging

from jingo import models  # noqa: F401  (registers tables on Base.metadata)
from jingo.core.database import Base, engine

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def main():
    logger.info(f"Creating {len(Base.metadata.tables)} tables...")
    Base.metadata.create_all(bind=engine)
    logger.info("Done: " + ", ".join(sorted(Base.metadata.tables)))


if __name__ == "__main__":
    main()
