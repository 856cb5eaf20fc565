# authgate/adapters/outbound/persistence/seeds/__init__.py

"""
Seeds that populate the database with the data the system needs to run.
"""

import logging

from sqlalchemy.ext.asyncio import async_sessionmaker

from authgate.adapters.outbound.persistence.seeds.permissions import run_permissions_seed
from authgate.application.ports.outbound import IPasswordHasher

# Configure logger
logger = logging.getLogger(__name__)


async def run_all_seeds(
        session_factory: async_sessionmaker,
        password_hasher: IPasswordHasher,
        admin_username: str,
        admin_password: str,
) -> None:
    """Run every seed script in dependency order."""
    logger.info("Running database seeds")
    await run_permissions_seed(session_factory, password_hasher, admin_username, admin_password)
    logger.info("Database seeds completed")
