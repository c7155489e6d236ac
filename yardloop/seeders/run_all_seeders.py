import asyncio
import logging
import subprocess
import sys

from yardloop.core.logging_config import setup_logging
from yardloop.db.database import init_db

logger = logging.getLogger(__name__)


def run_seeder(module_name: str):
    logger.info("Running seeder %s", module_name)
    try:
        result = subprocess.run(
            [sys.executable, "-m", module_name],
            check=True,
            capture_output=True,
            text=True,
        )
    except subprocess.CalledProcessError as e:
        logger.error(
            "Seeder %s failed with code %s:\n%s", module_name, e.returncode, e.stderr
        )
        raise
    # seeders log to stderr
    if result.stderr:
        logger.info(result.stderr.rstrip())
    logger.info("Seeder finished: %s", module_name)


def main():
    asyncio.run(init_db())

    seeders_in_order = [
        "yardloop.seeders.1_users",
        "yardloop.seeders.2_categories",
        "yardloop.seeders.3_listings",
    ]

    for seeder in seeders_in_order:
        try:
            run_seeder(seeder)
        except subprocess.CalledProcessError:
            break  # later seeders depend on the earlier ones


if __name__ == "__main__":
    setup_logging()
    main()
