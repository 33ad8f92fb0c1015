"""
Llena la base de datos con tareas sinteticas para desarrollo.

Uso:
    python -m infrastructure.seed --count 100
"""

import argparse
import logging
import sys

from dotenv import load_dotenv

from core.application.seed_tasks import SeedTasksCommand
from infrastructure.container import get_seed_tasks_use_case

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    parser = argparse.ArgumentParser(description="Seed the tasks table with fake rows.")
    parser.add_argument("--count", type=int, default=100, help="number of tasks to create")
    parser.add_argument("--seed", type=int, default=None, help="Faker seed for repeatable data")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        inserted = get_seed_tasks_use_case().execute(
            SeedTasksCommand(count=args.count, seed=args.seed)
        )
    except Exception:
        logger.exception("Seed fallido")
        return 1

    print(f"Seeded {inserted} tasks")
    return 0


if __name__ == "__main__":
    sys.exit(main())
