"""Create database tables in the configured database.

Reads DATABASE_URL from .env / environment and creates all registered ORM tables.

Usage:
  python scripts/create_tables.py [--database-url sqlite:///./ssq.db]
"""

from __future__ import annotations

import argparse
from collections.abc import Sequence

from _common import get_database_url

from ssq import models  # noqa: F401  (register tables)
from ssq.db import create_app_engine
from ssq.models.base import Base


def main(argv: Sequence[str] | None = None) -> int:
    """Create all ORM tables in the target database."""

    parser = argparse.ArgumentParser(description="Create draw history tables")
    parser.add_argument("--database-url", dest="database_url", type=str, default=None)
    args = parser.parse_args(argv)

    engine = create_app_engine(get_database_url(args.database_url))
    Base.metadata.create_all(bind=engine)

    print(f"Tables created (or already exist): {', '.join(sorted(Base.metadata.tables))}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
