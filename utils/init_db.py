"""Create the results tables directly from metadata.

Usage:
  python utils/init_db.py --database-url sqlite:///podsearch.db

Production databases go through the Alembic migrations instead; this is for
local SQLite setups and throwaway environments.
"""

from __future__ import annotations

import argparse

import sqlalchemy as sa

from podsearch.config import Settings
from podsearch.db import create_schema


def main(argv: list[str] | None = None) -> None:
    ap = argparse.ArgumentParser(description="Create podsearch tables")
    ap.add_argument("--database-url", default=None, help="Defaults to DATABASE_URL / Settings")
    args = ap.parse_args(argv)

    url = args.database_url or Settings().database_url
    engine = sa.create_engine(url)
    create_schema(engine)
    print(f"Tables ready on {engine.url.render_as_string(hide_password=True)}")


if __name__ == "__main__":
    main()
