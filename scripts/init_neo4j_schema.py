from __future__ import annotations

import argparse
import logging

from warmpath.core.logging import configure_logging
from warmpath.db.neo4j.driver import close_driver, neo4j_session
from warmpath.db.neo4j.schema import SCHEMA_STATEMENTS

logger = logging.getLogger("warmpath.scripts.init_neo4j_schema")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create the entity constraints and indexes path search relies on.")
    parser.add_argument("--dry-run", action="store_true", help="Print the statements without running them")
    args = parser.parse_args(argv)

    if args.dry_run:
        for statement in SCHEMA_STATEMENTS:
            print(statement)
        return 0

    configure_logging()
    try:
        with neo4j_session() as session:
            if session is None:
                logger.warning("neo4j_schema_skipped_no_uri")
                return 1
            for statement in SCHEMA_STATEMENTS:
                session.run(statement)
                logger.info("neo4j_schema_statement_applied", extra={"statement": statement})
    finally:
        close_driver()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
