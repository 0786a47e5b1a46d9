"""
Notion Tables Command Line
==========================

This script is the entry point of the ``notion-tables`` command. It reads
its configuration from environment variables, like the rest of the
package, and dumps Notion content for inspection:

- ``NOTION_DATABASE_ID``: every row of the database is fetched (following
  pagination) and each cell is logged with its name, type and value.
- ``NOTION_BLOCK_ID``: the child blocks of the page or block are fetched
  recursively and their plain text is written to stdout.

Both may be set at once. Configuration errors are logged and the command
exits without contacting the API.
"""

import os
import sys

import structlog

from .client import NotionClient
from .config import Settings
from .errors import NotionError
from .logging_config import configure_logging


def main() -> int:
    """Run the dump and return a process exit code."""
    log = structlog.get_logger(__name__)

    try:
        settings = Settings()
    except ValueError as e:
        log.error("Configuration error", error=str(e))
        return 2

    configure_logging(settings)

    database_id = os.getenv("NOTION_DATABASE_ID")
    block_id = os.getenv("NOTION_BLOCK_ID")
    if not database_id and not block_id:
        log.error("Set NOTION_DATABASE_ID and/or NOTION_BLOCK_ID")
        return 2

    log.info(
        "Starting dump",
        api_url=settings.NOTION_URL,
        api_version=settings.NOTION_VERSION,
        page_size=settings.PAGE_SIZE,
    )

    exit_code = 0
    with NotionClient(settings) as client:
        if database_id:
            table = client.query_database(database_id)
            for row, record in enumerate(table):
                for cell in record:
                    log.info(
                        "Cell",
                        row=row,
                        record_id=record.id,
                        name=cell.name,
                        kind=cell.kind.value if cell.kind else None,
                        value=cell.value,
                    )
            if not table.complete:
                log.error(
                    "Database dump is incomplete",
                    database_id=database_id,
                    records=len(table),
                    error=str(table.failure) if table.failure else None,
                )
                exit_code = 1

        if block_id:
            try:
                document = client.get_block_children(block_id, recursive=True)
            except NotionError:
                log.exception("Failed to fetch blocks", block_id=block_id)
                return 1
            sys.stdout.write(document.render())

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
