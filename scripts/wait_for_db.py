"""Container entrypoint helper: exit 0 once the configured database is up.

    DB_WAIT_TIMEOUT=60 python scripts/wait_for_db.py
"""

from __future__ import annotations

import os
import sys

from sqlalchemy.exc import OperationalError

from checkin.core.logging import configure_logging
from checkin.core.settings import settings
from checkin.db.session import wait_for_database


def main() -> int:
    configure_logging(level=settings.log_level)
    timeout = float(os.getenv("DB_WAIT_TIMEOUT", "30"))
    interval = float(os.getenv("DB_WAIT_INTERVAL", "2"))
    try:
        wait_for_database(settings.database_url, timeout=timeout, interval=interval)
    except OperationalError:
        print(f"database not reachable within {timeout:g}s", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
