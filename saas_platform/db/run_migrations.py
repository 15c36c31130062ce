"""
Command-line entry point for the SaaS Platform schema migrations.

The Alembic scripts ship inside the package (saas_platform/db/migrations), so
no alembic.ini is needed: the script location and database URL are set here.
The API calls main(["upgrade", "head"]) at startup when
RUN_MIGRATIONS_ON_STARTUP is enabled.

Usage:
    python -m saas_platform.db.run_migrations upgrade head
    python -m saas_platform.db.run_migrations downgrade -1
    python -m saas_platform.db.run_migrations current
    python -m saas_platform.db.run_migrations stamp head
"""

import logging
import sys
from pathlib import Path
from typing import Callable, Dict, List, Optional

from alembic import command
from alembic.config import Config

from saas_platform.db.config import get_settings

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parent / "migrations"

# command name -> (alembic function, default arguments)
COMMANDS: Dict[str, tuple] = {
    "upgrade": (command.upgrade, ["head"]),
    "downgrade": (command.downgrade, ["-1"]),
    "stamp": (command.stamp, ["head"]),
    "current": (command.current, []),
    "history": (command.history, []),
    "heads": (command.heads, []),
}


def build_config() -> Config:
    """Alembic config pointing at the packaged migrations and the configured database."""
    cfg = Config()
    cfg.set_main_option("script_location", str(MIGRATIONS_DIR))
    # Offline mode renders SQL from this URL; env.py connects with the async URL.
    cfg.set_main_option("sqlalchemy.url", get_settings().sync_database_url)
    return cfg


# PUBLIC_INTERFACE
def main(argv: Optional[List[str]] = None) -> None:
    """Run one Alembic command, e.g. main(["upgrade", "head"])."""
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        print(f"Usage: python -m saas_platform.db.run_migrations <{'|'.join(COMMANDS)}> [args]")
        sys.exit(1)

    name, rest = args[0], args[1:]
    if name not in COMMANDS:
        print(f"Unsupported migration command: {name}")
        sys.exit(2)

    func: Callable = COMMANDS[name][0]
    params = rest or COMMANDS[name][1]
    logger.info("alembic %s %s", name, " ".join(params))
    func(build_config(), *params)


if __name__ == "__main__":
    main()
