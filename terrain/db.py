"""Engine, the shared CLI connection and schema migrations.

Web requests get a connection of their own from DBConnectionMiddleware. The
admin CLI and the seed script build their repositories through
``terrain.repositories.factory``, which hands every repository the one
connection returned by :func:`get_connection`.
"""

import logging
import os

from alembic.config import Config
from sqlalchemy import Connection, create_engine
from sqlalchemy.engine import Engine, make_url

from alembic import command
from terrain.settings import settings

logger = logging.getLogger(__name__)

_engine: Engine | None = None
_connection: Connection | None = None


def get_engine() -> Engine:
    global _engine
    if _engine is None:
        url = make_url(settings.db_url)
        # MySQL closes idle connections after wait_timeout.
        _engine = create_engine(url, pool_pre_ping=True, pool_recycle=1800)
        logger.info("Database engine created: %s", url.render_as_string(hide_password=True))
    return _engine


def get_connection() -> Connection:
    """Connection shared by every repository the factory builds.

    Opened on first use; the CLI and the seed script release it with
    :func:`close_connection` on exit.
    """
    global _connection
    if _connection is None:
        _connection = get_engine().connect()
        logger.debug("Shared repository connection opened")
    return _connection


def close_connection() -> None:
    global _connection
    if _connection is None:
        return
    _connection.close()
    _connection = None
    logger.debug("Shared repository connection closed")


def _get_alembic_config() -> Config:
    project_root = os.path.dirname(os.path.dirname(__file__))
    ini_path = os.path.join(project_root, "alembic.ini")
    if not os.path.exists(ini_path):
        ini_path = os.path.join(os.getcwd(), "alembic.ini")
    cfg = Config(ini_path)
    # Read by alembic/env.py: keep the handlers configure_logging() installed.
    cfg.attributes["configure_logger"] = False
    return cfg


def initialize_db() -> None:
    """Upgrade the schema to the latest team-invitations revision."""
    logger.info("Running Alembic migrations")
    command.upgrade(_get_alembic_config(), "head")
    logger.info("Migrations complete")
