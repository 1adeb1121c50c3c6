"""Drop and recreate every table for the configured database. Destroys all data."""

import argparse
import logging
import sys

from officer_duty.core.logging_config import setup_logging
from officer_duty.database.base import Base
from officer_duty.database.session import engine
from officer_duty.models.absence_request import AbsenceRequest  # noqa: F401
from officer_duty.models.attendance import Attendance  # noqa: F401
from officer_duty.models.clock_settings import ClockSettings  # noqa: F401
from officer_duty.models.duty_assignment import DutyAssignment  # noqa: F401
from officer_duty.models.notification import Notification  # noqa: F401
from officer_duty.models.user import User  # noqa: F401

logger = logging.getLogger(__name__)


def recreate_tables(bind=engine) -> list[str]:
    Base.metadata.drop_all(bind=bind)
    Base.metadata.create_all(bind=bind)
    return sorted(Base.metadata.tables)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--yes", action="store_true", help="confirm that all data may be dropped")
    args = parser.parse_args()

    setup_logging()
    if not args.yes:
        logger.error("Refusing to drop tables on %s without --yes", engine.url.render_as_string(hide_password=True))
        sys.exit(1)

    tables = recreate_tables()
    logger.info("Recreated %d table(s): %s", len(tables), ", ".join(tables))
