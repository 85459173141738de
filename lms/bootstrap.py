"""
Create the schema and the default accounts.

Run this once at deploy / first start, from the project root:

    (.venv) lms-bootstrap

It is safe to run repeatedly: tables are only created when missing and the
default librarian / member are only inserted when their email is not taken.
"""

from lms.core.config import settings
from lms.core.logging import configure_logging, get_logger
from lms.db.init_db import init_db, seed_initial_data
from lms.db.session import SessionLocal, engine


def main() -> None:
    configure_logging(level=settings.log_level)
    log = get_logger("bootstrap")

    init_db(engine)
    log.info("schema_ready", database=engine.url.render_as_string(hide_password=True))

    db = SessionLocal()
    try:
        created = seed_initial_data(db, settings)
    finally:
        db.close()

    log.info("bootstrap_done", created_accounts=created)


if __name__ == "__main__":
    main()
