import json
import logging
import traceback
from contextlib import contextmanager

from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import String, cast, event
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from retrodex.utils import escape_like, isoformat, sanitize_sensitive_data

# Retrieve main logger
logger = logging.getLogger("main")

db = SQLAlchemy()
migrate = Migrate()


def to_dict(db_results):
    return {c.name: isoformat(getattr(db_results, c.name)) for c in db_results.__table__.columns}


def json_array_contains(column, value):
    """
    Portable filter for "array column contains value".

    Array columns are stored as JSON; both SQLite and PostgreSQL render a JSON
    list of strings as text containing the quoted element.
    """
    pattern = '%' + escape_like(json.dumps(str(value))) + '%'
    return cast(column, String).like(pattern, escape="\\")


@contextmanager
def atomic(action):
    """
    Run a unit of work in one transaction.

    Commits once on success; on failure the session is rolled back and
    database errors are translated into ConflictException (unique or foreign
    key violations) or DatabaseException.
    """
    from retrodex.exceptions import ConflictException, DatabaseException

    try:
        yield db.session
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        raise ConflictException(f"{action} failed: {e.orig}") from e
    except SQLAlchemyError as e:
        db.session.rollback()
        raise DatabaseException(f"{action} failed: {e}") from e
    except Exception:
        db.session.rollback()
        raise


def log_error(error, context=None, user_agent=None, url=None):
    """Persist an error to the error_logs table, never raising."""
    from flask import current_app
    from retrodex.models.errorlog import ErrorLog

    try:
        if not current_app:
            return

        stack = "".join(traceback.format_exception(type(error), error, error.__traceback__))
        log = ErrorLog(
            error_message=str(error) or error.__class__.__name__,
            stack_trace=stack,
            context=sanitize_sensitive_data(context) if context else None,
            user_agent=user_agent,
            url=url,
        )
        db.session.add(log)
        db.session.commit()
    except Exception as e:
        logger.error(f"Failed to log error to database: {e}")
        logger.error(f"Original error: {error}")
        db.session.rollback()


def log_app_event(level, message, **data):
    """Utility function to record an application event in app_logs"""
    from flask import current_app
    from retrodex.models.applog import AppLog

    try:
        if not current_app:
            return

        log = AppLog(level=level, message=message, data=sanitize_sensitive_data(data) if data else None)
        db.session.add(log)
        db.session.commit()
    except Exception as e:
        logger.error(f"Failed to log app event: {e}")
        db.session.rollback()


def init_db(app):
    with app.app_context():
        # Ensure foreign keys are enforced when a SQLite connection is opened
        @event.listens_for(db.engine, "connect")
        def set_sqlite_pragma(dbapi_connection, connection_record):
            import sqlite3

            if not isinstance(dbapi_connection, sqlite3.Connection):
                return

            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON;")
            cursor.execute("PRAGMA busy_timeout=30000;")
            cursor.close()

        # Register every model on the metadata before creating tables
        import retrodex.models  # noqa: F401

        logger.info("Initializing database tables...")
        db.create_all()
