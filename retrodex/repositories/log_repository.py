"""
Repositories for persisted error and application logs
"""

from sqlalchemy.exc import SQLAlchemyError

from retrodex.db import db
from retrodex.models.applog import AppLog
from retrodex.models.errorlog import ErrorLog


class ErrorLogRepository:
    """Repository for ErrorLog database operations"""

    @staticmethod
    def get_recent(limit=50):
        """Newest error logs first"""
        return ErrorLog.query.order_by(ErrorLog.created_at.desc()).limit(limit).all()

    @staticmethod
    def clear():
        """Delete every error log, returning how many rows were removed"""
        try:
            removed = ErrorLog.query.delete()
            db.session.commit()
            return removed
        except SQLAlchemyError as e:
            db.session.rollback()
            raise e

    @staticmethod
    def count():
        return ErrorLog.query.count()


class AppLogRepository:
    """Repository for AppLog database operations"""

    @staticmethod
    def get_recent(limit=50, level=None):
        """Newest application events first, optionally for one level"""
        query = AppLog.query
        if level:
            query = query.filter(AppLog.level == level)
        return query.order_by(AppLog.created_at.desc()).limit(limit).all()

    @staticmethod
    def clear():
        try:
            removed = AppLog.query.delete()
            db.session.commit()
            return removed
        except SQLAlchemyError as e:
            db.session.rollback()
            raise e

    @staticmethod
    def count():
        return AppLog.query.count()
