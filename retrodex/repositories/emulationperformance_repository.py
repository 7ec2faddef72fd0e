"""
Repository for EmulationPerformance database operations
"""

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError

from retrodex.constants import PERFORMANCE_RATINGS
from retrodex.db import db
from retrodex.models.emulationperformance import EmulationPerformance


def _rating_rank(row):
    try:
        return PERFORMANCE_RATINGS.index(row.performance_rating)
    except ValueError:
        return len(PERFORMANCE_RATINGS)


class EmulationPerformanceRepository:
    """Repository for EmulationPerformance database operations"""

    @staticmethod
    def get_by_id(id):
        """Get EmulationPerformance by ID"""
        return db.session.get(EmulationPerformance, id)

    @staticmethod
    def get_by_pair(handheld_id, console_id):
        return EmulationPerformance.query.filter_by(handheld_id=handheld_id, console_id=console_id).first()

    @staticmethod
    def get_for_handheld(handheld_id):
        """Performance rows of a handheld, best rating first"""
        rows = EmulationPerformance.query.filter_by(handheld_id=handheld_id).all()
        return sorted(rows, key=lambda row: (_rating_rank(row), row.console.name if row.console else ""))

    @staticmethod
    def get_for_console(console_id):
        """Performance rows of a console, best rating first"""
        rows = EmulationPerformance.query.filter_by(console_id=console_id).all()
        return sorted(rows, key=lambda row: (_rating_rank(row), row.handheld.name if row.handheld else ""))

    @staticmethod
    def create(**kwargs):
        """Create new EmulationPerformance record"""
        try:
            item = EmulationPerformance(**kwargs)
            db.session.add(item)
            db.session.commit()
            db.session.refresh(item)
            return item
        except SQLAlchemyError as e:
            db.session.rollback()
            raise e

    @staticmethod
    def update(id, **kwargs):
        """Update EmulationPerformance record"""
        item = db.session.get(EmulationPerformance, id)
        if not item:
            return None

        for key, value in kwargs.items():
            if hasattr(item, key):
                setattr(item, key, value)

        try:
            db.session.commit()
            return item
        except SQLAlchemyError as e:
            db.session.rollback()
            raise e

    @staticmethod
    def delete(id):
        """Delete EmulationPerformance record"""
        item = db.session.get(EmulationPerformance, id)
        if not item:
            return False

        try:
            db.session.delete(item)
            db.session.commit()
            return True
        except SQLAlchemyError as e:
            db.session.rollback()
            raise e

    @staticmethod
    def delete_for_entity(entity_id):
        """Remove rows referencing a handheld or console, without committing"""
        return EmulationPerformance.query.filter(
            or_(EmulationPerformance.handheld_id == entity_id, EmulationPerformance.console_id == entity_id)
        ).delete(synchronize_session=False)

    @staticmethod
    def count():
        """Count total EmulationPerformance records"""
        return EmulationPerformance.query.count()
