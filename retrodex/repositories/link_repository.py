"""
Repository for Link database operations
"""

from sqlalchemy.exc import SQLAlchemyError

from retrodex.db import db
from retrodex.models.link import Link


class LinkRepository:
    """Repository for Link database operations"""

    @staticmethod
    def get_by_id(id):
        """Get Link by ID"""
        return db.session.get(Link, id)

    @staticmethod
    def get_for_entity(entity_type, entity_id):
        """Links attached to one entity, in display order"""
        return (
            Link.query.filter_by(entity_type=entity_type, entity_id=entity_id)
            .order_by(Link.display_order, Link.created_at)
            .all()
        )

    @staticmethod
    def create(commit=True, **kwargs):
        """Create new Link record"""
        try:
            item = Link(**kwargs)
            db.session.add(item)
            if commit:
                db.session.commit()
                db.session.refresh(item)
            else:
                db.session.flush()
            return item
        except SQLAlchemyError as e:
            db.session.rollback()
            raise e

    @staticmethod
    def update(id, **kwargs):
        """Update Link record"""
        item = db.session.get(Link, id)
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
        """Delete Link record"""
        item = db.session.get(Link, id)
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
    def delete_for_entity(entity_type, entity_id):
        """Remove every link of an entity without committing"""
        return Link.query.filter_by(entity_type=entity_type, entity_id=entity_id).delete(synchronize_session=False)

    @staticmethod
    def count():
        """Count total Link records"""
        return Link.query.count()
