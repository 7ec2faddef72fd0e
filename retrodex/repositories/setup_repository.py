"""
Repositories for Setup guides and their components
"""

from sqlalchemy.exc import SQLAlchemyError

from retrodex.db import db
from retrodex.models.setup import Setup, SetupComponent
from retrodex.repositories.base_repository import CatalogRepository


class SetupRepository(CatalogRepository):
    """Repository for Setup database operations"""

    model = Setup
    search_columns = ("title", "description", "guide_content")
    filter_columns = ("difficulty", "featured")
    array_filters = ("tags", "requirements")
    sort_columns = ("name", "title", "difficulty", "featured", "created_at", "updated_at")


class SetupComponentRepository:
    """Repository for SetupComponent database operations"""

    @staticmethod
    def get_for_parent(setup_id):
        """Components of a setup, in guide order"""
        return (
            SetupComponent.query.filter_by(setup_id=setup_id)
            .order_by(SetupComponent.sort_order, SetupComponent.created_at)
            .all()
        )

    @staticmethod
    def create(commit=True, **kwargs):
        """Create new SetupComponent record"""
        try:
            item = SetupComponent(**kwargs)
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
    def delete_for_parent(setup_id):
        """Remove every component of a setup without committing"""
        return SetupComponent.query.filter_by(setup_id=setup_id).delete(synchronize_session=False)

    @staticmethod
    def delete_for_target(component_type, component_id):
        """Drop a deleted entity from every setup, without committing"""
        return SetupComponent.query.filter_by(
            component_type=component_type, component_id=component_id
        ).delete(synchronize_session=False)

    @staticmethod
    def count():
        """Count total SetupComponent records"""
        return SetupComponent.query.count()
