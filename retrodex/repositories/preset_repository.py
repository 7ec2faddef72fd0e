"""
Repositories for Presets and their items
"""

from sqlalchemy.exc import SQLAlchemyError

from retrodex.db import db
from retrodex.models.preset import Preset, PresetItem
from retrodex.repositories.base_repository import CatalogRepository


class PresetRepository(CatalogRepository):
    """Repository for Preset database operations"""

    model = Preset
    filter_columns = ("handheld_id", "is_public", "created_by")

    @staticmethod
    def clear_handheld(handheld_id):
        """Detach presets from a handheld that is being deleted, without committing"""
        return Preset.query.filter_by(handheld_id=handheld_id).update({"handheld_id": None})


class PresetItemRepository:
    """Repository for PresetItem database operations"""

    @staticmethod
    def get_for_parent(preset_id):
        """Items of a preset, in display order"""
        return (
            PresetItem.query.filter_by(preset_id=preset_id)
            .order_by(PresetItem.sort_order, PresetItem.created_at)
            .all()
        )

    @staticmethod
    def create(commit=True, **kwargs):
        """Create new PresetItem record"""
        try:
            item = PresetItem(**kwargs)
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
    def delete_for_parent(preset_id):
        """Remove every item of a preset without committing"""
        return PresetItem.query.filter_by(preset_id=preset_id).delete(synchronize_session=False)

    @staticmethod
    def delete_for_target(item_type, item_id):
        """Drop a deleted entity from every preset, without committing"""
        return PresetItem.query.filter_by(item_type=item_type, item_id=item_id).delete(synchronize_session=False)

    @staticmethod
    def count():
        """Count total PresetItem records"""
        return PresetItem.query.count()
