"""
Models: Preset, PresetItem
A named bundle of emulators, games and apps for one handheld
"""

from retrodex.db import db
from retrodex.models.base import CatalogEntityMixin
from retrodex.utils import new_uuid, now_utc


class Preset(CatalogEntityMixin, db.Model):
    __tablename__ = "presets"

    name = db.Column(db.String(200), nullable=False)
    slug = db.Column(db.String(220), unique=True, nullable=False, index=True)
    description = db.Column(db.Text)
    handheld_id = db.Column(db.String(36), db.ForeignKey("handhelds.id", ondelete="SET NULL"), index=True)
    created_by = db.Column(db.String(100))
    is_public = db.Column(db.Boolean, default=True, nullable=False)

    handheld = db.relationship("Handheld")


class PresetItem(db.Model):
    __tablename__ = "preset_items"

    id = db.Column(db.String(36), primary_key=True, default=new_uuid)
    preset_id = db.Column(db.String(36), db.ForeignKey("presets.id", ondelete="CASCADE"), nullable=False, index=True)
    item_type = db.Column(db.String(50), nullable=False)
    item_id = db.Column(db.String(36), nullable=False)
    notes = db.Column(db.Text)
    sort_order = db.Column(db.Integer, default=0, nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), default=now_utc, nullable=False)

    __table_args__ = (
        db.Index("idx_preset_items_target", "item_type", "item_id"),
        db.UniqueConstraint("preset_id", "item_type", "item_id", name="uq_preset_item"),
    )
