"""
Model: Link
External link attached to any catalog entity (polymorphic on entity_type/entity_id)
"""

from retrodex.constants import LINK_TYPE_GENERAL
from retrodex.db import db
from retrodex.models.base import CatalogEntityMixin


class Link(CatalogEntityMixin, db.Model):
    __tablename__ = "links"

    entity_type = db.Column(db.String(30), nullable=False)
    entity_id = db.Column(db.String(36), nullable=False)
    name = db.Column(db.String(200), nullable=False)
    url = db.Column(db.String(1000), nullable=False)
    description = db.Column(db.Text)
    link_type = db.Column(db.String(30), nullable=False, default=LINK_TYPE_GENERAL)
    is_primary = db.Column(db.Boolean, nullable=False, default=False)
    display_order = db.Column(db.Integer, nullable=False, default=0)

    __table_args__ = (db.Index("idx_links_entity", "entity_type", "entity_id"),)
