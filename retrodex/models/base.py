"""
Common columns shared by catalog models
"""

from retrodex.db import db
from retrodex.utils import new_uuid, now_utc


class CatalogEntityMixin:
    """UUID primary key plus creation/update timestamps"""

    id = db.Column(db.String(36), primary_key=True, default=new_uuid)
    created_at = db.Column(db.DateTime(timezone=True), default=now_utc, nullable=False)
    updated_at = db.Column(db.DateTime(timezone=True), default=now_utc, onupdate=now_utc, nullable=False)


class CompatibilityMixin:
    """Columns every compatibility join row carries"""

    id = db.Column(db.String(36), primary_key=True, default=new_uuid)
    compatibility_notes = db.Column(db.Text)
    created_at = db.Column(db.DateTime(timezone=True), default=now_utc, nullable=False)
