"""
Models: Setup, SetupComponent
Step by step guides combining catalog entities
"""

from retrodex.db import db
from retrodex.models.base import CatalogEntityMixin
from retrodex.utils import new_uuid, now_utc


class Setup(CatalogEntityMixin, db.Model):
    __tablename__ = "setups"

    title = db.Column(db.String(200), nullable=False)
    slug = db.Column(db.String(220), unique=True, nullable=False, index=True)
    description = db.Column(db.Text)
    difficulty = db.Column(db.String(20), nullable=False, index=True)  # see SETUP_DIFFICULTIES
    estimated_time = db.Column(db.String(50))
    featured = db.Column(db.Boolean, default=False, nullable=False)
    guide_content = db.Column(db.Text)
    steps = db.Column(db.JSON)
    requirements = db.Column(db.JSON)
    tags = db.Column(db.JSON)
    image_url = db.Column(db.String(500))

    # Shared repository code searches and sorts on "name"
    name = db.synonym("title")


class SetupComponent(db.Model):
    __tablename__ = "setup_components"

    id = db.Column(db.String(36), primary_key=True, default=new_uuid)
    setup_id = db.Column(db.String(36), db.ForeignKey("setups.id", ondelete="CASCADE"), nullable=False, index=True)
    component_type = db.Column(db.String(50), nullable=False)
    component_id = db.Column(db.String(36), nullable=False)
    is_required = db.Column(db.Boolean, default=True, nullable=False)
    notes = db.Column(db.Text)
    sort_order = db.Column(db.Integer, default=0, nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), default=now_utc, nullable=False)

    __table_args__ = (
        db.Index("idx_setup_components_target", "component_type", "component_id"),
        db.UniqueConstraint("setup_id", "component_type", "component_id", name="uq_setup_component"),
    )
