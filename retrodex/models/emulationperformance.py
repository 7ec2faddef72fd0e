"""
Model: EmulationPerformance
How well a handheld emulates a given console
"""

from retrodex.db import db
from retrodex.models.base import CatalogEntityMixin


class EmulationPerformance(CatalogEntityMixin, db.Model):
    __tablename__ = "emulation_performance"

    handheld_id = db.Column(db.String(36), db.ForeignKey("handhelds.id", ondelete="CASCADE"), nullable=False)
    console_id = db.Column(db.String(36), db.ForeignKey("consoles.id", ondelete="CASCADE"), nullable=False)
    performance_rating = db.Column(db.String(20), nullable=False)  # see PERFORMANCE_RATINGS
    fps_range = db.Column(db.String(50))
    resolution_supported = db.Column(db.String(100))
    notes = db.Column(db.Text)
    tested_games = db.Column(db.JSON)
    settings_notes = db.Column(db.Text)

    handheld = db.relationship("Handheld")
    console = db.relationship("Console")

    __table_args__ = (
        db.Index("idx_performance_handheld", "handheld_id"),
        db.UniqueConstraint("handheld_id", "console_id", name="uq_performance_pair"),
    )
