"""
Model: Game
"""

from retrodex.db import db
from retrodex.models.base import CatalogEntityMixin


class Game(CatalogEntityMixin, db.Model):
    __tablename__ = "games"

    name = db.Column(db.String(200), nullable=False)
    slug = db.Column(db.String(220), unique=True, nullable=False, index=True)
    console_id = db.Column(db.String(36), db.ForeignKey("consoles.id"), nullable=False, index=True)
    developer = db.Column(db.String(200))
    publisher = db.Column(db.String(200))
    release_date = db.Column(db.String(10))
    release_year = db.Column(db.Integer)
    genre = db.Column(db.String(100))
    description = db.Column(db.Text)
    image_url = db.Column(db.String(500))

    console = db.relationship("Console", backref=db.backref("games", lazy="dynamic"))
