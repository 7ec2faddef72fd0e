"""
Model: Console
"""

from retrodex.db import db
from retrodex.models.base import CatalogEntityMixin


class Console(CatalogEntityMixin, db.Model):
    __tablename__ = "consoles"

    name = db.Column(db.String(200), nullable=False)
    slug = db.Column(db.String(220), unique=True, nullable=False, index=True)
    manufacturer = db.Column(db.String(100), index=True)
    release_date = db.Column(db.String(10))  # YYYY-MM-DD
    release_year = db.Column(db.Integer)
    description = db.Column(db.Text)
    image_url = db.Column(db.String(500))
