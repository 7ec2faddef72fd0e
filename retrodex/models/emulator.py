"""
Model: Emulator

An emulator targets one or more consoles. ``console_ids`` holds every
supported console and ``console_id`` mirrors its first element.
"""

from retrodex.db import db
from retrodex.models.base import CatalogEntityMixin


class Emulator(CatalogEntityMixin, db.Model):
    __tablename__ = "emulators"

    name = db.Column(db.String(200), nullable=False)
    slug = db.Column(db.String(220), unique=True, nullable=False, index=True)
    console_id = db.Column(db.String(36), db.ForeignKey("consoles.id"), index=True)
    console_ids = db.Column(db.JSON)  # ["<console uuid>", ...]
    developer = db.Column(db.String(200))
    description = db.Column(db.Text)
    image_url = db.Column(db.String(500))
    version = db.Column(db.String(50))
    license = db.Column(db.String(100))
    download_url = db.Column(db.String(500))
    supported_platforms = db.Column(db.JSON)  # ["Windows", "Linux", "Android"]
    features = db.Column(db.JSON)
    recommended = db.Column(db.Boolean, default=False, nullable=False)

    console = db.relationship("Console")
