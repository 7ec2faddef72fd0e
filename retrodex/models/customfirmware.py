"""
Model: CustomFirmware
Replacement OS/bootloader software for handheld devices
"""

from retrodex.db import db
from retrodex.models.base import CatalogEntityMixin


class CustomFirmware(CatalogEntityMixin, db.Model):
    __tablename__ = "custom_firmware"

    name = db.Column(db.String(200), nullable=False)
    slug = db.Column(db.String(220), unique=True, nullable=False, index=True)
    description = db.Column(db.Text)
    version = db.Column(db.String(50))
    release_date = db.Column(db.String(10))
    download_url = db.Column(db.String(500))
    documentation_url = db.Column(db.String(500))
    source_code_url = db.Column(db.String(500))
    license = db.Column(db.String(100))
    installation_difficulty = db.Column(db.String(20))
    features = db.Column(db.JSON)
    requirements = db.Column(db.JSON)
    image_url = db.Column(db.String(500))
