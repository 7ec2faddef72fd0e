"""
Model: Handheld
"""

from retrodex.db import db
from retrodex.models.base import CatalogEntityMixin


class Handheld(CatalogEntityMixin, db.Model):
    __tablename__ = "handhelds"

    name = db.Column(db.String(200), nullable=False)
    slug = db.Column(db.String(220), unique=True, nullable=False, index=True)
    manufacturer = db.Column(db.String(100), index=True)
    release_date = db.Column(db.String(10))
    price = db.Column(db.Float)
    price_range = db.Column(db.String(50))
    processor = db.Column(db.String(200))
    ram = db.Column(db.String(50))
    storage = db.Column(db.String(100))
    screen_size = db.Column(db.String(50))
    display = db.Column(db.String(200))
    battery_life = db.Column(db.String(100))
    weight = db.Column(db.String(50))
    dimensions = db.Column(db.String(100))
    connectivity = db.Column(db.JSON)  # ["Wi-Fi", "Bluetooth"]
    operating_system = db.Column(db.String(100))
    supported_formats = db.Column(db.JSON)
    official_website = db.Column(db.String(500))
    description = db.Column(db.Text)
    image_url = db.Column(db.String(500))
