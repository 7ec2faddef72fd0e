"""
Model: Tool
"""

from retrodex.db import db
from retrodex.models.base import CatalogEntityMixin


class Tool(CatalogEntityMixin, db.Model):
    __tablename__ = "tools"

    name = db.Column(db.String(200), nullable=False)
    slug = db.Column(db.String(220), unique=True, nullable=False, index=True)
    developer = db.Column(db.String(200), index=True)
    description = db.Column(db.Text)
    version = db.Column(db.String(50))
    license = db.Column(db.String(100))
    category = db.Column(db.JSON)  # ["ROM Management", "Scraping"]
    supported_platforms = db.Column(db.JSON)
    features = db.Column(db.JSON)
    requirements = db.Column(db.Text)
    price = db.Column(db.String(50))  # 'Free', '$4.99'
    official_website = db.Column(db.String(500))
    image_url = db.Column(db.String(500))
    category_id = db.Column(db.String(36), db.ForeignKey("categories.id", ondelete="SET NULL"))
