"""
Model: Category
Grouping for tools and CFW apps
"""

from retrodex.db import db
from retrodex.models.base import CatalogEntityMixin


class Category(CatalogEntityMixin, db.Model):
    __tablename__ = "categories"

    name = db.Column(db.String(100), nullable=False)
    slug = db.Column(db.String(120), unique=True, nullable=False, index=True)
    type = db.Column(db.String(50), nullable=False, default="tool")  # 'tool' | 'cfw_app'
    description = db.Column(db.Text)
