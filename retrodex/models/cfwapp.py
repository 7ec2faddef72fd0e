"""
Model: CfwApp
Homebrew application distributed for one or more custom firmwares
"""

from retrodex.db import db
from retrodex.models.base import CatalogEntityMixin


class CfwApp(CatalogEntityMixin, db.Model):
    __tablename__ = "cfw_apps"

    name = db.Column(db.String(200), nullable=False)
    slug = db.Column(db.String(220), unique=True, nullable=False, index=True)
    description = db.Column(db.Text)
    developer = db.Column(db.String(200))
    developers = db.Column(db.JSON)
    features = db.Column(db.JSON)
    requirements = db.Column(db.JSON)
    version = db.Column(db.String(50))
    license = db.Column(db.String(100))
    website = db.Column(db.String(500))
    download_url = db.Column(db.String(500))
    source_code_url = db.Column(db.String(500))
    category_id = db.Column(db.String(36), db.ForeignKey("categories.id", ondelete="SET NULL"), index=True)
