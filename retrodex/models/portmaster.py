"""
Model: PortMasterPort
A PC game ported to Linux handhelds through PortMaster
"""

from retrodex.db import db
from retrodex.models.base import CatalogEntityMixin


class PortMasterPort(CatalogEntityMixin, db.Model):
    __tablename__ = "portmaster_ports"

    name = db.Column(db.String(200), nullable=False)
    slug = db.Column(db.String(220), unique=True, nullable=False, index=True)
    description = db.Column(db.Text)
    image_url = db.Column(db.String(500))
    genre = db.Column(db.JSON)
    # Ships with its game data; otherwise the user supplies necessary_files
    ready_to_run = db.Column(db.Boolean, default=False, nullable=False)
    necessary_files = db.Column(db.JSON)
    portmaster_link = db.Column(db.String(500))
    purchase_links = db.Column(db.JSON)  # [{"label": ..., "url": ...}]
    instructions = db.Column(db.Text)
