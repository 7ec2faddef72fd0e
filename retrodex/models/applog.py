"""Application event log model (admin writes, warnings)."""

from retrodex.db import db
from retrodex.utils import new_uuid, now_utc


class AppLog(db.Model):
    __tablename__ = "app_logs"

    id = db.Column(db.String(36), primary_key=True, default=new_uuid)
    created_at = db.Column(db.DateTime(timezone=True), default=now_utc, index=True, nullable=False)
    level = db.Column(db.String(10), nullable=False, index=True)
    message = db.Column(db.String(255), nullable=False)
    data = db.Column(db.JSON)
