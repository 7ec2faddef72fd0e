"""Error log model.

This module only contains the SQLAlchemy model.
The helper that writes rows lives in `retrodex/db.py` (log_error).
"""

from retrodex.db import db
from retrodex.utils import new_uuid, now_utc


class ErrorLog(db.Model):
    __tablename__ = "error_logs"

    id = db.Column(db.String(36), primary_key=True, default=new_uuid)
    created_at = db.Column(db.DateTime(timezone=True), default=now_utc, index=True, nullable=False)
    error_message = db.Column(db.Text, nullable=False)
    stack_trace = db.Column(db.Text)
    context = db.Column(db.JSON)
    user_agent = db.Column(db.String(500))
    url = db.Column(db.String(1000))
