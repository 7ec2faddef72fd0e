"""
Shared query helpers for catalog entity repositories
"""

import logging
import time

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError

from retrodex.db import db, json_array_contains
from retrodex.utils import escape_like

logger = logging.getLogger("main")


class CatalogRepository:
    """
    Base repository for slugged catalog rows.

    Subclasses set ``model`` and describe which columns are searched with
    ``ilike`` (``search_columns``), which accept equality filters
    (``filter_columns``) and which JSON array columns accept a
    "contains" filter (``array_filters``).
    """

    model = None
    search_columns = ("name", "description")
    filter_columns = ()
    array_filters = ()
    sort_columns = ("name", "created_at", "updated_at")

    @classmethod
    def get_by_id(cls, id):
        """Get record by primary key"""
        if not id:
            return None
        return db.session.get(cls.model, id)

    @classmethod
    def get_by_ids(cls, ids):
        """Get records for a list of IDs, keeping the requested order"""
        if not ids:
            return []
        rows = {row.id: row for row in cls.model.query.filter(cls.model.id.in_(ids)).all()}
        return [rows[id] for id in ids if id in rows]

    @classmethod
    def get_by_slug(cls, slug):
        """Get record by slug"""
        return cls.model.query.filter_by(slug=slug).first()

    @classmethod
    def slug_exists(cls, slug, exclude_id=None):
        query = cls.model.query.filter(cls.model.slug == slug)
        if exclude_id:
            query = query.filter(cls.model.id != exclude_id)
        return db.session.query(query.exists()).scalar()

    @classmethod
    def _text_filter(cls, query_text):
        pattern = f"%{escape_like(query_text)}%"
        return or_(*[getattr(cls.model, column).ilike(pattern, escape="\\") for column in cls.search_columns])

    @classmethod
    def search(cls, query_text, limit=20):
        """Case-insensitive substring search over the searchable columns"""
        if not query_text or not query_text.strip():
            return []
        return (
            cls.model.query.filter(cls._text_filter(query_text.strip()))
            .order_by(cls.model.name)
            .limit(limit)
            .all()
        )

    @classmethod
    def build_query(cls, query_text=None, filters=None, sort_by="name", order="asc"):
        query = cls.model.query

        if query_text and query_text.strip():
            query = query.filter(cls._text_filter(query_text.strip()))

        for key, value in (filters or {}).items():
            if value is None or value == "":
                continue
            if key in cls.filter_columns:
                query = query.filter(getattr(cls.model, key) == value)
            elif key in cls.array_filters:
                query = query.filter(json_array_contains(getattr(cls.model, key), value))

        if sort_by not in cls.sort_columns:
            sort_by = "name"
        sort_field = getattr(cls.model, sort_by)
        if order == "desc":
            sort_field = sort_field.desc()
        return query.order_by(sort_field, cls.model.id)

    @classmethod
    def get_paged(cls, page, per_page, sort_by="name", order="asc", query_text=None, filters=None):
        """
        Database-level pagination
        """
        query = cls.build_query(query_text=query_text, filters=filters, sort_by=sort_by, order=order)

        start = time.time()
        result = query.paginate(page=page, per_page=per_page, error_out=False)
        duration = (time.time() - start) * 1000.0
        logger.debug(
            f"{cls.__name__}.get_paged: page={page} per_page={per_page} total={result.total} duration_ms={duration:.1f}"
        )
        return result

    @classmethod
    def recent(cls, limit=2, filters=None):
        """Newest records first"""
        query = cls.model.query.filter_by(**(filters or {}))
        return query.order_by(cls.model.created_at.desc()).limit(limit).all()

    @classmethod
    def count(cls):
        """Count total records"""
        return cls.model.query.count()

    @classmethod
    def create(cls, commit=True, **kwargs):
        """Create new record; with commit=False the row is only flushed"""
        try:
            item = cls.model(**kwargs)
            db.session.add(item)
            if commit:
                db.session.commit()
                db.session.refresh(item)
            else:
                db.session.flush()
            return item
        except SQLAlchemyError as e:
            db.session.rollback()
            raise e

    @classmethod
    def update(cls, id, commit=True, **kwargs):
        """Update record, returning None when it does not exist"""
        item = cls.get_by_id(id)
        if not item:
            return None

        for key, value in kwargs.items():
            if hasattr(item, key):
                setattr(item, key, value)

        try:
            if commit:
                db.session.commit()
            else:
                db.session.flush()
            return item
        except SQLAlchemyError as e:
            db.session.rollback()
            raise e

    @classmethod
    def delete(cls, id, commit=True):
        """Delete record"""
        item = cls.get_by_id(id)
        if not item:
            return False

        try:
            db.session.delete(item)
            if commit:
                db.session.commit()
            else:
                db.session.flush()
            return True
        except SQLAlchemyError as e:
            db.session.rollback()
            raise e
