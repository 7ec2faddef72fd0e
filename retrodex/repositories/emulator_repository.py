"""
Repository for Emulator database operations
"""

from sqlalchemy import or_

from retrodex.db import json_array_contains
from retrodex.models.emulator import Emulator
from retrodex.repositories.base_repository import CatalogRepository


class EmulatorRepository(CatalogRepository):
    """Repository for Emulator database operations"""

    model = Emulator
    search_columns = ("name", "description", "developer")
    filter_columns = ("console_id", "developer", "license", "recommended")
    array_filters = ("console_ids", "supported_platforms", "features")

    @staticmethod
    def get_for_console(console_id, recommended_only=False, limit=None):
        """Emulators whose console list (or primary console) includes console_id"""
        query = Emulator.query.filter(
            or_(Emulator.console_id == console_id, json_array_contains(Emulator.console_ids, console_id))
        )
        if recommended_only:
            query = query.filter(Emulator.recommended.is_(True))
        query = query.order_by(Emulator.recommended.desc(), Emulator.name)
        if limit:
            query = query.limit(limit)
        return query.all()

    @staticmethod
    def count_by_primary_console(console_id):
        return Emulator.query.filter_by(console_id=console_id).count()
