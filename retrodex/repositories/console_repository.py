"""
Repository for Console database operations
"""

from retrodex.models.console import Console
from retrodex.repositories.base_repository import CatalogRepository


class ConsoleRepository(CatalogRepository):
    """Repository for Console database operations"""

    model = Console
    search_columns = ("name", "description", "manufacturer")
    filter_columns = ("manufacturer", "release_year")
    sort_columns = ("name", "manufacturer", "release_year", "created_at", "updated_at")

    @staticmethod
    def first_id():
        """Fetch a single console id, used by the health check"""
        row = Console.query.with_entities(Console.id).limit(1).first()
        return row[0] if row else None
