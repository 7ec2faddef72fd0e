"""
Repository for Game database operations
"""

from retrodex.models.game import Game
from retrodex.repositories.base_repository import CatalogRepository


class GameRepository(CatalogRepository):
    """Repository for Game database operations"""

    model = Game
    filter_columns = ("console_id", "genre", "developer", "publisher", "release_year")
    sort_columns = ("name", "release_year", "created_at", "updated_at")

    @staticmethod
    def get_by_console(console_id, limit=None):
        """Games released for a console"""
        query = Game.query.filter_by(console_id=console_id).order_by(Game.name)
        if limit:
            query = query.limit(limit)
        return query.all()

    @staticmethod
    def count_by_console(console_id):
        return Game.query.filter_by(console_id=console_id).count()
