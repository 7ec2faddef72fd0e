"""
Repository for Category database operations
"""

from retrodex.models.category import Category
from retrodex.repositories.base_repository import CatalogRepository


class CategoryRepository(CatalogRepository):
    """Repository for Category database operations"""

    model = Category
    filter_columns = ("type",)

    @staticmethod
    def get_by_type(type):
        """Get categories of one type ('tool' or 'cfw_app')"""
        return Category.query.filter_by(type=type).order_by(Category.name).all()
