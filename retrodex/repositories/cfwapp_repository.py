"""
Repository for CfwApp database operations
"""

from retrodex.models.cfwapp import CfwApp
from retrodex.repositories.base_repository import CatalogRepository


class CfwAppRepository(CatalogRepository):
    """Repository for CfwApp database operations"""

    model = CfwApp
    search_columns = ("name", "description", "developer")
    filter_columns = ("developer", "license", "category_id")
    array_filters = ("developers", "features", "requirements")
