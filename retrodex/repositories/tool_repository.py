"""
Repository for Tool database operations
"""

from retrodex.models.tool import Tool
from retrodex.repositories.base_repository import CatalogRepository


class ToolRepository(CatalogRepository):
    """Repository for Tool database operations"""

    model = Tool
    search_columns = ("name", "description", "developer")
    filter_columns = ("developer", "license", "category_id")
    array_filters = ("category", "supported_platforms", "features")
