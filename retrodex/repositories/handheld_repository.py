"""
Repository for Handheld database operations
"""

from retrodex.models.handheld import Handheld
from retrodex.repositories.base_repository import CatalogRepository


class HandheldRepository(CatalogRepository):
    """Repository for Handheld database operations"""

    model = Handheld
    search_columns = ("name", "description", "manufacturer", "processor", "operating_system")
    filter_columns = ("manufacturer", "operating_system", "price_range")
    array_filters = ("connectivity", "supported_formats")
    sort_columns = ("name", "manufacturer", "price", "release_date", "created_at", "updated_at")
