"""
Repository for PortMasterPort database operations
"""

from retrodex.models.portmaster import PortMasterPort
from retrodex.repositories.base_repository import CatalogRepository


class PortMasterPortRepository(CatalogRepository):
    """Repository for PortMasterPort database operations"""

    model = PortMasterPort
    search_columns = ("name", "description", "instructions")
    filter_columns = ("ready_to_run",)
    array_filters = ("genre", "necessary_files")
