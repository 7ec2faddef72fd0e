"""
Repository for CustomFirmware database operations
"""

from retrodex.models.customfirmware import CustomFirmware
from retrodex.repositories.base_repository import CatalogRepository


class CustomFirmwareRepository(CatalogRepository):
    """Repository for CustomFirmware database operations"""

    model = CustomFirmware
    filter_columns = ("installation_difficulty", "license")
    array_filters = ("features", "requirements")
    sort_columns = ("name", "release_date", "installation_difficulty", "created_at", "updated_at")
