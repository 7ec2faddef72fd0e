"""
Emulation Performance Service - how well a handheld runs each console
"""

from typing import Any, Dict

import structlog

from retrodex.constants import PERFORMANCE_RATINGS
from retrodex.db import atomic, log_app_event, to_dict
from retrodex.exceptions import ConflictException, NotFoundException, ValidationException
from retrodex.repositories.console_repository import ConsoleRepository
from retrodex.repositories.emulationperformance_repository import EmulationPerformanceRepository
from retrodex.repositories.handheld_repository import HandheldRepository
from retrodex.utils import clean_text, parse_list_field

logger = structlog.get_logger()

_TEXT_FIELDS = ("fps_range", "resolution_supported", "notes", "settings_notes")


def _rating(data):
    rating = clean_text(data.get("performance_rating"))
    rating = rating.lower() if rating else None
    if rating not in PERFORMANCE_RATINGS:
        raise ValidationException(
            f"performance_rating must be one of: {', '.join(PERFORMANCE_RATINGS)}", field="performance_rating"
        )
    return rating


def serialize_performance(row):
    data = to_dict(row)
    data["console"] = to_dict(row.console) if row.console else None
    data["handheld"] = to_dict(row.handheld) if row.handheld else None
    return data


class PerformanceService:
    """Emulation performance rows for handheld/console pairs"""

    @staticmethod
    def for_handheld(handheld_id: str):
        return EmulationPerformanceRepository.get_for_handheld(handheld_id)

    @staticmethod
    def for_console(console_id: str):
        return EmulationPerformanceRepository.get_for_console(console_id)

    @staticmethod
    def create(data: Dict[str, Any]):
        handheld_id = clean_text(data.get("handheld_id"))
        console_id = clean_text(data.get("console_id"))
        if not handheld_id:
            raise ValidationException("handheld_id is required", field="handheld_id")
        if not console_id:
            raise ValidationException("console_id is required", field="console_id")
        if not HandheldRepository.get_by_id(handheld_id):
            raise NotFoundException("Handheld", handheld_id)
        if not ConsoleRepository.get_by_id(console_id):
            raise NotFoundException("Console", console_id)
        if EmulationPerformanceRepository.get_by_pair(handheld_id, console_id):
            raise ConflictException("This handheld already has a performance entry for that console")

        values = {field: clean_text(data.get(field)) for field in _TEXT_FIELDS}
        values["tested_games"] = parse_list_field(data.get("tested_games")) or None

        with atomic("Create emulation performance"):
            row = EmulationPerformanceRepository.create(
                handheld_id=handheld_id,
                console_id=console_id,
                performance_rating=_rating(data),
                **values,
            )

        logger.info("performance_created", id=row.id, handheld_id=handheld_id, console_id=console_id)
        log_app_event("INFO", "Added emulation performance", id=row.id, handheld_id=handheld_id)
        return row

    @staticmethod
    def update(id: str, data: Dict[str, Any]):
        row = EmulationPerformanceRepository.get_by_id(id)
        if not row:
            raise NotFoundException("Emulation performance", id)

        values = {field: clean_text(data.get(field)) for field in _TEXT_FIELDS if field in data}
        if "performance_rating" in data:
            values["performance_rating"] = _rating(data)
        if "tested_games" in data:
            values["tested_games"] = parse_list_field(data.get("tested_games")) or None

        with atomic("Update emulation performance"):
            row = EmulationPerformanceRepository.update(id, **values)

        log_app_event("INFO", "Updated emulation performance", id=id)
        return row

    @staticmethod
    def delete(id: str) -> bool:
        if not EmulationPerformanceRepository.get_by_id(id):
            raise NotFoundException("Emulation performance", id)

        with atomic("Delete emulation performance"):
            EmulationPerformanceRepository.delete(id)

        log_app_event("INFO", "Deleted emulation performance", id=id)
        return True
