"""
Read Service - public catalog pages, search, stats and health
"""

from typing import Any, Dict

import structlog
from sqlalchemy.exc import SQLAlchemyError

from retrodex.app_services.catalog_service import CHILDREN, ENTITIES, CatalogService
from retrodex.app_services.compatibility_service import CompatibilityService
from retrodex.app_services.performance_service import serialize_performance
from retrodex.constants import (
    CATALOG_TYPES,
    ENTITY_CFW_APP,
    ENTITY_CONSOLE,
    ENTITY_CUSTOM_FIRMWARE,
    ENTITY_EMULATOR,
    ENTITY_GAME,
    ENTITY_HANDHELD,
    ENTITY_PRESET,
    ENTITY_SETUP,
    ENTITY_TOOL,
)
from retrodex.db import db, to_dict
from retrodex.repositories.console_repository import ConsoleRepository
from retrodex.repositories.emulationperformance_repository import EmulationPerformanceRepository
from retrodex.repositories.emulator_repository import EmulatorRepository
from retrodex.repositories.game_repository import GameRepository
from retrodex.repositories.link_repository import LinkRepository
from retrodex.settings import load_settings
from retrodex.utils import now_utc

logger = structlog.get_logger()

# Entity types covered by global search, in response order
SEARCH_TYPES = [
    ENTITY_CONSOLE,
    ENTITY_EMULATOR,
    ENTITY_GAME,
    ENTITY_HANDHELD,
    ENTITY_TOOL,
    ENTITY_CUSTOM_FIRMWARE,
]


def _links(entity_type, entity_id):
    return [to_dict(link) for link in LinkRepository.get_for_entity(entity_type, entity_id)]


def serialize_children(entity_type, parent_id):
    """Child rows of a preset or setup, each with the entity it points at"""
    child = CHILDREN[entity_type]
    rows = []
    for row in child.repository.get_for_parent(parent_id):
        data = to_dict(row)
        target = ENTITIES[getattr(row, child.type_field)].repository.get_by_id(getattr(row, child.id_field))
        data["entity"] = to_dict(target) if target else None
        rows.append(data)
    return rows


def _base_detail(entity_type, slug, limits=None):
    item = CatalogService.get_by_slug(entity_type, slug, public=True)
    detail = {
        entity_type: to_dict(item),
        "links": _links(entity_type, item.id),
        "compatibility": CompatibilityService.for_entity(entity_type, item.id, limits=limits),
    }
    return item, detail


class ReadService:
    """Read model behind the public catalog"""

    @staticmethod
    def console_detail(slug: str) -> Dict[str, Any]:
        catalog = load_settings()["catalog"]
        console, detail = _base_detail(ENTITY_CONSOLE, slug)
        detail["emulators"] = [
            to_dict(emulator)
            for emulator in EmulatorRepository.get_for_console(
                console.id, recommended_only=True, limit=catalog["console_emulators_limit"]
            )
        ]
        detail["games"] = [
            to_dict(game) for game in GameRepository.get_by_console(console.id, limit=catalog["console_games_limit"])
        ]
        detail["emulation_performance"] = [
            serialize_performance(row) for row in EmulationPerformanceRepository.get_for_console(console.id)
        ]
        return detail

    @staticmethod
    def emulator_detail(slug: str) -> Dict[str, Any]:
        catalog = load_settings()["catalog"]
        emulator, detail = _base_detail(
            ENTITY_EMULATOR, slug, limits={"game-emulator": catalog["emulator_games_limit"]}
        )
        detail["consoles"] = [to_dict(console) for console in ConsoleRepository.get_by_ids(emulator.console_ids or [])]
        return detail

    @staticmethod
    def game_detail(slug: str) -> Dict[str, Any]:
        game, detail = _base_detail(ENTITY_GAME, slug)
        detail["console"] = to_dict(game.console) if game.console else None
        return detail

    @staticmethod
    def handheld_detail(slug: str) -> Dict[str, Any]:
        handheld, detail = _base_detail(ENTITY_HANDHELD, slug)
        detail["emulation_performance"] = [
            serialize_performance(row) for row in EmulationPerformanceRepository.get_for_handheld(handheld.id)
        ]
        return detail

    @staticmethod
    def tool_detail(slug: str) -> Dict[str, Any]:
        return _base_detail(ENTITY_TOOL, slug)[1]

    @staticmethod
    def custom_firmware_detail(slug: str) -> Dict[str, Any]:
        return _base_detail(ENTITY_CUSTOM_FIRMWARE, slug)[1]

    @staticmethod
    def cfw_app_detail(slug: str) -> Dict[str, Any]:
        return _base_detail(ENTITY_CFW_APP, slug)[1]

    @staticmethod
    def setup_detail(slug: str) -> Dict[str, Any]:
        setup = CatalogService.get_by_slug(ENTITY_SETUP, slug, public=True)
        return {ENTITY_SETUP: to_dict(setup), "components": serialize_children(ENTITY_SETUP, setup.id)}

    @staticmethod
    def preset_detail(slug: str) -> Dict[str, Any]:
        """Public preset with its handheld and items; private presets are not found"""
        preset = CatalogService.get_by_slug(ENTITY_PRESET, slug, public=True)
        return {
            ENTITY_PRESET: to_dict(preset),
            "handheld": to_dict(preset.handheld) if preset.handheld else None,
            "items": serialize_children(ENTITY_PRESET, preset.id),
        }

    @staticmethod
    def detail(entity_type: str, slug: str) -> Dict[str, Any]:
        handler = _DETAIL_HANDLERS.get(entity_type)
        if handler is None:
            return {entity_type: to_dict(CatalogService.get_by_slug(entity_type, slug, public=True))}
        return handler(slug)

    @staticmethod
    def search(query_text: str) -> Dict[str, Any]:
        """Substring search across the main entity types; blank queries return empty buckets"""
        limit = load_settings()["search"]["limit"]
        query_text = (query_text or "").strip()

        results = {}
        for entity_type in SEARCH_TYPES:
            spec = ENTITIES[entity_type]
            rows = spec.repository.search(query_text, limit=limit) if query_text else []
            results[spec.plural] = [to_dict(row) for row in rows]

        logger.debug("catalog_search", query=query_text, hits=sum(len(v) for v in results.values()))
        return {"query": query_text, "results": results}

    @staticmethod
    def stats() -> Dict[str, int]:
        counts = {
            ENTITIES[entity_type].plural: ENTITIES[entity_type].repository.count() for entity_type in CATALOG_TYPES
        }
        counts["links"] = LinkRepository.count()
        counts["emulation_performance"] = EmulationPerformanceRepository.count()
        return counts

    @staticmethod
    def recent() -> Dict[str, Any]:
        limit = load_settings()["catalog"]["recent_limit"]
        recent = {}
        for entity_type in CATALOG_TYPES:
            spec = ENTITIES[entity_type]
            rows = spec.repository.recent(limit, filters=spec.public_filters)
            recent[spec.plural] = [to_dict(row) for row in rows]
        return recent

    @staticmethod
    def health():
        """Returns (payload, healthy)"""
        timestamp = now_utc().isoformat()
        try:
            ConsoleRepository.first_id()
            return {"status": "healthy", "database": "connected", "timestamp": timestamp}, True
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error("health_check_failed", error=str(e))
            return {"status": "unhealthy", "database": "disconnected", "error": str(e), "timestamp": timestamp}, False


_DETAIL_HANDLERS = {
    ENTITY_CONSOLE: ReadService.console_detail,
    ENTITY_EMULATOR: ReadService.emulator_detail,
    ENTITY_GAME: ReadService.game_detail,
    ENTITY_HANDHELD: ReadService.handheld_detail,
    ENTITY_TOOL: ReadService.tool_detail,
    ENTITY_CUSTOM_FIRMWARE: ReadService.custom_firmware_detail,
    ENTITY_CFW_APP: ReadService.cfw_app_detail,
    ENTITY_SETUP: ReadService.setup_detail,
    ENTITY_PRESET: ReadService.preset_detail,
}
