"""
Link Service - external links attached to catalog entities
"""

from typing import Any, Dict

import structlog

from retrodex.constants import ENTITY_TYPES, LINK_TYPE_GENERAL
from retrodex.db import atomic, log_app_event
from retrodex.exceptions import NotFoundException, ValidationException
from retrodex.repositories.link_repository import LinkRepository
from retrodex.utils import clean_text, parse_bool, parse_int

logger = structlog.get_logger()


def _link_name(data):
    # Forms post "title", the API uses "name"
    return clean_text(data.get("name") if "name" in data else data.get("title"))


def _check_entity(entity_type, entity_id):
    from retrodex.app_services.catalog_service import CatalogService

    if entity_type not in ENTITY_TYPES:
        raise ValidationException(f"Unknown entity type '{entity_type}'", field="entity_type")
    if not entity_id:
        raise ValidationException("entity_id is required", field="entity_id")
    CatalogService.get(entity_type, entity_id)


class LinkService:
    """Create, edit and list links"""

    @staticmethod
    def for_entity(entity_type: str, entity_id: str):
        return LinkRepository.get_for_entity(entity_type, entity_id)

    @staticmethod
    def create(data: Dict[str, Any]):
        entity_type = clean_text(data.get("entity_type"))
        entity_id = clean_text(data.get("entity_id"))
        _check_entity(entity_type, entity_id)

        name = _link_name(data)
        url = clean_text(data.get("url"))
        if not name:
            raise ValidationException("Link name is required", field="name")
        if not url:
            raise ValidationException("Link URL is required", field="url")

        with atomic("Create link"):
            link = LinkRepository.create(
                commit=False,
                entity_type=entity_type,
                entity_id=entity_id,
                name=name,
                url=url,
                description=clean_text(data.get("description")),
                link_type=clean_text(data.get("link_type")) or LINK_TYPE_GENERAL,
                is_primary=parse_bool(data.get("is_primary")),
                display_order=parse_int(data.get("display_order"), default=0),
            )

        logger.info("link_created", id=link.id, entity_type=entity_type, entity_id=entity_id)
        log_app_event("INFO", f"Added link {name}", entity_type=entity_type, entity_id=entity_id, id=link.id)
        return link

    @staticmethod
    def update(id: str, data: Dict[str, Any]):
        link = LinkRepository.get_by_id(id)
        if not link:
            raise NotFoundException("Link", id)

        values = {}
        if "name" in data or "title" in data:
            values["name"] = _link_name(data)
            if not values["name"]:
                raise ValidationException("Link name is required", field="name")
        if "url" in data:
            values["url"] = clean_text(data.get("url"))
            if not values["url"]:
                raise ValidationException("Link URL is required", field="url")
        if "description" in data:
            values["description"] = clean_text(data.get("description"))
        if "link_type" in data:
            values["link_type"] = clean_text(data.get("link_type")) or LINK_TYPE_GENERAL
        if "is_primary" in data:
            values["is_primary"] = parse_bool(data.get("is_primary"))
        if "display_order" in data:
            values["display_order"] = parse_int(data.get("display_order"), default=0)

        with atomic("Update link"):
            for key, value in values.items():
                setattr(link, key, value)

        log_app_event("INFO", f"Updated link {link.name}", id=id)
        return link

    @staticmethod
    def delete(id: str) -> bool:
        if not LinkRepository.get_by_id(id):
            raise NotFoundException("Link", id)

        with atomic("Delete link"):
            LinkRepository.delete(id)

        log_app_event("INFO", "Deleted link", id=id)
        return True
