"""
Compatibility Service - generic add/remove/list over every join table
"""

from typing import Any, Dict, Optional

import structlog

from retrodex.db import atomic, db, log_app_event, to_dict
from retrodex.exceptions import ConflictException, NotFoundException, ValidationException
from retrodex.models.compatibility import COMPATIBILITY_RELATIONS, relations_for_entity
from retrodex.repositories.compatibility_repository import CompatibilityRepository
from retrodex.utils import clean_text

logger = structlog.get_logger()

SIDES = ("left", "right")


def _other(side):
    return "right" if side == "left" else "left"


def serialize_join(relation, row, embed_side=None):
    """Join row as a dict, with the entity on embed_side nested under its type"""
    data = to_dict(row)
    data["relation"] = relation.name
    if embed_side:
        target = getattr(relation, embed_side)
        entity = db.session.get(target.model, getattr(row, target.key))
        data[target.entity_type] = to_dict(entity) if entity else None
    return data


class CompatibilityService:
    """Manage "X compatible with Y" rows"""

    @staticmethod
    def get_relation(name: str):
        relation = COMPATIBILITY_RELATIONS.get(name)
        if relation is None:
            raise NotFoundException("Compatibility relation", name)
        return relation

    @staticmethod
    def add(relation_name: str, data: Dict[str, Any]):
        """
        Link two entities. Returns (row, created).

        Submitting a pair that already exists returns the stored row and
        inserts nothing.
        """
        relation = CompatibilityService.get_relation(relation_name)

        ids = {}
        for side in SIDES:
            target = getattr(relation, side)
            value = clean_text(data.get(target.key))
            if not value:
                raise ValidationException(f"{target.key} is required", field=target.key)
            if not db.session.get(target.model, value):
                raise NotFoundException(target.entity_type.replace("_", " ").capitalize(), value)
            ids[side] = value

        existing = CompatibilityRepository.get_pair(relation, ids["left"], ids["right"])
        if existing:
            logger.info("compatibility_exists", relation=relation.name, id=existing.id)
            return existing, False

        extra = {field: clean_text(data.get(field)) for field in relation.extra_fields}
        extra["compatibility_notes"] = clean_text(data.get("compatibility_notes") or data.get("notes"))

        try:
            with atomic(f"Add {relation.name} compatibility"):
                row = CompatibilityRepository.create(relation, ids["left"], ids["right"], commit=False, **extra)
        except ConflictException:
            # Lost a race against an identical submission
            existing = CompatibilityRepository.get_pair(relation, ids["left"], ids["right"])
            if existing:
                return existing, False
            raise

        logger.info("compatibility_added", relation=relation.name, id=row.id)
        log_app_event("INFO", f"Added {relation.name} compatibility", relation=relation.name, id=row.id)
        return row, True

    @staticmethod
    def update(relation_name: str, join_id: str, data: Dict[str, Any]):
        """Edit the notes and extra columns of an existing join row"""
        relation = CompatibilityService.get_relation(relation_name)
        row = CompatibilityRepository.get_by_id(relation, join_id)
        if not row:
            raise NotFoundException("Compatibility entry", join_id)

        with atomic(f"Update {relation.name} compatibility"):
            for field in relation.extra_fields + ("compatibility_notes",):
                if field in data:
                    setattr(row, field, clean_text(data.get(field)))
        return row

    @staticmethod
    def remove(relation_name: str, join_id: str) -> bool:
        relation = CompatibilityService.get_relation(relation_name)
        if not CompatibilityRepository.get_by_id(relation, join_id):
            raise NotFoundException("Compatibility entry", join_id)

        with atomic(f"Remove {relation.name} compatibility"):
            CompatibilityRepository.delete(relation, join_id)

        logger.info("compatibility_removed", relation=relation.name, id=join_id)
        log_app_event("INFO", f"Removed {relation.name} compatibility", relation=relation.name, id=join_id)
        return True

    @staticmethod
    def list_for(relation_name: str, side: str, entity_id: str, limit: Optional[int] = None):
        """Rows where `side` references entity_id, with the other side embedded"""
        relation = CompatibilityService.get_relation(relation_name)
        if side not in SIDES:
            raise ValidationException("side must be 'left' or 'right'", field="side")

        rows = CompatibilityRepository.list_for(relation, side, entity_id)
        if limit:
            rows = rows[:limit]
        return [serialize_join(relation, row, embed_side=_other(side)) for row in rows]

    @staticmethod
    def for_entity(entity_type: str, entity_id: str, limits: Optional[Dict[str, int]] = None):
        """Every compatibility list of one entity, keyed by relation name"""
        limits = limits or {}
        result = {}
        for relation, side in relations_for_entity(entity_type):
            result[relation.name] = CompatibilityService.list_for(
                relation.name, side, entity_id, limit=limits.get(relation.name)
            )
        return result
