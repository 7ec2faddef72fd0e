"""
Compatibility join models

Each "X compatible with Y" relation is its own join table. Every row links
one left entity to one right entity with optional free-text notes; the pair
is unique per table.
"""

from collections import namedtuple

from retrodex.constants import (
    ENTITY_CFW_APP,
    ENTITY_CONSOLE,
    ENTITY_CUSTOM_FIRMWARE,
    ENTITY_EMULATOR,
    ENTITY_GAME,
    ENTITY_HANDHELD,
    ENTITY_TOOL,
)
from retrodex.db import db
from retrodex.models.base import CompatibilityMixin
from retrodex.models.cfwapp import CfwApp
from retrodex.models.console import Console
from retrodex.models.customfirmware import CustomFirmware
from retrodex.models.emulator import Emulator
from retrodex.models.game import Game
from retrodex.models.handheld import Handheld
from retrodex.models.tool import Tool


def _fk(table):
    return db.ForeignKey(f"{table}.id", ondelete="CASCADE")


class HandheldCustomFirmware(CompatibilityMixin, db.Model):
    __tablename__ = "handheld_custom_firmware"

    handheld_id = db.Column(db.String(36), _fk("handhelds"), nullable=False, index=True)
    custom_firmware_id = db.Column(db.String(36), _fk("custom_firmware"), nullable=False, index=True)
    status = db.Column(db.String(30))  # 'supported', 'experimental', 'unsupported'
    install_notes = db.Column(db.Text)

    __table_args__ = (db.UniqueConstraint("handheld_id", "custom_firmware_id", name="uq_handheld_cfw"),)


class ToolHandheldCompatibility(CompatibilityMixin, db.Model):
    __tablename__ = "tool_handheld_compatibility"

    tool_id = db.Column(db.String(36), _fk("tools"), nullable=False, index=True)
    handheld_id = db.Column(db.String(36), _fk("handhelds"), nullable=False, index=True)

    __table_args__ = (db.UniqueConstraint("tool_id", "handheld_id", name="uq_tool_handheld"),)


class ToolConsoleCompatibility(CompatibilityMixin, db.Model):
    __tablename__ = "tool_console_compatibility"

    tool_id = db.Column(db.String(36), _fk("tools"), nullable=False, index=True)
    console_id = db.Column(db.String(36), _fk("consoles"), nullable=False, index=True)

    __table_args__ = (db.UniqueConstraint("tool_id", "console_id", name="uq_tool_console"),)


class ToolEmulatorCompatibility(CompatibilityMixin, db.Model):
    __tablename__ = "tool_emulator_compatibility"

    tool_id = db.Column(db.String(36), _fk("tools"), nullable=False, index=True)
    emulator_id = db.Column(db.String(36), _fk("emulators"), nullable=False, index=True)

    __table_args__ = (db.UniqueConstraint("tool_id", "emulator_id", name="uq_tool_emulator"),)


class ToolGameCompatibility(CompatibilityMixin, db.Model):
    __tablename__ = "tool_game_compatibility"

    tool_id = db.Column(db.String(36), _fk("tools"), nullable=False, index=True)
    game_id = db.Column(db.String(36), _fk("games"), nullable=False, index=True)

    __table_args__ = (db.UniqueConstraint("tool_id", "game_id", name="uq_tool_game"),)


class ToolFirmwareCompatibility(CompatibilityMixin, db.Model):
    __tablename__ = "tool_firmware_compatibility"

    tool_id = db.Column(db.String(36), _fk("tools"), nullable=False, index=True)
    custom_firmware_id = db.Column(db.String(36), _fk("custom_firmware"), nullable=False, index=True)

    __table_args__ = (db.UniqueConstraint("tool_id", "custom_firmware_id", name="uq_tool_firmware"),)


class EmulatorHandheldCompatibility(CompatibilityMixin, db.Model):
    __tablename__ = "emulator_handheld_compatibility"

    emulator_id = db.Column(db.String(36), _fk("emulators"), nullable=False, index=True)
    handheld_id = db.Column(db.String(36), _fk("handhelds"), nullable=False, index=True)
    performance_rating = db.Column(db.String(20))

    __table_args__ = (db.UniqueConstraint("emulator_id", "handheld_id", name="uq_emulator_handheld"),)


class GameEmulatorCompatibility(CompatibilityMixin, db.Model):
    __tablename__ = "game_emulator_compatibility"

    game_id = db.Column(db.String(36), _fk("games"), nullable=False, index=True)
    emulator_id = db.Column(db.String(36), _fk("emulators"), nullable=False, index=True)
    status = db.Column(db.String(30))

    __table_args__ = (db.UniqueConstraint("game_id", "emulator_id", name="uq_game_emulator"),)


class GameHandheldCompatibility(CompatibilityMixin, db.Model):
    __tablename__ = "game_handheld_compatibility"

    game_id = db.Column(db.String(36), _fk("games"), nullable=False, index=True)
    handheld_id = db.Column(db.String(36), _fk("handhelds"), nullable=False, index=True)
    status = db.Column(db.String(30))

    __table_args__ = (db.UniqueConstraint("game_id", "handheld_id", name="uq_game_handheld"),)


class CfwAppFirmwareCompatibility(CompatibilityMixin, db.Model):
    __tablename__ = "cfw_app_firmware_compatibility"

    cfw_app_id = db.Column(db.String(36), _fk("cfw_apps"), nullable=False, index=True)
    custom_firmware_id = db.Column(db.String(36), _fk("custom_firmware"), nullable=False, index=True)

    __table_args__ = (db.UniqueConstraint("cfw_app_id", "custom_firmware_id", name="uq_cfw_app_firmware"),)


class CfwAppHandheldCompatibility(CompatibilityMixin, db.Model):
    __tablename__ = "cfw_app_handheld_compatibility"

    cfw_app_id = db.Column(db.String(36), _fk("cfw_apps"), nullable=False, index=True)
    handheld_id = db.Column(db.String(36), _fk("handhelds"), nullable=False, index=True)

    __table_args__ = (db.UniqueConstraint("cfw_app_id", "handheld_id", name="uq_cfw_app_handheld"),)


# Describes one side of a relation: entity type name, foreign key column on
# the join table and the referenced model.
RelationSide = namedtuple("RelationSide", ["entity_type", "key", "model"])

CompatibilityRelation = namedtuple("CompatibilityRelation", ["name", "model", "left", "right", "extra_fields"])


def _relation(name, model, left, right, extra_fields=()):
    return CompatibilityRelation(name, model, RelationSide(*left), RelationSide(*right), tuple(extra_fields))


COMPATIBILITY_RELATIONS = {
    relation.name: relation
    for relation in (
        _relation(
            "handheld-custom-firmware",
            HandheldCustomFirmware,
            (ENTITY_HANDHELD, "handheld_id", Handheld),
            (ENTITY_CUSTOM_FIRMWARE, "custom_firmware_id", CustomFirmware),
            ("status", "install_notes"),
        ),
        _relation(
            "tool-handheld",
            ToolHandheldCompatibility,
            (ENTITY_TOOL, "tool_id", Tool),
            (ENTITY_HANDHELD, "handheld_id", Handheld),
        ),
        _relation(
            "tool-console",
            ToolConsoleCompatibility,
            (ENTITY_TOOL, "tool_id", Tool),
            (ENTITY_CONSOLE, "console_id", Console),
        ),
        _relation(
            "tool-emulator",
            ToolEmulatorCompatibility,
            (ENTITY_TOOL, "tool_id", Tool),
            (ENTITY_EMULATOR, "emulator_id", Emulator),
        ),
        _relation(
            "tool-game",
            ToolGameCompatibility,
            (ENTITY_TOOL, "tool_id", Tool),
            (ENTITY_GAME, "game_id", Game),
        ),
        _relation(
            "tool-custom-firmware",
            ToolFirmwareCompatibility,
            (ENTITY_TOOL, "tool_id", Tool),
            (ENTITY_CUSTOM_FIRMWARE, "custom_firmware_id", CustomFirmware),
        ),
        _relation(
            "emulator-handheld",
            EmulatorHandheldCompatibility,
            (ENTITY_EMULATOR, "emulator_id", Emulator),
            (ENTITY_HANDHELD, "handheld_id", Handheld),
            ("performance_rating",),
        ),
        _relation(
            "game-emulator",
            GameEmulatorCompatibility,
            (ENTITY_GAME, "game_id", Game),
            (ENTITY_EMULATOR, "emulator_id", Emulator),
            ("status",),
        ),
        _relation(
            "game-handheld",
            GameHandheldCompatibility,
            (ENTITY_GAME, "game_id", Game),
            (ENTITY_HANDHELD, "handheld_id", Handheld),
            ("status",),
        ),
        _relation(
            "cfw-app-custom-firmware",
            CfwAppFirmwareCompatibility,
            (ENTITY_CFW_APP, "cfw_app_id", CfwApp),
            (ENTITY_CUSTOM_FIRMWARE, "custom_firmware_id", CustomFirmware),
        ),
        _relation(
            "cfw-app-handheld",
            CfwAppHandheldCompatibility,
            (ENTITY_CFW_APP, "cfw_app_id", CfwApp),
            (ENTITY_HANDHELD, "handheld_id", Handheld),
        ),
    )
}


def relations_for_entity(entity_type):
    """Yield (relation, side_name) for every relation touching entity_type"""
    for relation in COMPATIBILITY_RELATIONS.values():
        if relation.left.entity_type == entity_type:
            yield relation, "left"
        if relation.right.entity_type == entity_type:
            yield relation, "right"
