"""
Models package

One file per catalog model; compatibility join tables live together in
compatibility.py alongside the relation registry.
"""

from .category import Category
from .console import Console
from .game import Game
from .emulator import Emulator
from .handheld import Handheld
from .tool import Tool
from .customfirmware import CustomFirmware
from .cfwapp import CfwApp
from .portmaster import PortMasterPort
from .setup import Setup, SetupComponent
from .preset import Preset, PresetItem
from .link import Link
from .emulationperformance import EmulationPerformance
from .errorlog import ErrorLog
from .applog import AppLog
from .compatibility import (
    COMPATIBILITY_RELATIONS,
    CfwAppFirmwareCompatibility,
    CfwAppHandheldCompatibility,
    EmulatorHandheldCompatibility,
    GameEmulatorCompatibility,
    GameHandheldCompatibility,
    HandheldCustomFirmware,
    ToolConsoleCompatibility,
    ToolEmulatorCompatibility,
    ToolFirmwareCompatibility,
    ToolGameCompatibility,
    ToolHandheldCompatibility,
)

__all__ = [
    "Category",
    "Console",
    "Game",
    "Emulator",
    "Handheld",
    "Tool",
    "CustomFirmware",
    "CfwApp",
    "PortMasterPort",
    "Setup",
    "SetupComponent",
    "Preset",
    "PresetItem",
    "Link",
    "EmulationPerformance",
    "ErrorLog",
    "AppLog",
    "COMPATIBILITY_RELATIONS",
    "HandheldCustomFirmware",
    "ToolHandheldCompatibility",
    "ToolConsoleCompatibility",
    "ToolEmulatorCompatibility",
    "ToolGameCompatibility",
    "ToolFirmwareCompatibility",
    "EmulatorHandheldCompatibility",
    "GameEmulatorCompatibility",
    "GameHandheldCompatibility",
    "CfwAppFirmwareCompatibility",
    "CfwAppHandheldCompatibility",
]
