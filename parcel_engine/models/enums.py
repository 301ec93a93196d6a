"""Enumeration types for land and offer entities."""

from enum import Enum


class GenerationMode(str, Enum):
    UNIFORM = "uniform"
    MIXED = "mixed"
    AUTO = "auto"
    SMART = "smart"
    CUSTOM_FLEXIBLE = "custom_flexible"
    ADVANCED = "advanced"


class SmartStrategy(str, Enum):
    MAX_PIECES = "max_pieces"
    MIN_WASTE = "min_waste"
    BALANCED = "balanced"


class FlexibleItemType(str, Enum):
    AUTO = "auto"
    CUSTOM = "custom"
    AUTO_SMART = "auto_smart"
    SMART = "smart"


class PieceStatus(str, Enum):
    AVAILABLE = "Available"
    RESERVED = "Reserved"
    SOLD = "Sold"
    CANCELLED = "Cancelled"
