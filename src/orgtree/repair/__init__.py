"""Resilient JSON repair for model output."""

from .parser import (
    DEFAULT_PREVIEW_CHARS,
    ParseResult,
    RepairParser,
    loads,
    repair_and_parse,
    strict_loads,
)
from .strategies import DEFAULT_STRATEGIES, RepairStrategy

__all__ = [
    "DEFAULT_PREVIEW_CHARS",
    "DEFAULT_STRATEGIES",
    "ParseResult",
    "RepairParser",
    "RepairStrategy",
    "loads",
    "repair_and_parse",
    "strict_loads",
]
