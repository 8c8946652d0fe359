"""
logicruntime

Per-actor interpreter for visual-scripting logic sheets.

This package provides:
- logic-sheet loading (nodes + connections JSON) and per-actor graph indices
- push evaluation along exec wires and pull evaluation along data wires
- an explicit per-tick value cache owned by the host loop

Authoring (the node editor) and the host game loop live outside this package.
"""

from .core.cache import CacheKey, ValueCache
from .core.config import InterpreterConfig
from .core.interpreter import LogicInterpreter
from .core.models import ActorContext, AudioSink, EngineContext
from .core.variables import VariableRegistry
from .logic_sheet import (
    DuplicateNodeIdError,
    GraphIndex,
    LogicNode,
    LogicSheet,
    NodeKind,
    TraversalAborted,
    ValidationResult,
    load_logic_sheet_json,
    validate_logic_sheet,
)

__all__ = [
    # Interpreter
    "LogicInterpreter",
    "InterpreterConfig",
    # Host state
    "ActorContext",
    "EngineContext",
    "AudioSink",
    "VariableRegistry",
    # Cache
    "ValueCache",
    "CacheKey",
    # Logic sheets
    "LogicSheet",
    "LogicNode",
    "NodeKind",
    "GraphIndex",
    "load_logic_sheet_json",
    "validate_logic_sheet",
    "ValidationResult",
    # Errors
    "DuplicateNodeIdError",
    "TraversalAborted",
]
